"""Convert raw CSV rows into NormalizedRecords."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from tqdm import tqdm

from ..utils.geocoding.geocoders import Geocoder
from ..utils.geocoding.models import Coords, RegionCode
from ..utils.geocoding.normalizers import AddressNormalizer, fallback_centroid
from .models import (
    NO_ADDRESS_SENTINEL,
    NormalizedRecord,
    determine_map_display_type,
    is_interstate,
)

logger = logging.getLogger('RecordProcessor')

# CSV column names of a yearly source file
COL_NAME = "Name"
COL_CLIENT_ADDRESS = "Address"
COL_PROPERTY_ADDRESS = "Property Purchased"
COL_SERVICE_TYPE = "Type of Service"
COL_DATE_SIGNED = "Date Signed"
COL_DATE_PURCHASE = "Date of Purchase"
COL_EMAIL = "Email"
COL_NOTES = "Notes"


def _field(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def _has_client_address(raw: str) -> bool:
    # contracts without a client address carry a placeholder instead
    return bool(raw) and raw != NO_ADDRESS_SENTINEL


class RecordProcessor:
    """Builds one NormalizedRecord per raw row.

    Rows are processed one at a time and each row's geocode lookups finish
    before the next row starts, since the Geocoder may call a rate-limited
    external service.

    Args:
        geocoder: Resolves cleaned addresses to coordinates
        normalizer: Cleans addresses and classifies their region
    """

    def __init__(self, geocoder: Geocoder, normalizer: AddressNormalizer | None = None):
        self.geocoder = geocoder
        self.normalizer = normalizer or AddressNormalizer()

    def _coords_for(self, address: str, region: RegionCode) -> Coords:
        try:
            return self.geocoder.resolve_or_fallback(address, region)
        except Exception as e:
            logger.warning(f"Geocoder error for '{address}', using {region} centroid: {e}")
            return fallback_centroid(region)

    def process(self, raw_row: Mapping[str, Any], year: str | None = None) -> Optional[NormalizedRecord]:
        """Normalize a single row.

        Returns:
            NormalizedRecord, or None when the row has no name
        """
        name = _field(raw_row, COL_NAME)
        if not name:
            logger.debug(f"Skipping row without a name in {year or 'input'}")
            return None

        raw_client = _field(raw_row, COL_CLIENT_ADDRESS)
        raw_property = _field(raw_row, COL_PROPERTY_ADDRESS)
        has_client = _has_client_address(raw_client)
        has_property = bool(raw_property)

        client_address = self.normalizer.clean(raw_client) if has_client else ""
        property_address = self.normalizer.clean(raw_property) if has_property else ""
        client_region = self.normalizer.classify_region(raw_client) if has_client else RegionCode.UNKNOWN
        property_region = self.normalizer.classify_region(raw_property) if has_property else RegionCode.UNKNOWN

        client_coords = self._coords_for(client_address, client_region) if has_client else None
        property_coords = self._coords_for(property_address, property_region) if has_property else None

        return NormalizedRecord(
            name=name,
            client_address=client_address,
            property_address=property_address,
            service_type=_field(raw_row, COL_SERVICE_TYPE) or "Unknown",
            date_signed=_field(raw_row, COL_DATE_SIGNED),
            date_purchase=_field(raw_row, COL_DATE_PURCHASE),
            email=_field(raw_row, COL_EMAIL),
            notes=_field(raw_row, COL_NOTES),
            client_region=client_region,
            property_region=property_region,
            has_client_location=has_client,
            has_property_location=has_property,
            map_display_type=determine_map_display_type(has_client, has_property),
            client_coords=client_coords,
            property_coords=property_coords,
            is_interstate=is_interstate(client_region, property_region),
        )

    def process_rows(
        self,
        rows: Iterable[Mapping[str, Any]],
        year: str | None = None,
        show_progress: bool = False,
    ) -> list[NormalizedRecord]:
        """Process rows in file order, dropping rows without a name."""
        rows = list(rows)
        iterator = tqdm(rows, desc=f"Processing {year or 'rows'}", disable=not show_progress)

        records = []
        for row in iterator:
            record = self.process(row, year)
            if record is not None:
                records.append(record)
        return records
