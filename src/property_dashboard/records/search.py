"""Read-only views over record sets for table consumers."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .models import NormalizedRecord

_SEARCH_FIELDS = (
    "name",
    "client_address",
    "property_address",
    "service_type",
    "date_signed",
    "date_purchase",
    "email",
    "notes",
    "client_region",
    "property_region",
    "year",
)

TABLE_COLUMNS = [
    "year", "name", "client_address", "property_address", "service_type",
    "date_signed", "date_purchase", "email", "notes",
    "client_region", "property_region", "is_interstate", "map_display_type",
    "client_lat", "client_lng", "property_lat", "property_lng",
]


def _search_text(record: NormalizedRecord) -> str:
    parts = [getattr(record, f) for f in _SEARCH_FIELDS]
    return " ".join(str(p) for p in parts if p).lower()


def filter_records(records: Iterable[NormalizedRecord], term: str | None) -> list[NormalizedRecord]:
    """Keep records whose text fields contain `term`, case-insensitively.

    An empty or blank term keeps everything.
    """
    records = list(records)
    needle = (term or "").strip().lower()
    if not needle:
        return records
    return [r for r in records if needle in _search_text(r)]


def records_to_frame(records: Iterable[NormalizedRecord]) -> pd.DataFrame:
    """Flatten records into a DataFrame, one row per record."""
    rows = []
    for r in records:
        row = r.model_dump(exclude={"client_coords", "property_coords"}, mode="json")
        row["client_lat"] = r.client_coords.lat if r.client_coords else None
        row["client_lng"] = r.client_coords.lng if r.client_coords else None
        row["property_lat"] = r.property_coords.lat if r.property_coords else None
        row["property_lng"] = r.property_coords.lng if r.property_coords else None
        rows.append(row)

    return pd.DataFrame(rows, columns=TABLE_COLUMNS)
