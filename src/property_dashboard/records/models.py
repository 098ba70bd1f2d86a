from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..utils.geocoding.models import Coords, RegionCode


NO_ADDRESS_SENTINEL = "No address in contract"


class MapDisplayType(StrEnum):
    """How a record is drawn by the map renderer."""
    BOTH = "both"                # client pin, property pin and connecting line
    CLIENT_ONLY = "client-only"  # client pin only
    SKIP = "skip"                # not drawn


def determine_map_display_type(has_client_location: bool, has_property_location: bool) -> MapDisplayType:
    if has_client_location and has_property_location:
        return MapDisplayType.BOTH
    if has_client_location:
        return MapDisplayType.CLIENT_ONLY
    return MapDisplayType.SKIP


def is_interstate(client_region: str, property_region: str) -> bool:
    """Both regions known and different."""
    return (
        client_region != RegionCode.UNKNOWN
        and property_region != RegionCode.UNKNOWN
        and client_region != property_region
    )


class NormalizedRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    client_address: str = ""
    property_address: str = ""
    service_type: str = "Unknown"
    date_signed: str = ""
    date_purchase: str = ""
    email: str = ""
    notes: str = ""
    client_region: RegionCode = RegionCode.UNKNOWN
    property_region: RegionCode = RegionCode.UNKNOWN
    has_client_location: bool = False
    has_property_location: bool = False
    map_display_type: MapDisplayType = MapDisplayType.SKIP
    client_coords: Optional[Coords] = None
    property_coords: Optional[Coords] = None
    is_interstate: bool = False
    year: Optional[str] = None  # only set by multi-year loads

    def with_year(self, year: str) -> "NormalizedRecord":
        """Copy of this record stamped with its origin year."""
        return self.model_copy(update={"year": str(year)})
