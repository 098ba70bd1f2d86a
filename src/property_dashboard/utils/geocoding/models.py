"""
Core data models for geocoding operations.

These immutable, frozen dataclasses serve as the contract between
different components of the geocoding pipeline.
"""

from dataclasses import dataclass
from typing import Any, Optional
from enum import StrEnum


class RegionCode(StrEnum):
    """Australian state/territory codes plus the recognised overseas locations."""
    NSW = "NSW"
    QLD = "QLD"
    VIC = "VIC"
    SA = "SA"
    WA = "WA"
    TAS = "TAS"
    NT = "NT"
    ACT = "ACT"
    SINGAPORE = "Singapore"
    DUBAI = "Dubai"
    UNKNOWN = "Unknown"


class GeocodeSource(StrEnum):
    """Where a resolved coordinate came from."""
    SERVICE = "service"
    CACHE = "cache"


@dataclass(frozen=True)
class Coords:
    """A WGS84 coordinate pair."""
    lat: float
    lng: float

    def is_valid(self) -> bool:
        """Check the pair is within valid geographic ranges."""
        try:
            return -90 <= self.lat <= 90 and -180 <= self.lng <= 180
        except (TypeError, ValueError):
            return False

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for storage/serialization."""
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Coords":
        """
        Build from a ``{"lat": .., "lng": ..}`` mapping.

        Raises:
            KeyError, TypeError, ValueError if the mapping is malformed
        """
        return cls(lat=float(payload["lat"]), lng=float(payload["lng"]))


@dataclass(frozen=True)
class GeocodeResult:
    """
    The result of resolving one address.

    ``coords`` and ``source`` are both None on a miss.
    """
    address: str
    coords: Optional[Coords] = None
    source: Optional[GeocodeSource] = None
