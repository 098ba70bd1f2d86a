"""
Address normalizers and region classification.

Provides cleaning of free-text client/property addresses and a
substring-based classifier that maps an address onto a RegionCode.
"""

import re
from typing import Optional, Mapping, Tuple

from .models import Coords, RegionCode

# Checked in this order; the first code found anywhere in the address wins,
# regardless of where in the text it occurs.
REGION_PRIORITY: Tuple[RegionCode, ...] = (
    RegionCode.NSW,
    RegionCode.QLD,
    RegionCode.VIC,
    RegionCode.SA,
    RegionCode.WA,
    RegionCode.TAS,
    RegionCode.NT,
    RegionCode.ACT,
)

# Overseas locations, matched on lower-cased names after the Australian codes
_OVERSEAS_MARKERS: Tuple[Tuple[str, RegionCode], ...] = (
    ("singapore", RegionCode.SINGAPORE),
    ("dubai", RegionCode.DUBAI),
)

# Static centroids used when live geocoding is unavailable or misses
FALLBACK_CENTROIDS: Mapping[RegionCode, Coords] = {
    RegionCode.NSW: Coords(lat=-33.8688, lng=151.2093),
    RegionCode.QLD: Coords(lat=-27.4698, lng=153.0251),
    RegionCode.VIC: Coords(lat=-37.8136, lng=144.9631),
    RegionCode.SA: Coords(lat=-34.9285, lng=138.6007),
    RegionCode.WA: Coords(lat=-31.9505, lng=115.8605),
    RegionCode.TAS: Coords(lat=-42.8821, lng=147.3272),
    RegionCode.NT: Coords(lat=-12.4634, lng=130.8456),
    RegionCode.ACT: Coords(lat=-35.2809, lng=149.1300),
    RegionCode.SINGAPORE: Coords(lat=1.3521, lng=103.8198),
    RegionCode.DUBAI: Coords(lat=25.2048, lng=55.2708),
    RegionCode.UNKNOWN: Coords(lat=-25.2744, lng=133.7751),
}

_RE_NEWLINE = re.compile(r"\r?\n")
_RE_REPEATED_COMMA = re.compile(r",(?:\s*,)+")
_RE_TRAILING_COMMA = re.compile(r",\s*$")


def fallback_centroid(region: Optional[str]) -> Coords:
    """
    Return the static centroid for a region.

    Regions without an entry (including None) get the generic Unknown centroid.
    """
    try:
        return FALLBACK_CENTROIDS[RegionCode(region)]
    except (ValueError, KeyError):
        return FALLBACK_CENTROIDS[RegionCode.UNKNOWN]


class AddressNormalizer:
    """
    Cleans raw address strings and classifies them into a region.

    Handles:
    - Whitespace trimming
    - Embedded newlines (multi-line contract addresses) → ", "
    - Repeated and trailing commas
    """

    def clean(self, address: Optional[str]) -> str:
        """
        Clean a single address.

        Args:
            address: Raw address, possibly None or multi-line

        Returns:
            Cleaned address, or "" for empty/absent input

        Examples:
            clean(" Line1\\nLine2, , ") → "Line1, Line2"
        """
        if not address:
            return ""

        t = str(address).strip()
        t = _RE_NEWLINE.sub(", ", t)
        t = _RE_REPEATED_COMMA.sub(",", t)
        t = _RE_TRAILING_COMMA.sub("", t)
        return t

    def classify_region(self, address: Optional[str]) -> RegionCode:
        """
        Classify an address into a RegionCode.

        Australian codes are matched as case-insensitive substrings in
        REGION_PRIORITY order, then the overseas markers, else Unknown.
        An address containing both "QLD" and "NSW" is NSW.
        """
        if not address:
            return RegionCode.UNKNOWN

        upper = str(address).upper()
        for code in REGION_PRIORITY:
            if code.value in upper:
                return code

        lower = str(address).lower()
        for marker, code in _OVERSEAS_MARKERS:
            if marker in lower:
                return code

        return RegionCode.UNKNOWN
