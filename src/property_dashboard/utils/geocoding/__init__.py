"""
- Models: Data structures (Coords, RegionCode, GeocodeResult)
- Base classes: Abstract interfaces
- Normalizers: Address cleaning and region classification
- Geocoders: External service wrapper and the cache-backed Geocoder
- Throttling: Rate limiting for API calls
- Storage: Durable key-value stores and the GeocodeCache
"""

from .models import (
    RegionCode,
    GeocodeSource,
    Coords,
    GeocodeResult,
)

from .base import (
    GeocodingService,
    KeyValueStore,
    RateLimiter,
)

from .normalizers import (
    AddressNormalizer,
    REGION_PRIORITY,
    FALLBACK_CENTROIDS,
    fallback_centroid,
)

from .throttling import (
    SimpleRateGate,
)

from .geocoders import (
    GoogleGeocodingService,
    Geocoder,
)

from .storage import (
    DuckDBKeyValueStore,
    InMemoryKeyValueStore,
    GeocodeCache,
    DEFAULT_CACHE_KEY,
)

__all__ = [
    # Models
    "RegionCode",
    "GeocodeSource",
    "Coords",
    "GeocodeResult",
    # Base classes
    "GeocodingService",
    "KeyValueStore",
    "RateLimiter",
    # Normalizers
    "AddressNormalizer",
    "REGION_PRIORITY",
    "FALLBACK_CENTROIDS",
    "fallback_centroid",
    # Throttling
    "SimpleRateGate",
    # Geocoders
    "GoogleGeocodingService",
    "Geocoder",
    # Storage
    "DuckDBKeyValueStore",
    "InMemoryKeyValueStore",
    "GeocodeCache",
    "DEFAULT_CACHE_KEY",
]
