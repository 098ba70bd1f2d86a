"""
Geocoding service wrappers and the cache-backed Geocoder.

GoogleGeocodingService implements the GeocodingService interface over the
Google Geocoding HTTP API. Geocoder sits in front of any service, consulting
the GeocodeCache first and admitting one external lookup at a time.

Reference: https://developers.google.com/maps/documentation/geocoding/requests-geocoding
"""

import threading
import time
from typing import Optional, Any
import logging
import requests

from ..errors import GeocodingError
from .base import GeocodingService, RateLimiter
from .models import Coords, GeocodeResult, GeocodeSource, RegionCode
from .normalizers import fallback_centroid
from .storage import GeocodeCache

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class GoogleGeocodingService(GeocodingService):
    """
    Google Geocoding API wrapper.

    Returns the first (best) result for an address. Transport errors and
    retryable HTTP statuses are retried with exponential backoff, then
    raised as GeocodingError.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_base_url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        timeout: float = 10.0,
        rate_limiter: Optional[RateLimiter] = None,
        max_retries: int = 3,
        retry_delay_s: float = 1.0,
        region_bias: Optional[str] = "au",
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Google geocoding wrapper.

        Args:
            api_key: Google Maps API key; without one the service is unavailable
            api_base_url: Geocoding endpoint
            timeout: HTTP request timeout in seconds
            rate_limiter: Optional rate limiter (defaults to no limit)
            max_retries: Number of attempts on transient errors
            retry_delay_s: Base delay between retries in seconds
            region_bias: ccTLD region bias passed to the API
            session: Optional requests session (created if omitted)
        """
        self.api_key = api_key
        self.api_base_url = api_base_url
        self.timeout = timeout
        self.rate_limiter = rate_limiter
        self.max_retries = max(1, max_retries)
        self.retry_delay_s = retry_delay_s
        self.region_bias = region_bias
        self.session = session or requests.Session()

        logger.info(
            f"Initialized GoogleGeocodingService: available={self.available}, "
            f"retries={self.max_retries}, timeout={timeout}s"
        )

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _extract_location(self, payload: dict[str, Any]) -> Optional[Coords]:
        """
        Extract coordinates from a geocode response.

        Returns:
            Coords of the first result, or None for ZERO_RESULTS / non-OK statuses
        """
        status = payload.get("status")
        if status != "OK":
            if status not in (None, "ZERO_RESULTS"):
                logger.warning(f"Geocoding API returned status {status}: {payload.get('error_message', '')}")
            return None

        results = payload.get("results") or []
        if not results:
            return None

        location = (results[0].get("geometry") or {}).get("location") or {}
        try:
            coords = Coords(lat=float(location.get("lat")), lng=float(location.get("lng")))
        except (TypeError, ValueError):
            return None

        return coords if coords.is_valid() else None

    def _query(self, address: str) -> dict[str, Any]:
        """
        Query the geocoding endpoint once.

        Raises:
            requests.RequestException on network/connection errors
            GeocodingError for non-success HTTP statuses or invalid JSON
        """
        params = {"address": address, "key": self.api_key}
        if self.region_bias:
            params["region"] = self.region_bias

        logger.debug(f"Querying geocoder: {address}")
        response = self.session.get(
            self.api_base_url,
            params=params,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
        )

        if response.status_code >= 400:
            raise GeocodingError(address, f"HTTP status: {response.status_code}", http_status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise GeocodingError(address, "Invalid JSON payload") from e

    def lookup(self, address: str) -> Optional[Coords]:
        """
        Geocode a single address.

        Args:
            address: Free-text address

        Returns:
            Coords or None when the API has no result

        Raises:
            GeocodingError once retries are exhausted
        """
        if not self.available:
            return None

        for attempt in range(self.max_retries):
            if self.rate_limiter:
                self.rate_limiter.wait()

            try:
                return self._extract_location(self._query(address))
            except (requests.RequestException, GeocodingError) as e:
                retryable = not isinstance(e, GeocodingError) or e.http_status in RETRYABLE_STATUS_CODES
                logger.warning(f"Attempt {attempt+1}/{self.max_retries} failed for {address}: {e}")

                if retryable and attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay_s * (2 ** attempt))  # exponential backoff
                    continue
                if isinstance(e, GeocodingError):
                    raise
                raise GeocodingError(address, str(e)[:500]) from e

        return None


class Geocoder:
    """
    Resolves addresses to coordinates through a GeocodeCache and an
    optional external GeocodingService.

    External lookups pass through a semaphore of size one, so no matter how
    many loader threads share this Geocoder, at most one request is in
    flight against the service at a time.
    """

    def __init__(
        self,
        cache: GeocodeCache,
        service: Optional[GeocodingService] = None,
        max_in_flight: int = 1,
    ):
        self.cache = cache
        self.service = service
        self.slot = threading.BoundedSemaphore(max_in_flight)

    @property
    def available(self) -> bool:
        return self.service is not None and self.service.available

    def lookup(self, address: str) -> GeocodeResult:
        """
        Resolve an address and report where the coordinate came from.

        Never raises for service failures; misses come back with coords=None.
        """
        if not address or not address.strip() or not self.available:
            return GeocodeResult(address=address or "")

        key = GeocodeCache.make_key(address)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Geocode cache hit: {key}")
            return GeocodeResult(address=address, coords=cached, source=GeocodeSource.CACHE)

        with self.slot:
            # another thread may have resolved it while we waited
            cached = self.cache.get(key)
            if cached is not None:
                return GeocodeResult(address=address, coords=cached, source=GeocodeSource.CACHE)

            try:
                coords = self.service.lookup(address)
            except Exception as e:
                logger.warning(f"Geocoding failed for: {address} ({e})")
                return GeocodeResult(address=address)

            if coords is None or not coords.is_valid():
                return GeocodeResult(address=address)

            self.cache.put(key, coords)

        return GeocodeResult(address=address, coords=coords, source=GeocodeSource.SERVICE)

    def resolve(self, address: str) -> Optional[Coords]:
        """
        Resolve an address to coordinates.

        Args:
            address: Cleaned address

        Returns:
            Cached or freshly geocoded Coords, or None when the address is
            empty, the service is unavailable, or the lookup missed/failed.
            Misses are not cached, so a later call retries.
        """
        return self.lookup(address).coords

    def resolve_or_fallback(self, address: str, region: Optional[str]) -> Coords:
        """Resolve an address, substituting the region centroid (or the Unknown one) on a miss."""
        coords = self.resolve(address)
        if coords is not None:
            return coords
        return fallback_centroid(region or RegionCode.UNKNOWN)
