"""
Request pacing for the external geocoding service.

The Geocoder admits one lookup at a time; the gate below also spaces the
HTTP requests themselves (including retries) so back-to-back addresses
stay under the service's per-second quota.
"""

from __future__ import annotations

import logging
import threading
import time

from .base import RateLimiter

logger = logging.getLogger(__name__)


class SimpleRateGate(RateLimiter):
    """
    Fixed minimum interval between geocoding requests.

    Args:
        requests_per_second: Allowed request rate, usually
            settings.geocode_requests_per_second
    """

    def __init__(self, requests_per_second: float):
        if requests_per_second <= 0:
            raise ValueError(f"requests_per_second must be > 0, got {requests_per_second}")

        self.interval = 1.0 / float(requests_per_second)
        self._next_slot = time.monotonic()
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Sleep until the next request slot opens, then claim it."""
        with self._lock:
            delay = self._next_slot - time.monotonic()
            if delay > 0:
                logger.debug(f"Rate gate holding geocode request for {delay:.3f}s")
                time.sleep(delay)
            self._next_slot = time.monotonic() + self.interval
