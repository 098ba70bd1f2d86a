from __future__ import annotations

import sys
import threading
import time
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


from property_dashboard.records.processor import RecordProcessor
from property_dashboard.sources import SourceFetcher
from property_dashboard.utils.errors import FetchError
from property_dashboard.utils.geocoding import (
    Coords,
    GeocodeCache,
    Geocoder,
    GeocodingService,
    InMemoryKeyValueStore,
)


SYDNEY = Coords(lat=-33.87, lng=151.21)
BRISBANE = Coords(lat=-27.47, lng=153.03)


class FakeGeocodingService(GeocodingService):
    """Returns canned coordinates and records every call."""

    def __init__(self, results=None, available=True, error=None, delay=0.0):
        self.results = dict(results or {})
        self._available = available
        self.error = error
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    @property
    def available(self):
        return self._available

    def lookup(self, address):
        with self._lock:
            self.calls.append(address)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.results.get(address)
        finally:
            with self._lock:
                self.in_flight -= 1


class FakeFetcher(SourceFetcher):
    """Serves CSV text per year; missing years raise FetchError."""

    def __init__(self, texts, before_fetch=None):
        self.texts = dict(texts)
        self.before_fetch = before_fetch
        self.calls = []
        self._lock = threading.Lock()

    def fetch_text(self, year):
        with self._lock:
            self.calls.append(year)
        if self.before_fetch is not None:
            self.before_fetch(year)
        if year not in self.texts:
            raise FetchError(year, "Not Found")
        return self.texts[year]


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", reason="", raises_json=False):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.reason = reason
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; replays responses (or raises exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        pass


CSV_2022 = """Name,Address,Property Purchased,Type of Service,Date Signed,Date of Purchase,Email,Notes
Alice Smith,"1 George St
Sydney NSW 2000",5 Queen St Brisbane QLD 4000,Investment,01-Jan,15-Feb,alice@example.com,
Bob Jones,No address in contract,,Home,02-Jan,,bob@example.com,call back
,10 Nowhere Rd,,,,,,
"""

CSV_2023 = """Name,Address,Property Purchased,Type of Service,Date Signed,Date of Purchase,Email,Notes
Carol White,"1 Orchard Rd, Singapore 238823",12 Hay St Perth WA 6000,Investment,03-Mar,20-Apr,carol@example.com,
"""


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(store):
    return GeocodeCache(store)


@pytest.fixture
def service():
    return FakeGeocodingService()


@pytest.fixture
def geocoder(cache, service):
    return Geocoder(cache, service)


@pytest.fixture
def processor(geocoder):
    return RecordProcessor(geocoder)
