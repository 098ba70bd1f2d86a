"""Composition root wiring the loaders, geocoder and analytics together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
import logging

from .aggregator import MultiYearAggregator, MultiYearResult
from .analytics import AnalyticsEngine, AnalyticsResult
from .data_loader import YearDataset
from .records.models import NormalizedRecord
from .records.processor import RecordProcessor
from .records.search import filter_records
from .settings import Settings, settings
from .sources import HTTPSourceFetcher, LocalFileSourceFetcher, SourceFetcher
from .utils.geocoding import (
    DuckDBKeyValueStore,
    GeocodeCache,
    Geocoder,
    GoogleGeocodingService,
    InMemoryKeyValueStore,
    KeyValueStore,
    SimpleRateGate,
)

logger = logging.getLogger('DashboardPipeline')

ALL_YEARS = 'all'


@dataclass(frozen=True)
class PipelineStatus:
    current_year: Optional[str]
    has_data: bool
    data_count: int
    cache_size: int
    geocode_cache_size: int


class DashboardPipeline:
    """Single entry point for loading, refreshing and summarizing yearly data.

    Every component is built once here and passed into the next; nothing in
    the package reaches for a shared global instance.

    Usage:
        pipeline = DashboardPipeline.from_settings()
        records = pipeline.load_year('2024')      # FetchError if 2024.csv is missing
        everything = pipeline.load_year('all')    # never raises for missing years
        analytics = pipeline.summarize()
    """

    def __init__(
        self,
        dataset: YearDataset,
        aggregator: MultiYearAggregator,
        engine: AnalyticsEngine,
        geocode_cache: GeocodeCache,
        years: Iterable[str],
        store: KeyValueStore | None = None,
    ):
        self.dataset = dataset
        self.aggregator = aggregator
        self.engine = engine
        self.geocode_cache = geocode_cache
        self.years = [str(y) for y in years]
        self.store = store

        self.current_year: Optional[str] = None
        self.current_data: list[NormalizedRecord] | MultiYearResult | None = None

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        fetcher: SourceFetcher | None = None,
        store: KeyValueStore | None = None,
    ) -> 'DashboardPipeline':
        """Build a pipeline from configuration.

        Args:
            config: Settings to use (default: the module-level settings)
            fetcher: Override the source fetcher chosen from data_url/data_dir
            store: Override the durable store chosen from geocode_cache_path
        """
        config = config or settings

        if store is None:
            if config.geocode_cache_path:
                store = DuckDBKeyValueStore(config.geocode_cache_path)
            else:
                store = InMemoryKeyValueStore()
        cache = GeocodeCache(store, key=config.geocode_cache_key)

        service = GoogleGeocodingService(
            api_key=config.google_maps_api_key,
            timeout=config.request_timeout,
            rate_limiter=SimpleRateGate(config.geocode_requests_per_second),
            max_retries=config.max_retries,
        )
        geocoder = Geocoder(cache, service)
        if not geocoder.available:
            logger.info("No geocoding API key configured; using regional fallback coordinates")

        if fetcher is None:
            if config.data_url:
                fetcher = HTTPSourceFetcher(config.data_url, timeout=config.request_timeout)
            else:
                fetcher = LocalFileSourceFetcher(config.data_dir)

        dataset = YearDataset(fetcher, RecordProcessor(geocoder), show_progress=config.show_progress)
        aggregator = MultiYearAggregator(dataset, max_workers=config.max_workers)

        return cls(
            dataset=dataset,
            aggregator=aggregator,
            engine=AnalyticsEngine(),
            geocode_cache=cache,
            years=config.years,
            store=store,
        )

    def load_year(self, year: str | int) -> list[NormalizedRecord] | MultiYearResult:
        """Load one year, or every configured year for 'all'.

        Raises:
            FetchError: for a single year whose file is unavailable
        """
        year = str(year)
        if year == ALL_YEARS:
            return self.load_all()

        self.current_year = year
        records = self.dataset.load(year)
        self.current_data = records
        return records

    def load_all(self, years: Iterable[str | int] | None = None) -> MultiYearResult:
        self.current_year = ALL_YEARS
        result = self.aggregator.load_all(self.years if years is None else years)
        self.current_data = result
        return result

    def refresh(self, year: str | int | None = None) -> list[NormalizedRecord] | MultiYearResult | None:
        """Drop the cached records for a year (default: the current one) and reload it."""
        year = str(year) if year is not None else self.current_year
        if year is None:
            return None

        if year == ALL_YEARS:
            for y in self.years:
                self.dataset.invalidate(y)
        else:
            self.dataset.invalidate(year)
        return self.load_year(year)

    def reset(self) -> None:
        """Forget the current selection and clear both the year and geocode caches."""
        self.current_year = None
        self.current_data = None
        self.dataset.clear()
        self.geocode_cache.clear()

    def records(self) -> list[NormalizedRecord]:
        if self.current_data is None:
            return []
        if isinstance(self.current_data, MultiYearResult):
            return self.current_data.combined
        return self.current_data

    def summarize(self, records: Iterable[NormalizedRecord] | None = None) -> AnalyticsResult:
        return self.engine.summarize(self.records() if records is None else records)

    def search(self, term: str | None) -> list[NormalizedRecord]:
        return filter_records(self.records(), term)

    def status(self) -> PipelineStatus:
        records = self.records()
        return PipelineStatus(
            current_year=self.current_year,
            has_data=self.current_data is not None,
            data_count=len(records),
            cache_size=len(self.dataset.cached_years),
            geocode_cache_size=len(self.geocode_cache),
        )

    def close(self) -> None:
        if self.store is not None:
            self.store.close()
