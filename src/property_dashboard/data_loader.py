from __future__ import annotations

from io import StringIO
from typing import Any
import logging
import threading

import pandas as pd

from .records.models import NormalizedRecord
from .records.processor import RecordProcessor
from .sources import SourceFetcher
from .utils.pipeline_mixin import PipelineMixin

logger = logging.getLogger('YearDataset')


def _strip_quotes(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip().strip('"')


def parse_csv(csv_text: str) -> list[dict[str, str]]:
    """Parse CSV text into rows of trimmed string fields keyed by header name.

    Blank lines are skipped. Header names and values are trimmed and stripped
    of surrounding double quotes. Empty text yields no rows.
    """
    if not csv_text or not csv_text.strip():
        return []

    try:
        frame = pd.read_csv(
            StringIO(csv_text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines='warn',
        )
    except pd.errors.EmptyDataError:
        return []

    columns = [_strip_quotes(c) for c in frame.columns]
    rows = []
    for values in frame.itertuples(index=False, name=None):
        rows.append({col: _strip_quotes(v) for col, v in zip(columns, values)})
    return rows


class YearDataset(PipelineMixin):
    """Loads one year's CSV into NormalizedRecords, caching per year.

    Loading runs three steps: fetch the year's file, parse it into rows,
    and process every row (sequentially, since processing may geocode).
    Fetch failures are raised to the caller as FetchError.

    Each year has its own lock, so concurrent loads of the same uncached
    year fetch it once; the second caller gets the cached result.

    Args:
        fetcher: Strategy that returns a year's CSV text
        processor: Converts raw rows into records
        show_progress: Print step progress and row progress bars

    Example:
        dataset = YearDataset(LocalFileSourceFetcher('data'), processor)
        records = dataset.load('2024')
        dataset.invalidate('2024')  # next load() re-fetches
    """

    STAGE = 'YearDataset'

    def __init__(self, fetcher: SourceFetcher, processor: RecordProcessor, show_progress: bool = False):
        self.fetcher = fetcher
        self.processor = processor
        self.show_progress = show_progress
        self.cache: dict[str, list[NormalizedRecord]] = {}
        self._lock = threading.Lock()
        self._year_locks: dict[str, threading.Lock] = {}

    def _year_lock(self, year: str) -> threading.Lock:
        with self._lock:
            return self._year_locks.setdefault(year, threading.Lock())

    def _load_pipeline(self, year: str):
        return [
            ('Fetch', self.fetcher.fetch_text, {'year': year}),
            ('Parse', parse_csv, {}),
            ('Process Rows', self.processor.process_rows, {'year': year, 'show_progress': self.show_progress}),
        ]

    def load(self, year: str | int) -> list[NormalizedRecord]:
        """Return the records for a year, loading them on first use.

        Raises:
            FetchError: if the year's source file is unavailable
        """
        year = str(year)
        with self._year_lock(year):
            cached = self.cache.get(year)
            if cached is not None:
                logger.debug(f"Using cached records for {year}")
                return cached

            records = self._execute_pipeline(progress=self.show_progress, year=year)
            self.cache[year] = records

        logger.info(f"Loaded {len(records)} records for {year}")
        return records

    def invalidate(self, year: str | int) -> None:
        """Drop a year from the cache without re-fetching it.

        Waits for an in-flight load of the same year to finish first.
        """
        year = str(year)
        with self._year_lock(year):
            self.cache.pop(year, None)

    def clear(self) -> None:
        self.cache.clear()

    @property
    def cached_years(self) -> list[str]:
        return list(self.cache)
