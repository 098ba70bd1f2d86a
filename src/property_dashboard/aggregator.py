"""Concurrent multi-year loading with per-year failure tolerance."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Iterable
import logging

from .data_loader import YearDataset
from .records.models import NormalizedRecord

logger = logging.getLogger('MultiYearAggregator')


@dataclass
class MultiYearResult:
    """Combined output of a multi-year load.

    `combined` holds every year's records in the requested year order, each
    stamped with its origin year. Years that failed have an empty slot in
    `by_year` and a reason in `failures`.
    """
    years: list[str]
    combined: list[NormalizedRecord] = field(default_factory=list)
    by_year: dict[str, list[NormalizedRecord]] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.years) - len(self.failures)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def __len__(self) -> int:
        return len(self.combined)


class MultiYearAggregator:
    """Loads several years at once through a shared YearDataset.

    Every year is submitted to a thread pool at the same time. A failing year
    is logged and left empty; it never aborts the other years, and load_all()
    never raises, even when every year fails.

    Args:
        dataset: Per-year loader (and cache) shared with single-year loads
        max_workers: Thread pool size (default: one thread per year)
    """

    def __init__(self, dataset: YearDataset, max_workers: int | None = None):
        self.dataset = dataset
        self.max_workers = max_workers

    def load_all(self, years: Iterable[str | int]) -> MultiYearResult:
        years = [str(y) for y in years]
        result = MultiYearResult(years=years)
        if not years:
            return result

        loaded: dict[str, list[NormalizedRecord]] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers or len(years)) as executor:
            future_to_year = {
                executor.submit(self.dataset.load, year): year
                for year in years
            }

            for future in as_completed(future_to_year):
                year = future_to_year[future]
                try:
                    loaded[year] = future.result()
                except Exception as e:
                    logger.warning(f"Failed to load {year}: {e}")
                    result.failures[year] = str(e)
                    loaded[year] = []

        # reassemble in requested order, not completion order
        for year in years:
            records = loaded[year]
            result.by_year[year] = records
            result.combined.extend(r.with_year(year) for r in records)

        logger.info(f"Loaded {result.succeeded}/{len(years)} years successfully")
        if result.failures:
            failed = [f"{y}: {reason}" for y, reason in result.failures.items()]
            if result.succeeded == 0:
                logger.error(f"All years failed to load: {failed}")
            else:
                logger.warning(f"Failed to load: {failed}")

        return result
