from __future__ import annotations

import logging
import threading

from conftest import CSV_2022, CSV_2023, FakeFetcher
from property_dashboard.aggregator import MultiYearAggregator
from property_dashboard.data_loader import YearDataset


def _aggregator(processor, texts, before_fetch=None):
    fetcher = FakeFetcher(texts, before_fetch=before_fetch)
    return MultiYearAggregator(YearDataset(fetcher, processor)), fetcher


def test_records_are_combined_in_year_order_and_tagged(processor):
    aggregator, _ = _aggregator(processor, {"2022": CSV_2022, "2023": CSV_2023})

    result = aggregator.load_all(["2022", "2023"])

    assert [(r.year, r.name) for r in result.combined] == [
        ("2022", "Alice Smith"),
        ("2022", "Bob Jones"),
        ("2023", "Carol White"),
    ]
    assert result.failures == {}
    assert result.succeeded == 2
    assert len(result) == 3


def test_cached_year_records_are_not_tagged(processor):
    aggregator, _ = _aggregator(processor, {"2022": CSV_2022})
    aggregator.load_all(["2022"])

    assert all(r.year is None for r in aggregator.dataset.load("2022"))


def test_failed_year_leaves_empty_slot(processor, caplog):
    aggregator, _ = _aggregator(processor, {"2022": CSV_2022})

    with caplog.at_level(logging.INFO):
        result = aggregator.load_all(["2022", "2023"])

    assert [r.name for r in result.combined] == ["Alice Smith", "Bob Jones"]
    assert result.by_year["2023"] == []
    assert "2023.csv" in result.failures["2023"]
    assert result.succeeded == 1 and result.failed == 1
    assert "Loaded 1/2 years successfully" in caplog.text


def test_every_year_failing_does_not_raise(processor, caplog):
    aggregator, _ = _aggregator(processor, {})

    with caplog.at_level(logging.INFO):
        result = aggregator.load_all(["2022", "2023", "2024"])

    assert result.combined == []
    assert set(result.failures) == {"2022", "2023", "2024"}
    assert "Loaded 0/3 years successfully" in caplog.text
    assert "All years failed to load" in caplog.text


def test_order_follows_request_not_completion(processor):
    later_year_fetched = threading.Event()

    def before_fetch(year):
        if year == "2023":
            later_year_fetched.set()
        else:
            later_year_fetched.wait(timeout=2)

    aggregator, _ = _aggregator(processor, {"2022": CSV_2022, "2023": CSV_2023}, before_fetch)

    result = aggregator.load_all(["2022", "2023"])

    assert [r.year for r in result.combined] == ["2022", "2022", "2023"]


def test_years_are_fetched_concurrently(processor):
    barrier = threading.Barrier(2, timeout=2)
    aggregator, _ = _aggregator(
        processor, {"2022": CSV_2022, "2023": CSV_2023}, before_fetch=lambda _year: barrier.wait()
    )

    result = aggregator.load_all(["2022", "2023"])

    assert result.failures == {}


def test_second_multi_year_load_uses_year_cache(processor):
    aggregator, fetcher = _aggregator(processor, {"2022": CSV_2022, "2023": CSV_2023})

    aggregator.load_all(["2022", "2023"])
    aggregator.load_all(["2023", "2022"])

    assert sorted(fetcher.calls) == ["2022", "2023"]


def test_empty_year_list(processor):
    aggregator, fetcher = _aggregator(processor, {})
    result = aggregator.load_all([])
    assert result.combined == [] and fetcher.calls == []
