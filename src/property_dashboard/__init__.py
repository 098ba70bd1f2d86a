"""Yearly client/property records: normalization, geocoding and analytics."""

from .aggregator import MultiYearAggregator, MultiYearResult
from .analytics import AnalyticsEngine, AnalyticsResult, Insight, InsightType
from .data_loader import YearDataset, parse_csv
from .pipeline import DashboardPipeline, PipelineStatus
from .records import NormalizedRecord, MapDisplayType, RecordProcessor
from .sources import HTTPSourceFetcher, LocalFileSourceFetcher, SourceFetcher
from .utils.errors import FetchError, GeocodingError, PipelineError

__all__ = [
    'MultiYearAggregator',
    'MultiYearResult',
    'AnalyticsEngine',
    'AnalyticsResult',
    'Insight',
    'InsightType',
    'YearDataset',
    'parse_csv',
    'DashboardPipeline',
    'PipelineStatus',
    'NormalizedRecord',
    'MapDisplayType',
    'RecordProcessor',
    'HTTPSourceFetcher',
    'LocalFileSourceFetcher',
    'SourceFetcher',
    'FetchError',
    'GeocodingError',
    'PipelineError',
]
