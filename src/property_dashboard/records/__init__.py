"""Normalized client/property records and the row processor that builds them."""

from .models import NormalizedRecord, MapDisplayType, determine_map_display_type, is_interstate
from .processor import RecordProcessor
from .search import filter_records, records_to_frame

__all__ = [
    'NormalizedRecord',
    'MapDisplayType',
    'determine_map_display_type',
    'is_interstate',
    'RecordProcessor',
    'filter_records',
    'records_to_frame',
]
