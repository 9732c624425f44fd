"""Vivaldi の History DB から検索語・訪問履歴を JSON に書き出す."""

from history_extractor.models import SearchRecord, VisitRecord
from history_extractor.queries import StoreAccessError, get_search_records, get_visit_records
from history_extractor.timestamps import TimestampOverflowError, convert_timestamp

__all__ = [
    "SearchRecord",
    "VisitRecord",
    "StoreAccessError",
    "TimestampOverflowError",
    "convert_timestamp",
    "get_search_records",
    "get_visit_records",
]
