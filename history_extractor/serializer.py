"""レコード列と JSON の相互変換.

時刻は ISO 8601 (UTC, マイクロ秒, 末尾 Z) で書き出す。
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime, timezone

from history_extractor.models import SearchRecord, VisitRecord


def format_timestamp(dt: datetime) -> str:
    """datetime を 1601-01-01T00:00:00.000000Z 形式にする."""
    text = dt.astimezone(timezone.utc).isoformat(timespec="microseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """ISO 8601 文字列（末尾 Z も可）を UTC の datetime に戻す."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value).astimezone(timezone.utc)


def _default(obj):
    """json.dumps で datetime を文字列にする."""
    if isinstance(obj, datetime):
        return format_timestamp(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps_records(records: Sequence[SearchRecord] | Sequence[VisitRecord]) -> str:
    """レコード列を整形済み JSON 配列にする.

    Args:
        records: SearchRecord か VisitRecord のどちらか一方の列

    Returns:
        JSON 文字列。空の列なら "[]"。
    """
    return json.dumps(
        [asdict(r) for r in records],
        default=_default,
        ensure_ascii=False,
        indent=2,
    )


def loads_search_records(text: str) -> list[SearchRecord]:
    """dumps_records の出力から SearchRecord を復元する."""
    return [
        SearchRecord(
            normalized_term=item["normalized_term"],
            visit_count=item["visit_count"],
            last_visit_time=parse_timestamp(item["last_visit_time"]),
        )
        for item in json.loads(text)
    ]


def loads_visit_records(text: str) -> list[VisitRecord]:
    """dumps_records の出力から VisitRecord を復元する."""
    return [
        VisitRecord(
            url=item["url"],
            visit_time=parse_timestamp(item["visit_time"]),
            visit_duration=item["visit_duration"],
        )
        for item in json.loads(text)
    ]
