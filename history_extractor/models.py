"""データモデル定義."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SearchRecord:
    """検索語ごとに集計した1件."""

    normalized_term: str
    visit_count: int  # 紐づく URL の訪問回数の合計
    last_visit_time: datetime  # UTC


@dataclass(frozen=True)
class VisitRecord:
    """ページ訪問1回分."""

    url: str
    visit_time: datetime  # UTC
    visit_duration: int  # マイクロ秒


@dataclass(frozen=True)
class RowResult(Generic[T]):
    """1行分のデコード結果.

    成功時は record、失敗時は reason を持つ。
    """

    record: T | None = None
    reason: str | None = None

    def __post_init__(self):
        if (self.record is None) == (self.reason is None):
            raise ValueError("RowResult needs exactly one of record or reason")

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def decoded(cls, record: T) -> RowResult[T]:
        return cls(record=record)

    @classmethod
    def dropped(cls, reason: str) -> RowResult[T]:
        return cls(reason=reason)
