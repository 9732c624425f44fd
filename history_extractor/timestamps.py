"""Chromium 系ブラウザのタイムスタンプ変換.

History DB の時刻は 1601-01-01 00:00:00 UTC からの経過マイクロ秒（符号付き 64bit）。
cf. https://www.epochconverter.com/webkit
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

# 1601-01-01 から 1970-01-01 までのマイクロ秒
UNIX_EPOCH_OFFSET_US = 11_644_473_600_000_000


class TimestampOverflowError(OverflowError):
    """変換結果が datetime の表現範囲を超えた."""


def convert_timestamp(ts: int) -> datetime:
    """ブラウザのタイムスタンプを UTC の datetime に変換する.

    Args:
        ts: 1601-01-01 UTC からの経過マイクロ秒

    Returns:
        tz 付き (UTC) の datetime

    Raises:
        TimestampOverflowError: datetime で表現できない範囲の場合
    """
    try:
        return EPOCH + timedelta(microseconds=ts)
    except OverflowError as e:
        raise TimestampOverflowError(f"timestamp out of range: {ts}") from e


def to_browser_timestamp(dt: datetime) -> int:
    """datetime を 1601-01-01 UTC からの経過マイクロ秒に戻す."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(microseconds=1)
