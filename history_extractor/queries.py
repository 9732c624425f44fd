"""History DB への読み取りクエリ.

クエリは検索語集計と訪問一覧の2本のみ。SQL は固定文字列で持ち、組み立てはしない。

行単位のデコード失敗（型不一致・不正な UTF-8・列不足・時刻のオーバーフロー）はその行を捨てて続行する。
クエリ自体の失敗（テーブルが無い等）は StoreAccessError として呼び出し元に返す。
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Iterable
from typing import TypeVar

from history_extractor.models import RowResult, SearchRecord, VisitRecord
from history_extractor.timestamps import TimestampOverflowError, convert_timestamp

logger = logging.getLogger(__name__)

T = TypeVar("T")

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

SEARCH_RECORDS_SQL = """
    SELECT normalized_term, SUM(visit_count), MAX(last_visit_time)
    FROM keyword_search_terms
    JOIN urls
    ON keyword_search_terms.url_id = urls.id
    WHERE visit_count > 0
    GROUP BY normalized_term
    ORDER BY MAX(last_visit_time) DESC
"""

VISIT_RECORDS_SQL = """
    SELECT urls.url, visit_time, visit_duration
    FROM visits
    JOIN urls
    ON visits.url = urls.id
    ORDER BY visit_duration DESC
"""


class StoreAccessError(Exception):
    """クエリを準備・実行できなかった."""


class _DecodeError(ValueError):
    """1行を目的の型に変換できない."""


class _UndecodableText:
    """UTF-8 として読めなかった TEXT セル."""

    def __init__(self, raw: bytes):
        self.raw = raw


def _decode_text(raw: bytes):
    """TEXT セルを str にする. 読めなければ _UndecodableText を返す."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return _UndecodableText(raw)


def _text(value) -> str:
    """TEXT 列の値を str として取り出す."""
    if isinstance(value, _UndecodableText):
        raise _DecodeError(f"invalid UTF-8 text: {value.raw!r}")
    if not isinstance(value, str):
        raise _DecodeError(f"expected TEXT, got {type(value).__name__}")
    return value


def _integer(value, max_value: int) -> int:
    """0..max_value の INTEGER 値を取り出す."""
    # sqlite3 は INTEGER を int で返す。bool や REAL は受け付けない
    if type(value) is not int:
        raise _DecodeError(f"expected INTEGER, got {type(value).__name__}")
    if not 0 <= value <= max_value:
        raise _DecodeError(f"integer out of range: {value}")
    return value


def _timestamp(value):
    """INTEGER のタイムスタンプを datetime に変換する."""
    if type(value) is not int:
        raise _DecodeError(f"expected INTEGER timestamp, got {type(value).__name__}")
    return convert_timestamp(value)


def decode_search_row(row: tuple) -> RowResult[SearchRecord]:
    """集計済みの1行を SearchRecord にする."""
    try:
        term, count, last_visit = row[0], row[1], row[2]
        return RowResult.decoded(SearchRecord(
            normalized_term=_text(term),
            visit_count=_integer(count, U32_MAX),
            last_visit_time=_timestamp(last_visit),
        ))
    except (IndexError, _DecodeError, TimestampOverflowError) as e:
        return RowResult.dropped(str(e) or type(e).__name__)


def decode_visit_row(row: tuple) -> RowResult[VisitRecord]:
    """訪問1行を VisitRecord にする."""
    try:
        url, visit_time, duration = row[0], row[1], row[2]
        return RowResult.decoded(VisitRecord(
            url=_text(url),
            visit_time=_timestamp(visit_time),
            visit_duration=_integer(duration, U64_MAX),
        ))
    except (IndexError, _DecodeError, TimestampOverflowError) as e:
        return RowResult.dropped(str(e) or type(e).__name__)


def keep_decoded(results: Iterable[RowResult[T]]) -> list[T]:
    """デコードに成功した行だけを順序どおりに残す.

    失敗行は黙って捨てる（件数は DEBUG ログのみ）。
    """
    records: list[T] = []
    dropped = 0
    for result in results:
        if result.ok:
            records.append(result.record)
        else:
            dropped += 1
            logger.debug("行を破棄: %s", result.reason)
    if dropped:
        logger.debug("破棄した行: %d 件", dropped)
    return records


def _run(
    conn: sqlite3.Connection,
    sql: str,
    decode: Callable[[tuple], RowResult[T]],
) -> list[T]:
    """SQL を実行し、デコードできた行だけを返す."""
    # UTF-8 として壊れた TEXT は取得時ではなく行のデコードで落とす
    saved_factory = conn.text_factory
    conn.text_factory = _decode_text
    try:
        cursor = conn.execute(sql)
        try:
            return keep_decoded(decode(row) for row in cursor)
        finally:
            cursor.close()
    except sqlite3.Error as e:
        raise StoreAccessError(str(e)) from e
    finally:
        conn.text_factory = saved_factory


def get_search_records(conn: sqlite3.Connection) -> list[SearchRecord]:
    """検索語ごとの訪問回数合計と最終訪問時刻を取得する.

    visit_count が 0 以下の URL は集計に含めない。

    Returns:
        最終訪問時刻の新しい順。該当なしなら空リスト。

    Raises:
        StoreAccessError: クエリを実行できない場合
    """
    return _run(conn, SEARCH_RECORDS_SQL, decode_search_row)


def get_visit_records(conn: sqlite3.Connection) -> list[VisitRecord]:
    """訪問ごとの URL・訪問時刻・滞在時間を取得する.

    URL テーブルに対応する行が無い訪問は含まれない。

    Returns:
        滞在時間の長い順。訪問が無ければ空リスト。

    Raises:
        StoreAccessError: クエリを実行できない場合
    """
    return _run(conn, VISIT_RECORDS_SQL, decode_visit_row)
