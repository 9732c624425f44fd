"""テスト用の History DB（Chromium スキーマ）を作る fixture."""

import sqlite3

import pytest

SCHEMA = """
CREATE TABLE urls (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url LONGVARCHAR,
    title LONGVARCHAR,
    visit_count INTEGER DEFAULT 0 NOT NULL,
    typed_count INTEGER DEFAULT 0 NOT NULL,
    last_visit_time INTEGER NOT NULL,
    hidden INTEGER DEFAULT 0 NOT NULL
);
CREATE TABLE visits (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url INTEGER NOT NULL,
    visit_time INTEGER NOT NULL,
    from_visit INTEGER,
    transition INTEGER DEFAULT 0 NOT NULL,
    visit_duration INTEGER DEFAULT 0 NOT NULL
);
CREATE TABLE keyword_search_terms (
    keyword_id INTEGER NOT NULL,
    url_id INTEGER NOT NULL,
    term LONGVARCHAR NOT NULL,
    normalized_term LONGVARCHAR NOT NULL
);
"""


class HistoryDB:
    """行を追加するための薄いヘルパー."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def add_url(self, url_id: int, url: str, visit_count: int, last_visit_time: int) -> None:
        self.conn.execute(
            "INSERT INTO urls (id, url, visit_count, last_visit_time) VALUES (?, ?, ?, ?)",
            (url_id, url, visit_count, last_visit_time),
        )

    def add_search(self, url_id: int, normalized_term) -> None:
        self.conn.execute(
            "INSERT INTO keyword_search_terms (keyword_id, url_id, term, normalized_term) "
            "VALUES (2, ?, ?, ?)",
            (url_id, normalized_term, normalized_term),
        )

    def add_visit(self, url_id: int, visit_time, visit_duration) -> None:
        self.conn.execute(
            "INSERT INTO visits (url, visit_time, visit_duration) VALUES (?, ?, ?)",
            (url_id, visit_time, visit_duration),
        )


def create_history(conn: sqlite3.Connection) -> HistoryDB:
    conn.executescript(SCHEMA)
    return HistoryDB(conn)


@pytest.fixture
def history():
    conn = sqlite3.connect(":memory:")
    try:
        yield create_history(conn)
    finally:
        conn.close()


@pytest.fixture
def history_file(tmp_path):
    """ファイルとして保存した History DB のパスとヘルパーを返す."""
    path = tmp_path / "History"
    conn = sqlite3.connect(path)
    db = create_history(conn)
    yield path, db
    conn.close()
