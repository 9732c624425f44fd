"""設定モジュール: 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# .env は作業ディレクトリから探す
load_dotenv(find_dotenv(usecwd=True))

# --- 入出力 ---
INPUT_PATH: str | None = os.getenv("HISTORY_EXTRACTOR_INPUT") or None
OUTPUT_PATH: str = os.getenv("HISTORY_EXTRACTOR_OUTPUT", "result.json")

# 既定パスが見つからない場合のフォールバック（作業ディレクトリ直下）
FALLBACK_INPUT_NAME = "History"

# --- ログ ---
LOG_LEVEL: str = os.getenv("HISTORY_EXTRACTOR_LOG_LEVEL", "INFO").upper()
_log_dir = os.getenv("HISTORY_EXTRACTOR_LOG_DIR")
LOG_DIR: Path | None = Path(_log_dir) if _log_dir else None
