"""Vivaldi 履歴抽出: メインエントリーポイント.

処理フロー:
  1. 入力 History ファイルのパスを決める
  2. 一時ディレクトリにコピーして読み取り専用で開く
  3. 出力ファイルを作る（--force が無ければ既存ファイルはエラー）
  4. visit / search のクエリを実行
  5. JSON に書き出して件数を出す
"""

from __future__ import annotations

import argparse
import logging
import sqlite3
import sys
import tempfile
from contextlib import closing
from datetime import datetime
from pathlib import Path

from history_extractor import config
from history_extractor.queries import StoreAccessError, get_search_records, get_visit_records
from history_extractor.serializer import dumps_records
from history_extractor.store import copy_store, open_store, resolve_default_input_path

logger = logging.getLogger(__name__)

COMMANDS = {
    "visit": get_visit_records,
    "search": get_search_records,
}


def setup_logging(verbose: bool = False) -> None:
    """ロギングの初期設定."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.LOG_DIR is not None:
        config.LOG_DIR.mkdir(parents=True, exist_ok=True)
        log_file = config.LOG_DIR / f"extractor_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    """visit / search サブコマンドの引数パーサを作る."""
    parser = argparse.ArgumentParser(
        prog="vivaldi-history",
        description="Extract search terms or page visits from a Vivaldi History database as JSON.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-i", "--input", help="Path to the input file.")
    common.add_argument(
        "-o", "--output", default=config.OUTPUT_PATH, help="Path to the output file."
    )
    common.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the output file if it already exists.",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers.add_parser("visit", parents=[common], help="Export page visits.")
    subparsers.add_parser("search", parents=[common], help="Export search terms.")
    return parser


def resolve_input_path(arg: str | None) -> Path:
    """入力パスを決める.

    優先順: --input > HISTORY_EXTRACTOR_INPUT > OS 既定パス（存在する場合） > ./History
    """
    if arg:
        return Path(arg)
    if config.INPUT_PATH:
        return Path(config.INPUT_PATH)
    default = resolve_default_input_path(sys.platform)
    if default is not None and default.is_file():
        return default
    return Path(config.FALLBACK_INPUT_NAME)


def extract(command: str, conn: sqlite3.Connection, output: Path, force: bool) -> int:
    """クエリを実行して output に書き出し、件数を返す."""
    mode = "w" if force else "x"
    with output.open(mode, encoding="utf-8") as out:
        records = COMMANDS[command](conn)
        out.write(dumps_records(records))
    return len(records)


def run(argv: list[str] | None = None) -> int:
    """メイン処理. 終了コードを返す."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    input_path = resolve_input_path(args.input)
    output_path = Path(args.output)
    logger.info("入力: %s", input_path)

    try:
        with tempfile.TemporaryDirectory(prefix="vivaldi-history-") as tmp:
            store_path = copy_store(input_path, Path(tmp))
            with closing(open_store(store_path)) as conn:
                items_num = extract(args.command, conn, output_path, args.force)
    except FileNotFoundError as e:
        logger.error("ファイルが見つかりません: %s", e)
        return 1
    except FileExistsError:
        logger.error("出力ファイルが既に存在します（上書きは --force）: %s", output_path)
        return 1
    except StoreAccessError as e:
        logger.error("クエリ実行に失敗しました: %s", e)
        return 1

    logger.info("出力: %s", output_path)
    logger.info("items number: %d", items_num)
    return 0


def main() -> None:
    """コンソールスクリプトの入口."""
    sys.exit(run())


if __name__ == "__main__":
    main()
