"""History DB の場所の解決・コピー・読み取り専用オープン."""

from __future__ import annotations

import logging
import os
import shutil
import sqlite3
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve_default_input_path(
    platform: str,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path | None:
    """OS ごとの Vivaldi 既定プロファイルの History パスを返す.

    Args:
        platform: sys.platform の値
        env: 環境変数（省略時は os.environ）
        home: ホームディレクトリ（省略時は Path.home()）

    Returns:
        既定パス。対応していない OS なら None。
    """
    env = os.environ if env is None else env

    if platform == "win32":
        local_app_data = env.get("LOCALAPPDATA")
        if not local_app_data:
            return None
        return Path(local_app_data) / "Vivaldi" / "User Data" / "Default" / "History"

    home = Path.home() if home is None else home
    if platform == "darwin":
        return home / "Library" / "Application Support" / "Vivaldi" / "Default" / "History"
    if platform.startswith("linux"):
        return home / ".config" / "vivaldi" / "Default" / "History"
    return None


def copy_store(source: Path, dest_dir: Path) -> Path:
    """History DB を作業ディレクトリにコピーする.

    ブラウザ起動中は DB がロックされるため、コピーに対してクエリを投げる。
    """
    if not source.is_file():
        raise FileNotFoundError(f"input file not found: {source}")
    dest = dest_dir / source.name
    shutil.copy2(source, dest)
    logger.debug("コピー: %s -> %s (%d bytes)", source, dest, dest.stat().st_size)
    return dest


def open_store(path: Path) -> sqlite3.Connection:
    """DB を読み取り専用で開く."""
    if not path.is_file():
        raise FileNotFoundError(f"input file not found: {path}")
    uri = f"{path.resolve().as_uri()}?mode=ro"
    return sqlite3.connect(uri, uri=True)
