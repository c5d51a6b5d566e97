"""プロジェクト探索。

開始ディレクトリから親方向へ .delivery/cli.toml を探索する。
祖先ディレクトリの列は解決済みパスから一度だけ計算するため、
同じディレクトリを二度訪れることはなく、ルートで必ず終了する。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DOT_DELIVERY_DIR_NAME: str = ".delivery"
CONFIG_FILE_NAME: str = "cli.toml"


def config_file_path(root: Path) -> Path:
    """root 配下の .delivery/cli.toml のパスを構築する（存在チェックは行わない）。"""
    return root / DOT_DELIVERY_DIR_NAME / CONFIG_FILE_NAME


def _ancestors(start: Path) -> tuple[Path, ...]:
    """start 自身からファイルシステムルートまでの祖先ディレクトリを近い順に返す。

    循環したシンボリックリンクは解決できたところまでで止め、例外にしない。
    """
    current = Path(os.path.realpath(start))
    return (current, *current.parents)


def find_config_file(start: Path) -> Path | None:
    """start ディレクトリから親方向に .delivery/cli.toml を探索する。

    最も近い祖先で見つかったファイルを返す。ルートまで遡っても
    見つからない場合は None を返す（エラーではない）。

    Args:
        start: 探索開始ディレクトリ。

    Returns:
        最初に見つかった cli.toml のフルパス。見つからなければ None。

    Raises:
        OSError: 探索パス上のアクセス権限エラー等。
    """
    for directory in _ancestors(start):
        candidate = config_file_path(directory)
        logger.debug("Checking %s", candidate)
        if candidate.is_file():
            return candidate
    return None


def find_project_root(start: Path) -> Path | None:
    """start から探索し、.delivery/cli.toml を持つディレクトリを返す。

    Args:
        start: 探索開始ディレクトリ。

    Returns:
        プロジェクトルート。見つからなければ None。
    """
    found = find_config_file(start)
    return found.parent.parent if found is not None else None
