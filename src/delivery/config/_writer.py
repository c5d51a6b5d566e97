"""設定ファイルの書き出し。

DeliveryConfig を TOML にシリアライズし <target_dir>/.delivery/cli.toml に保存する。
未設定のフィールドは出力しない。
"""

from __future__ import annotations

from pathlib import Path

import tomli_w
from rich.console import Console
from rich.text import Text

from delivery.config._locator import DOT_DELIVERY_DIR_NAME, config_file_path
from delivery.models.config import DeliveryConfig
from delivery.models.errors import ConfigWriteError

_DOT_DELIVERY_DIR_MODE: int = 0o700


def render_config(config: DeliveryConfig) -> str:
    """設定済みフィールドのみを TOML 文字列に変換する。"""
    return tomli_w.dumps(config.to_table())


def save_config(
    config: DeliveryConfig,
    target_dir: Path,
    *,
    console: Console | None = None,
) -> Path:
    """config を target_dir/.delivery/cli.toml に書き出す。

    .delivery/ が存在しなければ所有者のみ rwx の権限で作成する（既存なら何もしない）。
    ファイルは作成または上書きされる。失敗時のロールバックは行わない。

    Args:
        config: 保存する設定。
        target_dir: .delivery/ を置くディレクトリ。
        console: 進捗表示先。None の場合は stderr に出力する。

    Returns:
        書き出した cli.toml のパス。

    Raises:
        ConfigWriteError: UTF-8 に変換できない値を含む場合、またはディレクトリ作成・書き込みに失敗した場合。
    """
    out = console if console is not None else Console(stderr=True)
    write_dir = target_dir / DOT_DELIVERY_DIR_NAME
    write_path = config_file_path(target_dir)
    toml_text = render_config(config)
    try:
        data = toml_text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ConfigWriteError(
            f"Cannot encode configuration as UTF-8: {e}\n"
            "Check the values passed with --server, --user and the other flags."
        ) from e

    try:
        write_dir.mkdir(mode=_DOT_DELIVERY_DIR_MODE, parents=True, exist_ok=True)
        out.print(
            Text.assemble(
                ("Writing configuration to ", "white"),
                (str(write_path), "yellow"),
            )
        )
        write_path.write_bytes(data)
    except OSError as e:
        raise ConfigWriteError(
            f"Failed to write {write_path}: {e}\n"
            "Check directory permissions and available disk space."
        ) from e

    out.print(Text("New configuration", style="magenta"))
    out.print(Text("-----------------", style="magenta"))
    out.print(Text(toml_text, style="white"), end="")
    return write_path
