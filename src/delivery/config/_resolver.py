"""設定リゾルバー。

探索結果（ファイルパスまたは None）から DeliveryConfig を構築し、
CLI オプションによる上書きを適用する。

設定ファイルの読み込み・パースに失敗してもエラーは送出せず、
警告を出したうえでデフォルト値を返す（fail-open）。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from delivery.config._loader import parse_config, read_config_text
from delivery.config._locator import find_config_file
from delivery.models.config import DeliveryConfig
from delivery.models.errors import ConfigParseError

logger = logging.getLogger(__name__)


def resolve_config(config_path: Path | None) -> DeliveryConfig:
    """探索結果から DeliveryConfig を構築する。例外は送出しない。

    - config_path が None: デフォルト値の DeliveryConfig を返す。
    - 読み込み・パースに成功: ファイルに存在したフィールドのみを持つ DeliveryConfig を返す。
    - 読み込み・パースに失敗: 警告ログを出しデフォルト値を返す。

    Args:
        config_path: find_config_file() の結果。

    Returns:
        解決済みの DeliveryConfig。
    """
    if config_path is None:
        return DeliveryConfig()

    try:
        text = read_config_text(config_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s, using defaults: %s", config_path, e)
        return DeliveryConfig()

    try:
        return parse_config(text)
    except ConfigParseError as e:
        # TODO: 構文エラーを警告のみで無視するか、CLI でエラー終了させるかを決定する。
        logger.warning("Ignoring malformed %s, using defaults: %s", config_path, e)
        return DeliveryConfig()


def load_config(start_dir: Path | None = None) -> DeliveryConfig:
    """start_dir から .delivery/cli.toml を探索し DeliveryConfig を構築する。

    Args:
        start_dir: 探索開始ディレクトリ。None の場合はカレントディレクトリ。

    Returns:
        解決済みの DeliveryConfig。

    Raises:
        OSError: 探索パス上のアクセス権限エラー等。
    """
    effective_start = start_dir if start_dir is not None else Path.cwd()
    return resolve_config(find_config_file(effective_start))


def filter_cli_overrides(cli_options: Mapping[str, str | None]) -> dict[str, str]:
    """CLI オプション辞書から None 値を除外する。

    None 値は「未指定」を意味し、上書き対象から除外する。
    """
    return {k: v for k, v in cli_options.items() if v is not None}


def apply_cli_overrides(
    config: DeliveryConfig,
    cli_options: Mapping[str, str | None],
) -> DeliveryConfig:
    """CLI オプションを config に上書きした新しい DeliveryConfig を返す。

    None と空文字列は未指定扱いで、既存の値を保持する。

    Raises:
        ValueError: 未知のフィールド名が含まれる場合。
    """
    return config.with_overrides(filter_cli_overrides(cli_options))
