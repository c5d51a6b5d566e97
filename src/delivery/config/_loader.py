"""TOML 設定ファイルローダー（厳格パース）。

構文エラーは ConfigParseError として送出する。
デフォルト値へのフォールバックは _resolver.py が担当する。
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path

from delivery.models.config import ConfigField, DeliveryConfig
from delivery.models.errors import ConfigParseError


def read_config_text(path: Path) -> str:
    """設定ファイルの内容をテキストとして読み込む。

    Raises:
        FileNotFoundError: ファイルが存在しない場合。
        PermissionError: 読み取り権限がない場合。
        UnicodeDecodeError: UTF-8 として読めない場合。
    """
    return path.read_text(encoding="utf-8")


def _string_value(value: object) -> str | None:
    """空でない文字列のみを値として採用する。それ以外（bool, テーブル等）は未設定扱い。"""
    if isinstance(value, str) and value:
        return value
    return None


def config_from_table(table: Mapping[str, object]) -> DeliveryConfig:
    """パース済み TOML テーブルから DeliveryConfig を構築する。

    既知のキーのみを参照し、未知のキーは無視する。
    テーブルに存在しないキーは git_port / pipeline を含めて未設定のままとし、
    デフォルト値で補完しない。

    Args:
        table: TOML のトップレベルテーブル。

    Returns:
        テーブルに存在したフィールドのみが設定された DeliveryConfig。
    """
    values = {key.value: _string_value(table.get(key.value)) for key in ConfigField}
    return DeliveryConfig(**values)


def parse_config(text: str) -> DeliveryConfig:
    """TOML テキストをパースし DeliveryConfig を構築する。

    Args:
        text: cli.toml の内容。

    Returns:
        パース結果の DeliveryConfig（デフォルト値の補完なし）。

    Raises:
        ConfigParseError: TOML 構文エラー、または入れ子が深すぎてパースできない場合。
    """
    try:
        table = tomllib.loads(text)
    except (tomllib.TOMLDecodeError, RecursionError) as e:
        raise ConfigParseError(f"Parse errors: {e}") from e
    return config_from_table(table)
