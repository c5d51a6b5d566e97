"""delivery 固有の例外階層。

各例外は ErrorKind を持ち、CLI 層が終了コードとメッセージを選択できるようにする。
エラーメッセージは解決方法のヒントを含む。
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """エラー種別。"""

    MISSING_CONFIG = "missing_config"
    CONFIG_PARSE = "config_parse"
    IO = "io"


class DeliveryError(Exception):
    """delivery 固有エラーの基底クラス。"""

    kind: ErrorKind


class MissingConfigError(DeliveryError):
    """未設定のフィールドにアクセスした場合のエラー。

    Attributes:
        field: 未設定だったフィールド名。
        hint: 解決に使うフラグを示すメッセージ（例: "Server not set; try --server"）。
    """

    kind = ErrorKind.MISSING_CONFIG

    def __init__(self, field: str, hint: str) -> None:
        super().__init__(hint)
        self.field = field
        self.hint = hint


class ConfigParseError(DeliveryError):
    """設定ファイルの TOML 構文エラー。

    厳格パース (parse_config) からのみ送出される。
    """

    kind = ErrorKind.CONFIG_PARSE


class ConfigWriteError(DeliveryError):
    """設定ファイルまたは .delivery/ ディレクトリの書き込み失敗。"""

    kind = ErrorKind.IO
