"""設定管理モデル。

.delivery/cli.toml の設定項目、デフォルト値、アクセサ（取得・上書き）を定義する。
フィールドとヒントメッセージの対応は MISSING_CONFIG_HINTS に一度だけ列挙し、
全アクセサはこの表を参照する。
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from pydantic import Field

from delivery.models._base import DeliveryBaseModel
from delivery.models.errors import MissingConfigError

DEFAULT_GIT_PORT: Final[str] = "8989"
DEFAULT_PIPELINE: Final[str] = "master"


class ConfigField(StrEnum):
    """設定ファイルのキー名。宣言順は書き出し時のキー順と一致する。"""

    SERVER = "server"
    USER = "user"
    ENTERPRISE = "enterprise"
    ORGANIZATION = "organization"
    PROJECT = "project"
    GIT_PORT = "git_port"
    PIPELINE = "pipeline"


MISSING_CONFIG_HINTS: Final[Mapping[ConfigField, str]] = MappingProxyType(
    {
        ConfigField.SERVER: "Server not set; try --server",
        ConfigField.USER: "User not set; try --user",
        ConfigField.ENTERPRISE: "Enterprise not set; try --ent",
        ConfigField.ORGANIZATION: "Organization not set; try --org",
        ConfigField.PROJECT: "Project not set; try --project",
        ConfigField.GIT_PORT: "Git Port not set",
        ConfigField.PIPELINE: "Pipeline not set; try --for",
    }
)


class DeliveryConfig(DeliveryBaseModel):
    """delivery CLI の設定を表す不変モデル。

    デフォルト値のみで有効なインスタンスを構築可能。
    各フィールドは None（未設定）か空でない文字列のいずれか。
    git_port と pipeline 以外はデフォルトで未設定。
    """

    server: str | None = Field(default=None, min_length=1)
    user: str | None = Field(default=None, min_length=1)
    enterprise: str | None = Field(default=None, min_length=1)
    organization: str | None = Field(default=None, min_length=1)
    project: str | None = Field(default=None, min_length=1)
    git_port: str | None = Field(default=DEFAULT_GIT_PORT, min_length=1)
    pipeline: str | None = Field(default=DEFAULT_PIPELINE, min_length=1)

    def require(self, field: ConfigField | str) -> str:
        """設定値を取得する。未設定の場合はヒント付きのエラーを送出する。

        Args:
            field: フィールド名。

        Returns:
            設定値。

        Raises:
            MissingConfigError: フィールドが未設定の場合。
            ValueError: 未知のフィールド名の場合。
        """
        key = ConfigField(field)
        value: str | None = getattr(self, key.value)
        if value is None:
            raise MissingConfigError(key.value, MISSING_CONFIG_HINTS[key])
        return value

    def with_value(self, field: ConfigField | str, value: str) -> DeliveryConfig:
        """フィールドを上書きした新しいインスタンスを返す。

        空文字列は無視され、自身がそのまま返る（既存値を保持）。

        Raises:
            ValueError: 未知のフィールド名の場合。
        """
        key = ConfigField(field)
        if not value:
            return self
        return self.model_copy(update={key.value: value})

    def with_overrides(self, overrides: Mapping[str, str | None]) -> DeliveryConfig:
        """複数フィールドを順に上書きする。None の値はスキップする。"""
        config = self
        for field, value in overrides.items():
            if value is None:
                continue
            config = config.with_value(field, value)
        return config

    def to_table(self) -> dict[str, str]:
        """設定済みフィールドのみを宣言順に並べた辞書を返す。"""
        return {
            key.value: value
            for key in ConfigField
            if (value := getattr(self, key.value)) is not None
        }
