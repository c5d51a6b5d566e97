"""delivery ドメインモデルパッケージ。"""

from delivery.models._base import DeliveryBaseModel
from delivery.models.config import (
    DEFAULT_GIT_PORT,
    DEFAULT_PIPELINE,
    MISSING_CONFIG_HINTS,
    ConfigField,
    DeliveryConfig,
)
from delivery.models.errors import (
    ConfigParseError,
    ConfigWriteError,
    DeliveryError,
    ErrorKind,
    MissingConfigError,
)
from delivery.models.exit_code import ExitCode

__all__ = [
    "DEFAULT_GIT_PORT",
    "DEFAULT_PIPELINE",
    "MISSING_CONFIG_HINTS",
    "ConfigField",
    "ConfigParseError",
    "ConfigWriteError",
    "DeliveryBaseModel",
    "DeliveryConfig",
    "DeliveryError",
    "ErrorKind",
    "ExitCode",
    "MissingConfigError",
]
