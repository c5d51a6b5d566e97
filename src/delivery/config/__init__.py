"""設定管理モジュール。"""

from delivery.config._loader import config_from_table, parse_config, read_config_text
from delivery.config._locator import (
    config_file_path,
    find_config_file,
    find_project_root,
)
from delivery.config._resolver import (
    apply_cli_overrides,
    filter_cli_overrides,
    load_config,
    resolve_config,
)
from delivery.config._writer import render_config, save_config

__all__ = [
    "apply_cli_overrides",
    "config_file_path",
    "config_from_table",
    "filter_cli_overrides",
    "find_config_file",
    "find_project_root",
    "load_config",
    "parse_config",
    "read_config_text",
    "render_config",
    "resolve_config",
    "save_config",
]
