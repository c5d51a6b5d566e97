"""CliApp — Typer アプリケーション定義。

setup: フラグで指定した値を .delivery/cli.toml に書き出す。
show: 解決済みの設定を JSON で表示する。
get: 単一フィールドを取得する。未設定の場合は指定すべきフラグを案内する。

--config-path は探索開始ディレクトリ（setup では書き出し先）をカレントディレクトリの代わりに指定する。
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from delivery.config import apply_cli_overrides, load_config, save_config
from delivery.models.config import ConfigField, DeliveryConfig
from delivery.models.errors import ConfigWriteError, MissingConfigError
from delivery.models.exit_code import ExitCode

_DISTRIBUTION_NAME = "delivery-cli"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = typer.Typer(
    name="delivery",
    help="Delivery workflow CLI. Manages the project-scoped .delivery/cli.toml.",
    add_completion=False,
    no_args_is_help=True,
)

# --- 設定上書きオプション（フラグ名 → 設定キー） ---

ServerOption = Annotated[
    str | None, typer.Option("--server", help="Delivery server hostname.")
]
UserOption = Annotated[str | None, typer.Option("--user", help="Delivery user name.")]
EnterpriseOption = Annotated[
    str | None, typer.Option("--ent", help="Enterprise name.")
]
OrganizationOption = Annotated[
    str | None, typer.Option("--org", help="Organization name.")
]
ProjectOption = Annotated[str | None, typer.Option("--project", help="Project name.")]
PipelineOption = Annotated[
    str | None, typer.Option("--for", help="Target pipeline (branch) name.")
]
ConfigPathOption = Annotated[
    Path | None,
    typer.Option(
        "--config-path",
        help="Directory to search for .delivery/cli.toml instead of the current directory.",
        file_okay=False,
    ),
]


def _version_callback(value: bool) -> None:
    """--version 指定時にバージョン番号を出力して終了する。"""
    if value:
        print(importlib.metadata.version(_DISTRIBUTION_NAME))
        raise typer.Exit()


def _configure_logging(verbosity: int) -> None:
    """-v の回数に応じてルートロガーのレベルを設定する。

    0 → WARNING, 1 → INFO, 2 以上 → DEBUG。
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr)


def main() -> None:
    """CLI エントリポイント。pyproject.toml の [project.scripts] から呼び出される。"""
    app()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (repeatable)."
        ),
    ] = 0,
) -> None:
    """Delivery workflow CLI."""
    _configure_logging(verbose)


def _build_config_overrides(
    *,
    server: str | None,
    user: str | None,
    enterprise: str | None,
    organization: str | None,
    project: str | None,
    pipeline: str | None,
) -> dict[str, str | None]:
    """CLI オプションから設定キー単位の上書き辞書を構築する。

    --ent, --org, --for はそれぞれ enterprise, organization, pipeline に対応する。
    None（未指定）の除外は apply_cli_overrides が行う。
    """
    return {
        ConfigField.SERVER: server,
        ConfigField.USER: user,
        ConfigField.ENTERPRISE: enterprise,
        ConfigField.ORGANIZATION: organization,
        ConfigField.PROJECT: project,
        ConfigField.PIPELINE: pipeline,
    }


def _resolve_effective_config(
    config_path: Path | None,
    overrides: dict[str, str | None],
) -> DeliveryConfig:
    """探索 → 解決 → CLI 上書きの順に設定を構築する。

    探索中のアクセスエラーは終了コード INPUT_ERROR で終了する。
    """
    try:
        config = load_config(config_path)
    except OSError as e:
        print(
            f"Error: Cannot search for .delivery/cli.toml: {e}\n"
            "Check directory permissions or pass --config-path.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.INPUT_ERROR) from None
    return apply_cli_overrides(config, overrides)


@app.command()
def setup(
    server: ServerOption = None,
    user: UserOption = None,
    enterprise: EnterpriseOption = None,
    organization: OrganizationOption = None,
    project: ProjectOption = None,
    pipeline: PipelineOption = None,
    config_path: ConfigPathOption = None,
) -> None:
    """Write .delivery/cli.toml, merging the given flags over any existing settings."""
    target_dir = config_path if config_path is not None else Path.cwd()
    overrides = _build_config_overrides(
        server=server,
        user=user,
        enterprise=enterprise,
        organization=organization,
        project=project,
        pipeline=pipeline,
    )
    config = _resolve_effective_config(target_dir, overrides)

    try:
        save_config(config, target_dir, console=Console(stderr=True))
    except ConfigWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.EXECUTION_ERROR) from None


@app.command()
def show(
    server: ServerOption = None,
    user: UserOption = None,
    enterprise: EnterpriseOption = None,
    organization: OrganizationOption = None,
    project: ProjectOption = None,
    pipeline: PipelineOption = None,
    config_path: ConfigPathOption = None,
) -> None:
    """Print the effective configuration as JSON (unset fields are null)."""
    overrides = _build_config_overrides(
        server=server,
        user=user,
        enterprise=enterprise,
        organization=organization,
        project=project,
        pipeline=pipeline,
    )
    config = _resolve_effective_config(config_path, overrides)
    print(config.model_dump_json(indent=2))


@app.command()
def get(
    field: Annotated[ConfigField, typer.Argument(help="Configuration key to print.")],
    server: ServerOption = None,
    user: UserOption = None,
    enterprise: EnterpriseOption = None,
    organization: OrganizationOption = None,
    project: ProjectOption = None,
    pipeline: PipelineOption = None,
    config_path: ConfigPathOption = None,
) -> None:
    """Print a single configuration value, or tell which flag sets it."""
    overrides = _build_config_overrides(
        server=server,
        user=user,
        enterprise=enterprise,
        organization=organization,
        project=project,
        pipeline=pipeline,
    )
    config = _resolve_effective_config(config_path, overrides)
    try:
        value = config.require(field)
    except MissingConfigError as e:
        print(f"Error: {e.hint}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.INPUT_ERROR) from None
    print(value)
