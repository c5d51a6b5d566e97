"""Typer app のテスト。

setup: フラグの書き出し, 既存設定とのマージ, --config-path, 書き込みエラー
show: JSON 出力, CLI 上書き, 壊れた設定ファイル
get: 値の表示, 未設定時のヒント
--version, --verbose, --help

NOTE: Typer の CliRunner は stderr 分離パラメータを公開しないため、
stderr 出力は result.output（stdout + stderr 混合出力）で検証する。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from delivery.cli._app import _configure_logging, app
from delivery.config import parse_config
from delivery.models.errors import ConfigWriteError
from delivery.models.exit_code import ExitCode

PATCH_LOAD_CONFIG = "delivery.cli._app.load_config"
PATCH_SAVE_CONFIG = "delivery.cli._app.save_config"
PATCH_VERSION = "delivery.cli._app.importlib.metadata.version"

runner = CliRunner()


def _write_cli_toml(base: Path, content: str) -> Path:
    """base/.delivery/cli.toml を書き込みパスを返す。"""
    path = base / ".delivery" / "cli.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _read_cli_toml(base: Path) -> dict[str, str]:
    """base/.delivery/cli.toml を読み込み、設定済みフィールドの辞書を返す。"""
    return parse_config(
        (base / ".delivery" / "cli.toml").read_text(encoding="utf-8")
    ).to_table()


class TestAppHelp:
    """--help の動作を検証する。"""

    def test_help_exits_with_zero(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0

    def test_help_shows_subcommands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert "setup" in result.output
        assert "show" in result.output
        assert "get" in result.output

    def test_setup_help_lists_flags(self) -> None:
        result = runner.invoke(app, ["setup", "--help"])
        assert result.exit_code == 0
        for flag in ("--server", "--user", "--ent", "--org", "--project", "--for"):
            assert flag in result.output
        assert "--config-path" in result.output


class TestVersion:
    """--version の動作を検証する。"""

    @patch(PATCH_VERSION, return_value="1.2.3")
    def test_prints_version(self, mock_version: MagicMock) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "1.2.3" in result.output
        mock_version.assert_called_once_with("delivery-cli")


class TestSetup:
    """setup サブコマンド。"""

    def test_writes_flags_to_config_path(self, tmp_path: Path) -> None:
        """フラグの値が --config-path 配下の cli.toml に書き出される。"""
        result = runner.invoke(
            app,
            [
                "setup",
                "--user", "cavalera",
                "--server", "localhost",
                "--ent", "family",
                "--org", "sepultura",
                "--for", "master",
                "--config-path", str(tmp_path),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "New configuration" in result.output
        assert _read_cli_toml(tmp_path) == {
            "server": "localhost",
            "user": "cavalera",
            "enterprise": "family",
            "organization": "sepultura",
            "git_port": "8989",
            "pipeline": "master",
        }

    def test_defaults_to_cwd(self, project_dir: Path) -> None:
        """--config-path 省略時はカレントディレクトリに書き出す。"""
        result = runner.invoke(app, ["setup", "--project", "roots"])
        assert result.exit_code == 0, result.output
        assert _read_cli_toml(project_dir)["project"] == "roots"

    def test_merges_over_existing_file(self, tmp_path: Path) -> None:
        """既存の値は保持され、指定したフラグのみ上書きされる。"""
        _write_cli_toml(tmp_path, 'server = "old"\nuser = "adam"\n')
        result = runner.invoke(
            app, ["setup", "--server", "new", "--config-path", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output
        assert _read_cli_toml(tmp_path) == {"server": "new", "user": "adam"}

    def test_empty_flag_keeps_existing_value(self, tmp_path: Path) -> None:
        """空文字列のフラグは既存の値を上書きしない。"""
        _write_cli_toml(tmp_path, 'server = "keep"\n')
        result = runner.invoke(
            app, ["setup", "--server", "", "--config-path", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output
        assert _read_cli_toml(tmp_path) == {"server": "keep"}

    def test_malformed_existing_file_replaced_with_defaults(
        self, tmp_path: Path
    ) -> None:
        """壊れた既存ファイルはデフォルト値 + フラグで置き換えられる。"""
        _write_cli_toml(tmp_path, "this is = = not toml")
        result = runner.invoke(
            app, ["setup", "--user", "adam", "--config-path", str(tmp_path)]
        )
        assert result.exit_code == 0, result.output
        assert _read_cli_toml(tmp_path) == {
            "user": "adam",
            "git_port": "8989",
            "pipeline": "master",
        }

    @patch(PATCH_SAVE_CONFIG)
    def test_write_error_exits_with_execution_error(
        self, mock_save: MagicMock, tmp_path: Path
    ) -> None:
        """書き込み失敗 → EXECUTION_ERROR とエラーメッセージ。"""
        mock_save.side_effect = ConfigWriteError("Failed to write cli.toml: denied")
        result = runner.invoke(app, ["setup", "--config-path", str(tmp_path)])
        assert result.exit_code == ExitCode.EXECUTION_ERROR
        assert "Error: Failed to write cli.toml" in result.output

    def test_unencodable_flag_keeps_existing_file(self, tmp_path: Path) -> None:
        """UTF-8 に変換できないフラグ値 → EXECUTION_ERROR、既存の cli.toml は保持される。"""
        existing = 'server = "keep"\nuser = "adam"\n'
        path = _write_cli_toml(tmp_path, existing)
        result = runner.invoke(
            app, ["setup", "--user", "a\udcff", "--config-path", str(tmp_path)]
        )
        assert result.exit_code == ExitCode.EXECUTION_ERROR
        assert "Error: Cannot encode configuration as UTF-8" in result.output
        assert path.read_text(encoding="utf-8") == existing

    @patch(PATCH_LOAD_CONFIG)
    def test_search_error_exits_with_input_error(
        self, mock_load: MagicMock, tmp_path: Path
    ) -> None:
        """探索中のアクセスエラー → INPUT_ERROR。"""
        mock_load.side_effect = PermissionError("denied")
        result = runner.invoke(app, ["setup", "--config-path", str(tmp_path)])
        assert result.exit_code == ExitCode.INPUT_ERROR
        assert "Cannot search for .delivery/cli.toml" in result.output


class TestShow:
    """show サブコマンド。"""

    def test_defaults_without_file(self, project_dir: Path) -> None:
        """cli.toml なし → デフォルト値、未設定は null。"""
        result = runner.invoke(app, ["show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {
            "server": None,
            "user": None,
            "enterprise": None,
            "organization": None,
            "project": None,
            "git_port": "8989",
            "pipeline": "master",
        }

    def test_found_from_subdirectory(self, project_dir: Path) -> None:
        """--config-path で指定したサブディレクトリから祖先の cli.toml を探索する。"""
        _write_cli_toml(project_dir, 'server = "127.0.0.1"\n')
        nested = project_dir / "cookbooks" / "build"
        nested.mkdir(parents=True)
        result = runner.invoke(app, ["show", "--config-path", str(nested)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["server"] == "127.0.0.1"
        assert data["git_port"] is None

    def test_flags_override_file(self, project_dir: Path) -> None:
        """CLI フラグはファイルの値より優先される。"""
        _write_cli_toml(project_dir, 'pipeline = "master"\n')
        result = runner.invoke(app, ["show", "--for", "release"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["pipeline"] == "release"

    def test_self_referencing_symlink_config_path(self, project_dir: Path) -> None:
        """--config-path が循環シンボリックリンク → 例外なしで祖先から探索する。"""
        _write_cli_toml(project_dir, 'user = "adam"\n')
        loop = project_dir / "loop"
        loop.symlink_to(loop)
        result = runner.invoke(app, ["show", "--config-path", str(loop)])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["user"] == "adam"


class TestGet:
    """get サブコマンド。"""

    def test_prints_value(self, project_dir: Path) -> None:
        _write_cli_toml(project_dir, 'enterprise = "chef"\n')
        result = runner.invoke(app, ["get", "enterprise"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "chef"

    def test_flag_value(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["get", "organization", "--org", "sepultura"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "sepultura"

    def test_missing_value_shows_hint(self, project_dir: Path) -> None:
        """未設定 → INPUT_ERROR と指定すべきフラグ。"""
        result = runner.invoke(app, ["get", "server"])
        assert result.exit_code == ExitCode.INPUT_ERROR
        assert "Server not set; try --server" in result.output

    def test_unknown_field_is_usage_error(self, project_dir: Path) -> None:
        result = runner.invoke(app, ["get", "color"])
        assert result.exit_code == 2


class TestConfigureLogging:
    """--verbose とログレベルの対応。"""

    @patch("delivery.cli._app.logging.basicConfig")
    def test_levels(self, mock_basic: MagicMock) -> None:
        for verbosity, level in (
            (0, logging.WARNING),
            (1, logging.INFO),
            (2, logging.DEBUG),
            (5, logging.DEBUG),
        ):
            _configure_logging(verbosity)
            assert mock_basic.call_args.kwargs["level"] == level

    @patch("delivery.cli._app._configure_logging")
    def test_verbose_flag_counted(
        self, mock_configure: MagicMock, project_dir: Path
    ) -> None:
        result = runner.invoke(app, ["-vv", "show"])
        assert result.exit_code == 0, result.output
        mock_configure.assert_called_once_with(2)
