"""CLI テスト共通フィクスチャ。"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """cli.toml を持たない空のプロジェクトディレクトリをカレントにする。"""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project
