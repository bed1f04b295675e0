from __future__ import annotations

from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.scad_dots directory."""

    config_dir = tmp_path / "config"
    monkeypatch.setenv("SCAD_DOTS_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def examples_dir(project_root: Path) -> Path:
    return project_root / "examples"
