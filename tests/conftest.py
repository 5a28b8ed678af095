from __future__ import annotations

import os
from pathlib import Path

import pytest

from sweepform import _config
from sweepform.modeling import make_rect, make_star

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def pytest_configure():
    os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config at a temporary directory."""
    config_dir = tmp_path / ".sweepform"
    monkeypatch.setattr(_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(_config, "CONFIG_FILE", config_dir / "sweepform.cfg")
    return config_dir / "sweepform.cfg"


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def strip_profile():
    return make_rect(size=(15.0, 2.0))


@pytest.fixture
def star_profile():
    return make_star(points=5, outer_radius=22.0, inner_radius=12.0)
