from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from dcm_zed.models import Worktree


def create_fake_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


@pytest.fixture()
def bin_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bin"
    create_fake_executable(directory / "dcm")
    return directory


@pytest.fixture()
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def worktree(project_root: Path, bin_dir: Path) -> Worktree:
    return Worktree(
        root_path=project_root,
        env=[("HOME", "/home/u"), ("PATH", str(bin_dir)), ("LANG", "C")],
    )


@pytest.fixture()
def settings_path(project_root: Path) -> Path:
    return project_root / ".zed" / "settings.json"


@pytest.fixture()
def write_settings(settings_path: Path):
    def _write(data: Dict[str, Any]) -> Path:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(json.dumps(data))
        return settings_path

    return _write


@pytest.fixture()
def read_settings(settings_path: Path):
    def _read() -> Dict[str, Any]:
        return json.loads(settings_path.read_text())

    return _read


@pytest.fixture()
def fake_executable():
    return create_fake_executable
