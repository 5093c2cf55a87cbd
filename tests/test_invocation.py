from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from dcm_zed.config import ResolvedSettings, UserSettings
from dcm_zed.invocation import (
    build_command,
    build_environment,
    initialization_options,
    workspace_configuration,
)


def make_settings(**overrides: Any) -> ResolvedSettings:
    values = dict(
        user=UserSettings(),
        executable_path=Path("/usr/local/bin/dcm"),
        sdk_path=None,
        root_path=Path("/w"),
        excluded_folders=[],
        log_file_path=None,
        env=[("HOME", "/home/u"), ("PWD", "/somewhere/else")],
    )
    values.update(overrides)
    return ResolvedSettings(**values)


def test_minimal_command() -> None:
    command = build_command(make_settings())
    assert command.command == "/usr/local/bin/dcm"
    assert command.args == ["start-server", "--root-folder=/w", "--client=zed"]


def test_full_command_keeps_flag_order() -> None:
    user = UserSettings(
        show_new_version=False,
        show_unused_code=True,
        show_unused_files=True,
        disable_baseline=True,
        enable_old_formatter=True,
        analyze_only_opened=True,
    )
    settings = make_settings(
        user=user,
        sdk_path=Path("/opt/dart"),
        excluded_folders=[Path("/a"), Path("/b"), Path("/c")],
        log_file_path=Path("/w/.zed/dcm.log"),
    )
    assert build_command(settings).args == [
        "start-server",
        "--sdk-path=/opt/dart",
        "--root-folder=/w",
        "--no-show-new-version-update",
        "--show-unused-code",
        "--only-opened",
        "--excluded-folders=/a,/b,/c",
        "--show-unused-files",
        "--disable-baseline",
        "--logs=/w/.zed/dcm.log",
        "--old-formatter",
        "--client=zed",
    ]


def test_empty_excluded_folders_omit_flag() -> None:
    args = build_command(make_settings(excluded_folders=[])).args
    assert not any(arg.startswith("--excluded-folders") for arg in args)


def test_environment_upserts_root_variables() -> None:
    env = build_environment(make_settings())
    assert env == [
        ("HOME", "/home/u"),
        ("PWD", "/w"),
        ("ZED_WORKTREE_ROOT", "/w"),
    ]


def test_environment_adds_sdk_only_when_resolved() -> None:
    without_sdk = dict(build_environment(make_settings()))
    with_sdk = dict(build_environment(make_settings(sdk_path=Path("/opt/dart"))))
    assert "DART_SDK" not in without_sdk
    assert with_sdk["DART_SDK"] == "/opt/dart"


def test_environment_does_not_touch_snapshot() -> None:
    settings = make_settings()
    build_command(settings)
    assert settings.env == [("HOME", "/home/u"), ("PWD", "/somewhere/else")]


def test_initialization_options() -> None:
    settings = make_settings(
        user=UserSettings(show_unused_code=True, analyze_only_opened=True),
        log_file_path=Path("/w/.zed/dcm.log"),
    )
    assert initialization_options(settings) == {
        "show_unused_code": True,
        "show_unused_files": False,
        "disable_baseline": False,
        "enable_old_formatter": False,
        "analyze_only_opened": True,
        "log_file_path": "/w/.zed/dcm.log",
    }


@pytest.mark.parametrize("builder", [initialization_options, workspace_configuration])
def test_payloads_tolerate_missing_paths(builder) -> None:
    payload = builder(make_settings())
    flattened = payload.get("dcm", payload)
    assert flattened.get("log_file_path", flattened.get("logFilePath")) is None


def test_workspace_configuration() -> None:
    settings = make_settings(
        user=UserSettings(disable_baseline=True, enable_old_formatter=True),
        sdk_path=Path("/opt/dart"),
        excluded_folders=[Path("/w/gen"), Path("/w/build")],
    )
    assert workspace_configuration(settings) == {
        "dcm": {
            "showUnusedCode": False,
            "showUnusedFiles": False,
            "disableBaseline": True,
            "enableOldFormatter": True,
            "analyzeOnlyOpened": False,
            "logFilePath": None,
            "dartSdkPath": "/opt/dart",
            "excludedFolders": ["/w/gen", "/w/build"],
        }
    }
