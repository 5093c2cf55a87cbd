"""Build the DCM language server invocation and its JSON payloads."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ResolvedSettings
from .models import EnvVars
from .paths import path_to_string

CLIENT_ID = "zed"
START_SERVER = "start-server"


@dataclass(slots=True)
class LaunchCommand:
    """Executable, arguments and environment for the server process."""

    command: str
    args: List[str]
    env: EnvVars


def build_command(settings: ResolvedSettings) -> LaunchCommand:
    """Translate resolved settings into the server command line."""

    user = settings.user
    args: List[str] = [START_SERVER]

    if settings.sdk_path is not None:
        args.append(f"--sdk-path={path_to_string(settings.sdk_path)}")

    args.append(f"--root-folder={path_to_string(settings.root_path)}")

    if not user.show_new_version:
        args.append("--no-show-new-version-update")
    if user.show_unused_code:
        args.append("--show-unused-code")
    if user.analyze_only_opened:
        args.append("--only-opened")
    if settings.excluded_folders:
        joined = ",".join(path_to_string(path) for path in settings.excluded_folders)
        args.append(f"--excluded-folders={joined}")
    if user.show_unused_files:
        args.append("--show-unused-files")
    if user.disable_baseline:
        args.append("--disable-baseline")
    if settings.log_file_path is not None:
        args.append(f"--logs={path_to_string(settings.log_file_path)}")
    if user.enable_old_formatter:
        args.append("--old-formatter")

    args.append(f"--client={CLIENT_ID}")

    return LaunchCommand(
        command=path_to_string(settings.executable_path),
        args=args,
        env=build_environment(settings),
    )


def build_environment(settings: ResolvedSettings) -> EnvVars:
    env = list(settings.env)
    root = path_to_string(settings.root_path)
    upsert_env(env, "PWD", root)
    upsert_env(env, "ZED_WORKTREE_ROOT", root)
    if settings.sdk_path is not None:
        upsert_env(env, "DART_SDK", path_to_string(settings.sdk_path))
    return env


def upsert_env(env: EnvVars, key: str, value: str) -> None:
    """Set ``key`` in place, appending it when missing."""

    for index, (name, _) in enumerate(env):
        if name == key:
            env[index] = (key, value)
            return
    env.append((key, value))


def _optional_path(path: Optional[Path]) -> Optional[str]:
    return path_to_string(path) if path is not None else None


def initialization_options(settings: ResolvedSettings) -> Dict[str, Any]:
    """Options sent once with the ``initialize`` request."""

    user = settings.user
    return {
        "show_unused_code": user.show_unused_code,
        "show_unused_files": user.show_unused_files,
        "disable_baseline": user.disable_baseline,
        "enable_old_formatter": user.enable_old_formatter,
        "analyze_only_opened": user.analyze_only_opened,
        "log_file_path": _optional_path(settings.log_file_path),
    }


def workspace_configuration(settings: ResolvedSettings) -> Dict[str, Any]:
    """Configuration answered for ``workspace/configuration`` requests."""

    user = settings.user
    return {
        "dcm": {
            "showUnusedCode": user.show_unused_code,
            "showUnusedFiles": user.show_unused_files,
            "disableBaseline": user.disable_baseline,
            "enableOldFormatter": user.enable_old_formatter,
            "analyzeOnlyOpened": user.analyze_only_opened,
            "logFilePath": _optional_path(settings.log_file_path),
            "dartSdkPath": _optional_path(settings.sdk_path),
            "excludedFolders": [path_to_string(path) for path in settings.excluded_folders],
        }
    }


__all__ = [
    "CLIENT_ID",
    "LaunchCommand",
    "build_command",
    "build_environment",
    "initialization_options",
    "workspace_configuration",
]
