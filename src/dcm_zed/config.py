"""User settings schema and resolution of the DCM configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

from .errors import ExecutableNotFound, InvalidSettingsShape
from .models import EnvVars, Worktree
from .paths import canonicalize_if_possible, resolve_path
from .settings_store import SETTINGS_KEY, SettingsDocument

EXECUTABLE_NAME = "dcm"


class UserSettings(BaseModel):
    """The ``dcm`` block as written by the user. Every field is optional."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    executable_path: Optional[StrictStr] = None
    dart_sdk_path: Optional[StrictStr] = None
    show_new_version: StrictBool = True
    show_unused_code: StrictBool = False
    show_unused_files: StrictBool = False
    disable_baseline: StrictBool = False
    enable_old_formatter: StrictBool = False
    analyze_only_opened: StrictBool = False
    excluded_folders: List[StrictStr] = Field(default_factory=list)
    log_file_path: Optional[StrictStr] = None


@dataclass(frozen=True, slots=True)
class ResolvedSettings:
    """Absolute, validated settings for a single host request."""

    user: UserSettings
    executable_path: Path
    sdk_path: Optional[Path]
    root_path: Path
    excluded_folders: List[Path]
    log_file_path: Optional[Path]
    env: EnvVars


def load_user_settings(document: SettingsDocument) -> UserSettings:
    """Read the ``dcm`` block from ``document`` and apply defaults."""

    root = document.read()
    if SETTINGS_KEY not in root:
        return UserSettings()
    try:
        return UserSettings.model_validate(root[SETTINGS_KEY])
    except ValidationError as exc:
        raise InvalidSettingsShape(f"Invalid `{SETTINGS_KEY}` settings block: {exc}") from exc


def resolve_settings(worktree: Worktree) -> ResolvedSettings:
    """Build :class:`ResolvedSettings` for ``worktree``."""

    env = worktree.shell_env()
    root_path = Path(worktree.root_path)
    user = load_user_settings(SettingsDocument.for_worktree(root_path))

    executable_path = _resolve_executable(worktree, user, env, root_path)
    sdk_path = _resolve_optional_path(user.dart_sdk_path, env, root_path, "dcm.dart_sdk_path")
    log_file_path = _resolve_optional_path(user.log_file_path, env, root_path, "dcm.log_file_path")
    excluded_folders = _resolve_excluded_folders(user.excluded_folders, env, root_path)

    logger.debug(
        "Resolved DCM settings for {}: executable={}, sdk={}, excluded={}",
        root_path,
        executable_path,
        sdk_path,
        len(excluded_folders),
    )
    return ResolvedSettings(
        user=user,
        executable_path=executable_path,
        sdk_path=sdk_path,
        root_path=root_path,
        excluded_folders=excluded_folders,
        log_file_path=log_file_path,
        env=env,
    )


def _resolve_executable(
    worktree: Worktree, user: UserSettings, env: EnvVars, root_path: Path
) -> Path:
    if user.executable_path is not None:
        raw = resolve_path(user.executable_path, env, root_path, "dcm.executable_path")
        path = canonicalize_if_possible(raw)
        if path.exists():
            return path
        raise ExecutableNotFound(f"Configured DCM executable path does not exist: {path}")

    found = worktree.which(EXECUTABLE_NAME)
    if found is None:
        raise ExecutableNotFound(
            "Unable to locate `dcm` executable. Set `dcm.executable_path` in settings "
            "or ensure it is available on PATH."
        )
    logger.debug("Using `{}` found on PATH at {}", EXECUTABLE_NAME, found)
    return Path(found)


def _resolve_optional_path(
    raw: Optional[str], env: EnvVars, root_path: Path, setting: str
) -> Optional[Path]:
    if raw is None or not raw.strip():
        return None
    return canonicalize_if_possible(resolve_path(raw, env, root_path, setting))


def _resolve_excluded_folders(folders: List[str], env: EnvVars, root_path: Path) -> List[Path]:
    resolved: List[Path] = []
    for folder in folders:
        if not folder.strip():
            continue
        path = resolve_path(folder, env, root_path, "dcm.excluded_folders")
        resolved.append(canonicalize_if_possible(path))
    return resolved


__all__ = [
    "UserSettings",
    "ResolvedSettings",
    "load_user_settings",
    "resolve_settings",
]
