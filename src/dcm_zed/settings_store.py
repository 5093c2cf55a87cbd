"""Read-modify-write access to the project's ``.zed/settings.json``."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from loguru import logger

from .errors import InvalidSettingsShape, IOFailure, SettingsParseError

SETTINGS_DIR = ".zed"
SETTINGS_FILE = "settings.json"
SETTINGS_KEY = "dcm"
NEW_FILE_MODE = 0o644

JsonObject = Dict[str, Any]


class SettingsDocument:
    """The JSON settings file of a worktree.

    Only one top-level key is owned by this package. Every other key is
    read and written back with its value untouched; only the formatting of
    the file is normalized.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_worktree(cls, root: Path) -> "SettingsDocument":
        return cls(Path(root) / SETTINGS_DIR / SETTINGS_FILE)

    def read(self) -> JsonObject:
        """Load the settings object, treating a missing or blank file as empty."""

        if not self.path.exists():
            logger.debug("Settings file {} not found; using empty settings", self.path)
            return {}
        try:
            contents = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailure(f"Failed to read {self.path}: {exc}", self.path) from exc

        if not contents.strip():
            return {}

        try:
            value = json.loads(contents)
        except json.JSONDecodeError as exc:
            raise SettingsParseError(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(value, dict):
            raise InvalidSettingsShape(f"Settings file {self.path} must contain a JSON object")
        return value

    def write(self, remainder: JsonObject, key: str, block: JsonObject) -> None:
        """Store ``block`` under ``key`` next to the untouched ``remainder``.

        A symlinked settings file is written through to its target, and an
        existing file keeps its permission bits.
        """

        final_root = dict(remainder)
        final_root[key] = block
        serialized = json.dumps(final_root, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IOFailure(f"Failed to create settings directory {parent}: {exc}", parent) from exc

        target = self.path.resolve()
        try:
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(serialized)
                if target.exists():
                    shutil.copymode(target, tmp_name)
                else:
                    os.chmod(tmp_name, NEW_FILE_MODE)
                os.replace(tmp_name, target)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise IOFailure(f"Failed to write settings file {self.path}: {exc}", self.path) from exc
        logger.info("Updated `{}` block in {}", key, self.path)

    def update_block(self, key: str, mutate: Callable[[JsonObject], None]) -> JsonObject:
        """Apply ``mutate`` to the block stored under ``key`` and persist it."""

        remainder, block = extract_block(self.read(), key)
        mutate(block)
        self.write(remainder, key, block)
        return block


def extract_block(root: JsonObject, key: str) -> Tuple[JsonObject, JsonObject]:
    """Split ``root`` into everything but ``key`` and the object stored at ``key``.

    A missing or non-object value yields an empty block. ``root`` itself is
    left unchanged.
    """

    remainder = dict(root)
    value = remainder.pop(key, None)
    block = dict(value) if isinstance(value, dict) else {}
    return remainder, block


__all__ = [
    "SETTINGS_KEY",
    "SettingsDocument",
    "extract_block",
]
