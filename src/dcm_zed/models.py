"""Shared models for the slash command and host boundary."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

EnvVars = List[Tuple[str, str]]


class ToggleTarget(str, Enum):
    """Boolean settings that can be flipped from the slash command."""

    BASELINE = "baseline"
    UNUSED_CODE = "unused-code"
    UNUSED_FILES = "unused-files"
    NEW_VERSION = "new-version"

    @property
    def settings_key(self) -> str:
        return _TOGGLE_KEYS[self]


_TOGGLE_KEYS = {
    ToggleTarget.BASELINE: "disable_baseline",
    ToggleTarget.UNUSED_CODE: "show_unused_code",
    ToggleTarget.UNUSED_FILES: "show_unused_files",
    ToggleTarget.NEW_VERSION: "show_new_version",
}


@dataclass(slots=True)
class Worktree:
    """A project root together with the shell environment captured for it."""

    root_path: Path
    env: EnvVars = field(default_factory=list)

    @classmethod
    def from_directory(cls, path: Path) -> "Worktree":
        """Build a worktree for ``path`` using the current process environment."""

        return cls(root_path=Path(os.path.abspath(path)), env=list(os.environ.items()))

    def shell_env(self) -> EnvVars:
        return list(self.env)

    def which(self, binary: str) -> Optional[str]:
        """Look ``binary`` up on the snapshot's PATH."""

        search_path = dict(self.env).get("PATH")
        if not search_path:
            return None
        return shutil.which(binary, path=search_path)


@dataclass(slots=True)
class OutputSection:
    """Labelled character range of a command output."""

    start: int
    end: int
    label: str


@dataclass(slots=True)
class CommandOutput:
    """Text returned by the slash command."""

    text: str
    sections: List[OutputSection] = field(default_factory=list)


@dataclass(slots=True)
class ArgumentCompletion:
    """Completion candidate for a slash command argument."""

    label: str
    new_text: str
    run_command: bool


__all__ = [
    "EnvVars",
    "ToggleTarget",
    "Worktree",
    "OutputSection",
    "CommandOutput",
    "ArgumentCompletion",
]
