"""Exceptions raised by the DCM integration."""

from __future__ import annotations

from pathlib import Path


class DcmError(Exception):
    """Base class for every failure surfaced to the host."""


class SettingsParseError(DcmError):
    """Raised when the settings file is not valid JSON."""


class InvalidSettingsShape(DcmError):
    """Raised when the settings file or the ``dcm`` block has the wrong shape."""


class ExecutableNotFound(DcmError):
    """Raised when the DCM executable cannot be located."""


class PathResolutionError(DcmError):
    """Raised when a configured path cannot be resolved."""


class UnknownSubcommand(DcmError):
    """Raised for a top-level slash command token outside the grammar."""


class UnknownTarget(DcmError):
    """Raised for a subcommand argument outside the grammar."""


class MissingArgument(DcmError):
    """Raised when a subcommand is invoked without its required argument."""


class WorktreeRequired(DcmError):
    """Raised when a command that edits settings runs without a worktree."""


class UnsupportedRequest(DcmError):
    """Raised when the host asks about a server or command we do not own."""


class IOFailure(DcmError):
    """Raised when reading, writing or creating a settings path fails."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


__all__ = [
    "DcmError",
    "SettingsParseError",
    "InvalidSettingsShape",
    "ExecutableNotFound",
    "PathResolutionError",
    "UnknownSubcommand",
    "UnknownTarget",
    "MissingArgument",
    "WorktreeRequired",
    "UnsupportedRequest",
    "IOFailure",
]
