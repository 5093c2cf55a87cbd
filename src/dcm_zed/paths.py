"""Path helpers used when resolving user supplied settings."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping

from .errors import PathResolutionError
from .models import EnvVars

_VARIABLE_RE = re.compile(r"\$(?:\{(?P<braced>[^}]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))")


def _expand_variables(text: str, variables: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        name = match.group("braced")
        if name is None:
            name = match.group("bare")
        return variables.get(name, "")

    return _VARIABLE_RE.sub(_replace, text)


def _expand_home(text: str, variables: Mapping[str, str]) -> str:
    if text != "~" and not text.startswith("~/"):
        return text
    home = variables.get("HOME")
    if home is None:
        return text
    return home + text[1:]


def expand_path_text(raw: str, env: EnvVars) -> str:
    """Expand ``$VAR``, ``${VAR}`` and a leading ``~`` against ``env``.

    Unknown variables expand to the empty string. A leading ``~`` is left
    untouched when the snapshot has no ``HOME``.
    """

    variables = dict(env)
    return _expand_home(_expand_variables(raw, variables), variables)


def resolve_path(raw: str, env: EnvVars, worktree_root: Path, setting: str = "path") -> Path:
    """Resolve a possibly relative, shell-style path into an absolute path.

    ``setting`` names the configuration entry in error messages.
    """

    trimmed = raw.strip()
    if not trimmed:
        raise PathResolutionError(f"`{setting}` is empty")

    candidate = Path(expand_path_text(trimmed, env))
    if candidate.is_absolute():
        return candidate
    return worktree_root / candidate


def canonicalize_if_possible(path: Path) -> Path:
    """Return the canonical form of ``path``, or ``path`` itself if that fails."""

    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


def path_to_string(path: Path) -> str:
    return os.fspath(path)


__all__ = [
    "expand_path_text",
    "resolve_path",
    "canonicalize_if_possible",
    "path_to_string",
]
