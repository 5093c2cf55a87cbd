"""Entry points called by the editor host."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from . import commands
from .config import resolve_settings
from .errors import UnsupportedRequest
from .invocation import LaunchCommand, build_command, initialization_options, workspace_configuration
from .models import ArgumentCompletion, CommandOutput, Worktree

LANGUAGE_SERVER_ID = "dcm"


def ensure_supported_language_server(language_server_id: str) -> None:
    if language_server_id != LANGUAGE_SERVER_ID:
        raise UnsupportedRequest(
            f"Unsupported language server id `{language_server_id}` for DCM extension"
        )


class DcmExtension:
    """Host callbacks. Settings are resolved from disk on every call."""

    def language_server_command(self, language_server_id: str, worktree: Worktree) -> LaunchCommand:
        ensure_supported_language_server(language_server_id)
        return build_command(resolve_settings(worktree))

    def language_server_initialization_options(
        self, language_server_id: str, worktree: Worktree
    ) -> Dict[str, Any]:
        ensure_supported_language_server(language_server_id)
        return initialization_options(resolve_settings(worktree))

    def language_server_workspace_configuration(
        self, language_server_id: str, worktree: Worktree
    ) -> Dict[str, Any]:
        ensure_supported_language_server(language_server_id)
        return workspace_configuration(resolve_settings(worktree))

    def complete_slash_command_argument(
        self, command: str, args: Sequence[str]
    ) -> List[ArgumentCompletion]:
        if command != commands.DCM_SLASH_COMMAND:
            return []
        return commands.complete(args)

    def run_slash_command(
        self, command: str, args: Sequence[str], worktree: Optional[Worktree]
    ) -> CommandOutput:
        if command != commands.DCM_SLASH_COMMAND:
            raise UnsupportedRequest(f"Unsupported slash command `{command}` for DCM extension")
        return commands.run(args, worktree)


__all__ = ["LANGUAGE_SERVER_ID", "DcmExtension", "ensure_supported_language_server"]
