"""The ``dcm`` slash command: argument completion and dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from .config import resolve_settings
from .errors import MissingArgument, UnknownSubcommand, UnknownTarget, WorktreeRequired
from .models import ArgumentCompletion, CommandOutput, OutputSection, ToggleTarget, Worktree
from .paths import path_to_string
from .settings_store import SETTINGS_DIR, SETTINGS_KEY, JsonObject, SettingsDocument

DCM_SLASH_COMMAND = "dcm"

OPEN_RULES_URL = "https://dcm.dev/docs/rules/"
OPEN_METRICS_URL = "https://dcm.dev/docs/metrics/"
FEEDBACK_URL = "https://discord.gg/Vzjprgk4sb"
LOG_FILE_NAME = "dcm.log"

HELP_TEXT = """DCM commands:
- dcm help
- dcm open [rules|metrics|feedback|logs]
- dcm toggle [baseline|unused-code|unused-files|new-version]
- dcm log [capture|clear]
- dcm restart"""

Handler = Callable[[Optional[Worktree]], CommandOutput]


@dataclass(frozen=True)
class CommandNode:
    """One token of the command grammar.

    Leaves carry a ``handler``; group nodes carry ``children`` and the
    wording used when their argument is missing or unknown.
    """

    label: str
    run_immediately: bool = False
    children: Tuple["CommandNode", ...] = ()
    handler: Optional[Handler] = None
    noun: str = ""
    prompt: str = ""
    requires_worktree: bool = False

    def child(self, token: str) -> Optional["CommandNode"]:
        for node in self.children:
            if node.label == token:
                return node
        return None

    @property
    def completion_text(self) -> str:
        return f"{self.label} " if self.children else self.label


def info_output(title: str, message: str) -> CommandOutput:
    return CommandOutput(
        text=f"{title}: {message}",
        sections=[OutputSection(start=0, end=len(title), label=title)],
    )


def help_output() -> CommandOutput:
    return CommandOutput(text=HELP_TEXT)


def default_log_path(root: Path) -> Path:
    return Path(root) / SETTINGS_DIR / LOG_FILE_NAME


def _require_worktree(worktree: Optional[Worktree]) -> Worktree:
    if worktree is None:
        raise WorktreeRequired("DCM commands require an active worktree")
    return worktree


def _alternatives(node: CommandNode) -> str:
    labels = [child.label for child in node.children]
    if len(labels) < 3:
        return " or ".join(labels)
    return ", ".join(labels[:-1]) + f", or {labels[-1]}"


def _run_help(worktree: Optional[Worktree]) -> CommandOutput:
    return help_output()


def _run_info(title: str, message: str, worktree: Optional[Worktree]) -> CommandOutput:
    return info_output(title, message)


_TOGGLE_MESSAGES = {
    ToggleTarget.BASELINE: (
        "Baseline Toggle",
        "Baseline filtering disabled. Restart the DCM server for changes to take effect.",
        "Baseline filtering enabled. Restart the DCM server for changes to take effect.",
    ),
    ToggleTarget.UNUSED_CODE: (
        "Unused Code Toggle",
        "Unused code issues will be reported after restarting the DCM server.",
        "Unused code issues suppressed. Restart the DCM server for changes to take effect.",
    ),
    ToggleTarget.UNUSED_FILES: (
        "Unused Files Toggle",
        "Unused file analysis enabled. Restart the DCM server for changes to take effect.",
        "Unused file analysis disabled. Restart the DCM server for changes to take effect.",
    ),
    ToggleTarget.NEW_VERSION: (
        "Version Notification Toggle",
        "New version notifications enabled.",
        "New version notifications disabled.",
    ),
}


def _run_toggle(target: ToggleTarget, worktree: Optional[Worktree]) -> CommandOutput:
    current = _require_worktree(worktree)
    settings = resolve_settings(current)
    key = target.settings_key
    new_value = not getattr(settings.user, key)

    def _apply(block: JsonObject) -> None:
        block[key] = new_value

    SettingsDocument.for_worktree(settings.root_path).update_block(SETTINGS_KEY, _apply)
    logger.debug("Toggled {} to {}", key, new_value)

    title, when_true, when_false = _TOGGLE_MESSAGES[target]
    return info_output(title, when_true if new_value else when_false)


def _run_log_capture(worktree: Optional[Worktree]) -> CommandOutput:
    current = _require_worktree(worktree)
    log_path = path_to_string(default_log_path(current.root_path))

    def _apply(block: JsonObject) -> None:
        block["log_file_path"] = log_path

    SettingsDocument.for_worktree(current.root_path).update_block(SETTINGS_KEY, _apply)
    return info_output(
        "Log Capture Enabled",
        f"Server communication will be captured to {log_path}. Restart DCM to begin logging.",
    )


def _run_log_clear(worktree: Optional[Worktree]) -> CommandOutput:
    current = _require_worktree(worktree)

    def _apply(block: JsonObject) -> None:
        block.pop("log_file_path", None)

    SettingsDocument.for_worktree(current.root_path).update_block(SETTINGS_KEY, _apply)
    return info_output(
        "Log Capture Disabled",
        "DCM log capture disabled. Delete existing log files manually if desired.",
    )


def _leaf(label: str, handler: Handler) -> CommandNode:
    return CommandNode(label=label, run_immediately=True, handler=handler)


COMMAND_TREE = CommandNode(
    label=DCM_SLASH_COMMAND,
    children=(
        CommandNode(label="help", handler=_run_help),
        CommandNode(
            label="open",
            noun="open target",
            prompt="Specify what to open: rules, metrics, feedback, or logs",
            children=(
                _leaf("rules", partial(_run_info, "DCM Rules", f"Documentation: {OPEN_RULES_URL}")),
                _leaf("metrics", partial(_run_info, "DCM Metrics", f"Documentation: {OPEN_METRICS_URL}")),
                _leaf("feedback", partial(_run_info, "DCM Feedback", f"Join the community: {FEEDBACK_URL}")),
                _leaf(
                    "logs",
                    partial(
                        _run_info,
                        "DCM Logs",
                        f"Log file is located under `{SETTINGS_DIR}/{LOG_FILE_NAME}` when capture is enabled.",
                    ),
                ),
            ),
        ),
        CommandNode(
            label="toggle",
            requires_worktree=True,
            noun="toggle target",
            prompt="Specify toggle target: baseline, unused-code, unused-files, or new-version",
            children=tuple(_leaf(target.value, partial(_run_toggle, target)) for target in ToggleTarget),
        ),
        CommandNode(
            label="restart",
            run_immediately=True,
            handler=partial(
                _run_info,
                "Restart DCM",
                "Use `Zed: Restart Language Server` from the command palette to restart the DCM server.",
            ),
        ),
        CommandNode(
            label="log",
            requires_worktree=True,
            noun="log command",
            prompt="Specify log command: capture or clear",
            children=(
                _leaf("capture", _run_log_capture),
                _leaf("clear", _run_log_clear),
            ),
        ),
    ),
)


def complete(args: Sequence[str]) -> List[ArgumentCompletion]:
    """Return completion candidates for the partially typed ``args``."""

    if len(args) <= 1:
        prefix = args[0] if args else ""
        return [
            ArgumentCompletion(node.label, node.completion_text, node.run_immediately)
            for node in COMMAND_TREE.children
            if node.label.startswith(prefix)
        ]

    group = COMMAND_TREE.child(args[0])
    if group is None:
        return []
    typed = " ".join(args[:-1])
    last = args[-1]
    return [
        ArgumentCompletion(node.label, f"{typed} {node.label}".strip(), node.run_immediately)
        for node in group.children
        if node.label.startswith(last)
    ]


def _dispatch(node: CommandNode, args: Sequence[str], worktree: Optional[Worktree]) -> CommandOutput:
    if node.requires_worktree:
        _require_worktree(worktree)
    if node.handler is not None:
        return node.handler(worktree)
    if not args:
        raise MissingArgument(node.prompt)

    token = args[0]
    child = node.child(token)
    if child is None:
        if node is COMMAND_TREE:
            raise UnknownSubcommand(f"Unknown DCM subcommand `{token}`. Run `dcm help` for options.")
        raise UnknownTarget(f"Unknown {node.noun} `{token}`. Use {_alternatives(node)}.")
    return _dispatch(child, args[1:], worktree)


def run(args: Sequence[str], worktree: Optional[Worktree]) -> CommandOutput:
    """Execute the slash command described by ``args``."""

    if not args:
        return help_output()
    return _dispatch(COMMAND_TREE, args, worktree)


__all__ = [
    "DCM_SLASH_COMMAND",
    "CommandNode",
    "COMMAND_TREE",
    "complete",
    "run",
    "default_log_path",
]
