"""Typer-based CLI that drives the DCM integration against a local directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .commands import DCM_SLASH_COMMAND
from .errors import DcmError, MissingArgument, UnknownSubcommand, UnknownTarget
from .extension import LANGUAGE_SERVER_ID, DcmExtension
from .models import Worktree

app = typer.Typer(help="Configure and launch the DCM language server for a project.")
console = Console()
err_console = Console(stderr=True)
extension = DcmExtension()

_USAGE_ERRORS = (MissingArgument, UnknownSubcommand, UnknownTarget)


def _configure_logging(level: str, log_file: Path | None) -> None:
    logger.remove()
    logger.add(err_console.print, level=level)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


def _fail(exc: DcmError) -> NoReturn:
    if isinstance(exc, _USAGE_ERRORS):
        err_console.print(f"[red]ERROR:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2)
    err_console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=4)


def _worktree(root: Path) -> Worktree:
    return Worktree.from_directory(root)


ROOT_OPTION = typer.Option(Path("."), "--root", file_okay=False, dir_okay=True, help="Worktree root")
LOG_LEVEL_OPTION = typer.Option("WARNING", "--log-level", help="Logging level")
LOG_FILE_OPTION = typer.Option(None, "--log-file", help="Also write logs to this file")


@app.command("run")
def run_command(
    args: Optional[List[str]] = typer.Argument(None, help="Slash command arguments, e.g. `toggle baseline`"),
    root: Path = ROOT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
) -> None:
    """Run the `dcm` slash command."""

    _configure_logging(log_level.upper(), log_file)
    try:
        output = extension.run_slash_command(DCM_SLASH_COMMAND, args or [], _worktree(root))
    except DcmError as exc:
        _fail(exc)
    console.print(output.text, markup=False, highlight=False, soft_wrap=True)


@app.command("complete")
def complete_command(
    args: Optional[List[str]] = typer.Argument(None, help="Partially typed arguments"),
) -> None:
    """Show completion candidates for partially typed arguments."""

    completions = extension.complete_slash_command_argument(DCM_SLASH_COMMAND, args or [])
    table = Table(title="Completions")
    table.add_column("Label")
    table.add_column("Replacement")
    table.add_column("Runs")
    for completion in completions:
        table.add_row(
            escape(completion.label),
            escape(repr(completion.new_text)),
            "yes" if completion.run_command else "no",
        )
    console.print(table)


@app.command("launch")
def launch_command(
    root: Path = ROOT_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the invocation as JSON"),
    log_level: str = LOG_LEVEL_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
) -> None:
    """Show the command used to start the language server."""

    _configure_logging(log_level.upper(), log_file)
    try:
        launch = extension.language_server_command(LANGUAGE_SERVER_ID, _worktree(root))
    except DcmError as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps({"command": launch.command, "args": launch.args, "env": dict(launch.env)}, indent=2))
        return
    console.print(f"[bold]Executable:[/bold] {escape(launch.command)}")
    for argument in launch.args:
        console.print(f"  {escape(argument)}", highlight=False)


@app.command("init-options")
def init_options_command(
    root: Path = ROOT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
) -> None:
    """Print the initialization options sent to the server."""

    _configure_logging(log_level.upper(), log_file)
    try:
        payload = extension.language_server_initialization_options(LANGUAGE_SERVER_ID, _worktree(root))
    except DcmError as exc:
        _fail(exc)
    typer.echo(json.dumps(payload, indent=2))


@app.command("workspace-config")
def workspace_config_command(
    root: Path = ROOT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    log_file: Optional[Path] = LOG_FILE_OPTION,
) -> None:
    """Print the workspace configuration answered to the server."""

    _configure_logging(log_level.upper(), log_file)
    try:
        payload = extension.language_server_workspace_configuration(LANGUAGE_SERVER_ID, _worktree(root))
    except DcmError as exc:
        _fail(exc)
    typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()
