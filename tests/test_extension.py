from __future__ import annotations

from pathlib import Path

import pytest

from dcm_zed.errors import UnsupportedRequest
from dcm_zed.extension import DcmExtension
from dcm_zed.models import Worktree


@pytest.fixture()
def extension() -> DcmExtension:
    return DcmExtension()


def test_language_server_command(extension: DcmExtension, worktree: Worktree, bin_dir: Path, project_root: Path) -> None:
    command = extension.language_server_command("dcm", worktree)
    assert command.command == str(bin_dir / "dcm")
    assert command.args[0] == "start-server"
    assert f"--root-folder={project_root}" in command.args
    assert ("ZED_WORKTREE_ROOT", str(project_root)) in command.env


def test_settings_are_reread_on_every_call(
    extension: DcmExtension, worktree: Worktree, write_settings
) -> None:
    assert extension.language_server_initialization_options("dcm", worktree)["show_unused_code"] is False
    write_settings({"dcm": {"show_unused_code": True}})
    assert extension.language_server_initialization_options("dcm", worktree)["show_unused_code"] is True


def test_workspace_configuration(extension: DcmExtension, worktree: Worktree) -> None:
    payload = extension.language_server_workspace_configuration("dcm", worktree)
    assert payload["dcm"]["excludedFolders"] == []


@pytest.mark.parametrize(
    "method",
    [
        "language_server_command",
        "language_server_initialization_options",
        "language_server_workspace_configuration",
    ],
)
def test_other_language_servers_are_rejected(extension: DcmExtension, worktree: Worktree, method: str) -> None:
    with pytest.raises(UnsupportedRequest):
        getattr(extension, method)("dart", worktree)


def test_slash_command_routing(extension: DcmExtension, worktree: Worktree) -> None:
    assert extension.complete_slash_command_argument("other", ["t"]) == []
    assert [c.label for c in extension.complete_slash_command_argument("dcm", ["t"])] == ["toggle"]
    assert extension.run_slash_command("dcm", ["help"], worktree).text.startswith("DCM commands:")
    with pytest.raises(UnsupportedRequest):
        extension.run_slash_command("other", [], worktree)
