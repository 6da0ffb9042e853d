"""Tests for command execution with error context."""

from pathlib import Path

import pytest

from modpm.core.errors import VcsExecutionError
from modpm.core.shell.abc import CommandResult
from modpm.core.subprocess import format_command, run_with_context
from tests.fakes.shell import FakeShell


def test_format_command_quotes_arguments() -> None:
    assert format_command(["git", "-C", "/a b/c", "pull"]) == "git -C '/a b/c' pull"


def test_run_with_context_returns_result_on_success() -> None:
    shell = FakeShell(default_result=CommandResult(0, "done\n", ""))

    result = run_with_context(shell, ["git", "fetch"], "fetch", cwd=Path("/repo"))

    assert result.stdout == "done\n"
    assert shell.command_calls == [(["git", "fetch"], Path("/repo"))]


def test_run_with_context_error_includes_output() -> None:
    shell = FakeShell(default_result=CommandResult(1, "partial", "fatal: boom"))

    with pytest.raises(VcsExecutionError) as exc_info:
        run_with_context(shell, ["git", "pull"], "update `jane.json_tools`")

    message = str(exc_info.value)
    assert message.startswith("Failed to update `jane.json_tools`")
    assert "Command: git pull" in message
    assert "Exit code: 1" in message
    assert "stdout: partial" in message
    assert "stderr: fatal: boom" in message
