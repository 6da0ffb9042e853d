"""Command execution with rich error context.

Wraps Shell.run_command() so that a non-zero exit becomes a VcsExecutionError
carrying the operation, the command line, the exit code and any output.
"""

import logging
import shlex
from collections.abc import Sequence
from pathlib import Path

from modpm.core.errors import VcsExecutionError
from modpm.core.shell.abc import CommandResult, Shell

logger = logging.getLogger(__name__)


def format_command(cmd: Sequence[str]) -> str:
    """Render a command the way a user would type it into a shell."""
    return shlex.join(str(arg) for arg in cmd)


def format_failure(cmd: Sequence[str], operation_context: str, result: CommandResult) -> str:
    """Build the error message for a failed command.

    Args:
        cmd: Command and arguments that were executed
        operation_context: Human-readable description of the operation
        result: The failed command's result

    Returns:
        Multi-line message with command, exit code, stdout and stderr
    """
    error_msg = f"Failed to {operation_context}"
    error_msg += f"\nCommand: {format_command(cmd)}"
    error_msg += f"\nExit code: {result.returncode}"

    stdout_stripped = result.stdout.strip()
    if stdout_stripped:
        error_msg += f"\nstdout: {stdout_stripped}"

    stderr_stripped = result.stderr.strip()
    if stderr_stripped:
        error_msg += f"\nstderr: {stderr_stripped}"

    return error_msg


def run_with_context(
    shell: Shell,
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
) -> CommandResult:
    """Execute a command and raise with enriched context if it fails.

    Args:
        shell: Shell used to execute the command
        cmd: Command and arguments to execute
        operation_context: Human-readable description of the operation,
            e.g. "clone `publisher.name`"
        cwd: Working directory for command execution

    Returns:
        CommandResult of the successful command

    Raises:
        VcsExecutionError: If the command exits with a non-zero status
        ToolMissingError: If the command binary is not found
    """
    logger.debug("Running: %s", format_command(cmd))
    result = shell.run_command(list(cmd), cwd)
    logger.debug("Exit code %d for: %s", result.returncode, format_command(cmd))

    if not result.ok:
        raise VcsExecutionError(format_failure(cmd, operation_context, result))

    return result
