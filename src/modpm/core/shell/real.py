"""Production Shell implementation using subprocess."""

import shutil
import subprocess
from pathlib import Path

from modpm.core.errors import ToolMissingError
from modpm.core.shell.abc import CommandResult, Shell


class RealShell(Shell):
    """Production implementation that executes real subprocesses."""

    def get_installed_tool_path(self, tool_name: str) -> str | None:
        return shutil.which(tool_name)

    def run_command(self, command: list[str], cwd: Path | None = None) -> CommandResult:
        """Run the command with captured output and no exit-status check.

        Raises:
            ToolMissingError: If the executable itself cannot be started
        """
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolMissingError(command[0]) from e

        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
