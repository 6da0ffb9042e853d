"""Shell operations interface.

Architecture:
- Shell: Abstract base class for locating executables and running commands
- RealShell: Production implementation using shutil and subprocess
- FakeShell (tests/fakes/shell.py): In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Shell(ABC):
    """Abstract interface for running external commands.

    All implementations (real and fake) must implement this interface.
    Implementations never raise on a non-zero exit status; callers inspect
    CommandResult.returncode or use run_with_context() to get an exception.
    """

    @abstractmethod
    def get_installed_tool_path(self, tool_name: str) -> str | None:
        """Locate an executable on PATH.

        Args:
            tool_name: Executable name, e.g. "git"

        Returns:
            Absolute path to the executable, or None if it is not installed
        """
        ...

    @abstractmethod
    def run_command(self, command: list[str], cwd: Path | None = None) -> CommandResult:
        """Run a command to completion and capture its output.

        Args:
            command: Command and arguments
            cwd: Working directory, or None for the current directory

        Returns:
            CommandResult with exit status and decoded output
        """
        ...
