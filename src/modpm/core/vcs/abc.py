"""Version control backend interface.

Each supported VCS is a Vcs subclass that declares its command templates as
class constants and implements the parts of the protocol that differ between
backends (outdated detection and pinned-version parsing). Instances carry no
state, so one instance per kind is shared process-wide (see registry.py).
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Literal

from modpm.core.shell.abc import Shell

VcsKind = Literal["git", "hg"]


class Vcs(ABC):
    """A version control backend.

    Class constants:
        kind: Short identifier used in settings and registry metadata
        executable: Name of the executable looked up on PATH
        marker_dir: Metadata directory whose presence identifies the backend
        install_args: Subcommand and flags used for a fresh checkout
        version_pin_flag: Flag that selects a tag/branch/revision on install
        path_flag: Flag that points the executable at a working copy
        update_args: Subcommand and flags used to update a working copy
        outdated_steps: Subcommands run in order to detect staleness
    """

    kind: ClassVar[VcsKind]
    executable: ClassVar[str]
    marker_dir: ClassVar[str]
    install_args: ClassVar[tuple[str, ...]]
    version_pin_flag: ClassVar[str]
    path_flag: ClassVar[str]
    update_args: ClassVar[tuple[str, ...]]
    outdated_steps: ClassVar[tuple[tuple[str, ...], ...]]

    def is_used_in(self, directory: Path) -> bool:
        """Check whether this backend's marker directory exists in `directory`."""
        return (directory / self.marker_dir).exists()

    def build_install_command(self, url: str, install_path: Path, version: str = "") -> list[str]:
        """Build the command that checks out `url` into `install_path`.

        Args:
            url: Repository URL
            install_path: Destination directory (must not exist yet)
            version: Tag, branch or revision to pin; empty for the default head

        Returns:
            Command and arguments
        """
        cmd = [self.executable, *self.install_args]
        if version:
            cmd.extend([self.version_pin_flag, version])
        cmd.extend([url, str(install_path)])
        return cmd

    def build_update_command(self, path: Path) -> list[str]:
        """Build the command that updates the working copy at `path`."""
        return [self.executable, self.path_flag, str(path), *self.update_args]

    def build_outdated_steps(self, path: Path) -> list[list[str]]:
        """Build the ordered commands of the staleness check for `path`."""
        return [[self.executable, self.path_flag, str(path), *step] for step in self.outdated_steps]

    @abstractmethod
    def build_pinned_version_command(self, path: Path) -> list[str]:
        """Build the command that prints the tag checked out at `path`, if any."""
        ...

    @abstractmethod
    def parse_pinned_version(self, output: str) -> str:
        """Extract the pinned tag from the output of the pinned-version command.

        Returns:
            The tag, or "" if the working copy is not on a tag
        """
        ...

    @abstractmethod
    def check_outdated(self, path: Path, shell: Shell) -> bool:
        """Run the staleness protocol against the working copy at `path`.

        Args:
            path: Working copy to check
            shell: Shell used to run the VCS commands

        Returns:
            True if upstream has changes the working copy does not

        Raises:
            VcsExecutionError: If any step fails to execute; the result of the
                check is then unknown and must not be treated as "up to date"
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
