"""Mercurial backend."""

import logging
from pathlib import Path
from typing import ClassVar

from modpm.core.errors import VcsExecutionError
from modpm.core.shell.abc import Shell
from modpm.core.subprocess import format_failure
from modpm.core.vcs.abc import Vcs, VcsKind

logger = logging.getLogger(__name__)

# `hg incoming` exits 0 when there are incoming changesets and 1 when there are none
_HG_INCOMING_CHANGES = 0
_HG_NO_INCOMING_CHANGES = 1


class MercurialVcs(Vcs):
    """Mercurial backend.

    Staleness is read from the exit status of `hg incoming` rather than from its
    output: 0 means upstream has changesets we lack, 1 means nothing is
    incoming, anything else is a failure.
    """

    kind: ClassVar[VcsKind] = "hg"
    executable: ClassVar[str] = "hg"
    marker_dir: ClassVar[str] = ".hg"
    install_args: ClassVar[tuple[str, ...]] = ("clone",)
    version_pin_flag: ClassVar[str] = "--rev"
    path_flag: ClassVar[str] = "-R"
    update_args: ClassVar[tuple[str, ...]] = ("pull", "--update")
    outdated_steps: ClassVar[tuple[tuple[str, ...], ...]] = (("incoming",),)

    def build_pinned_version_command(self, path: Path) -> list[str]:
        return [self.executable, self.path_flag, str(path), "id", "-t"]

    def parse_pinned_version(self, output: str) -> str:
        # `hg id -t` lists every tag on the revision; "tip" is not a real pin
        tags = [tag for tag in output.split() if tag != "tip"]
        if not tags:
            return ""
        return tags[0]

    def check_outdated(self, path: Path, shell: Shell) -> bool:
        (incoming,) = self.build_outdated_steps(path)
        result = shell.run_command(incoming)
        logger.debug("hg incoming for %s exited with %d", path, result.returncode)

        if result.returncode == _HG_NO_INCOMING_CHANGES:
            return False
        if result.returncode == _HG_INCOMING_CHANGES:
            return True

        raise VcsExecutionError(
            format_failure(incoming, f"check for incoming changes in `{path}`", result)
        )
