"""Lookup of VCS backends by kind and by working-copy detection."""

from pathlib import Path

from modpm.core.errors import ToolMissingError
from modpm.core.shell.abc import Shell
from modpm.core.vcs.abc import Vcs
from modpm.core.vcs.git import GitVcs
from modpm.core.vcs.mercurial import MercurialVcs

GIT = GitVcs()
MERCURIAL = MercurialVcs()

# Detection order: the first backend whose marker exists wins
SUPPORTED_VCS: tuple[Vcs, ...] = (GIT, MERCURIAL)


def get_vcs(kind: str) -> Vcs:
    """Return the backend for `kind`.

    Raises:
        ValueError: If `kind` is not a supported VCS
    """
    for vcs in SUPPORTED_VCS:
        if vcs.kind == kind:
            return vcs
    supported = ", ".join(vcs.kind for vcs in SUPPORTED_VCS)
    raise ValueError(f"Unsupported VCS `{kind}`. Supported: {supported}")


def detect_vcs(directory: Path) -> Vcs | None:
    """Detect which backend manages `directory`.

    Returns:
        The first backend whose marker directory exists, or None if the
        directory is not a module checkout or uses an unsupported VCS
    """
    for vcs in SUPPORTED_VCS:
        if vcs.is_used_in(directory):
            return vcs
    return None


def ensure_vcs_available(vcs: Vcs, shell: Shell) -> None:
    """Ensure the backend's executable is installed.

    Must be called before running any command built from `vcs`.

    Raises:
        ToolMissingError: If the executable is not on PATH
    """
    if shell.get_installed_tool_path(vcs.executable) is None:
        raise ToolMissingError(vcs.executable)
