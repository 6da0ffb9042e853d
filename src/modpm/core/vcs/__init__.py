from modpm.core.vcs.abc import Vcs, VcsKind
from modpm.core.vcs.registry import (
    GIT,
    MERCURIAL,
    SUPPORTED_VCS,
    detect_vcs,
    ensure_vcs_available,
    get_vcs,
)

__all__ = [
    "GIT",
    "MERCURIAL",
    "SUPPORTED_VCS",
    "Vcs",
    "VcsKind",
    "detect_vcs",
    "ensure_vcs_available",
    "get_vcs",
]
