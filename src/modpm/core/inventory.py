"""Installed-module inventory, recomputed from the modules root on every call.

Layout under the modules root:

    <root>/<publisher>/<module>/   dotted identifiers, e.g. `jane.json_tools`
    <root>/<module>/               official modules; recognised by having both a
                                   manifest and a VCS marker at the top level

Directories without a VCS marker are unmanaged and never reported.
"""

from dataclasses import dataclass
from pathlib import Path

from modpm.core.lookup import Absent, Failed, Found, Lookup
from modpm.core.manifest import MANIFEST_FILE_NAME
from modpm.core.vcs.abc import Vcs
from modpm.core.vcs.registry import detect_vcs

# Top-level directories that live in the modules root but are not publishers
EXCLUDED_DIRS = frozenset({"cache", ".cache"})


@dataclass(frozen=True)
class InstalledModule:
    """A module checkout found on disk."""

    ident: str
    path: Path
    vcs: Vcs


def normalize_ident(ident: str) -> str:
    """Normalize an identifier the way install paths are derived from it."""
    return ident.lower().replace("-", "_")


def ident_to_path(ident: str, modules_root: Path) -> Path:
    """Map `publisher.name` to `<root>/publisher/name` (and `name` to `<root>/name`)."""
    parts = [part for part in normalize_ident(ident).split(".") if part]
    return modules_root.joinpath(*parts)


def path_to_ident(install_path: Path, modules_root: Path) -> str:
    """Map an install path back to its dotted identifier."""
    return ".".join(install_path.relative_to(modules_root).parts)


def is_official_module_dir(directory: Path) -> bool:
    return (directory / MANIFEST_FILE_NAME).is_file() and detect_vcs(directory) is not None


def get_installed_modules(modules_root: Path) -> list[str]:
    """List the identifiers of every managed module under `modules_root`.

    Returns:
        Sorted identifiers: `name` for official modules, `publisher.name` otherwise
    """
    if not modules_root.is_dir():
        return []

    modules: list[str] = []
    for entry in sorted(modules_root.iterdir()):
        if not entry.is_dir() or entry.name in EXCLUDED_DIRS or entry.name.startswith("."):
            continue

        if is_official_module_dir(entry):
            modules.append(entry.name)
            continue

        for module_dir in sorted(entry.iterdir()):
            if not module_dir.is_dir():
                continue
            if detect_vcs(module_dir) is None:
                continue
            modules.append(f"{entry.name}.{module_dir.name}")

    return modules


def find_installed_module(ident: str, modules_root: Path) -> Lookup[InstalledModule]:
    """Locate an installed module by identifier.

    Returns:
        Found(InstalledModule) for a managed checkout,
        Absent() if nothing is installed under that identifier,
        Failed(reason) if the directory exists but its VCS is not supported
    """
    path = ident_to_path(ident, modules_root)
    if not path.is_dir():
        return Absent()

    vcs = detect_vcs(path)
    if vcs is None:
        return Failed(f"`{ident}` at `{path}` does not use a supported version control system")

    return Found(InstalledModule(ident=normalize_ident(ident), path=path, vcs=vcs))
