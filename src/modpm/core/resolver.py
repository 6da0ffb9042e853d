"""Resolution of user-supplied module queries.

A query is one command-line token:

    json_tools                        official module
    jane.json_tools                   published module
    jane.json_tools@v0.3.1            published module pinned to a version
    https://example.com/jane/lib.git  external module, installed from its URL

Resolution turns a query into a Module describing where the module lives on
disk and what is already installed there. It never mutates the filesystem and
never talks to the registry; commands fetch remote metadata separately when
they need it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from modpm.core.context import ModpmContext
from modpm.core.errors import (
    InvalidIdentifierError,
    InvalidURLError,
    ManifestError,
    UnresolvableNameError,
)
from modpm.core.inventory import ident_to_path, normalize_ident
from modpm.core.manifest import read_module_manifest
from modpm.core.shell.abc import Shell
from modpm.core.vcs.abc import Vcs
from modpm.core.vcs.registry import detect_vcs, get_vcs

logger = logging.getLogger(__name__)

_GIT_SUFFIX = ".git"


@dataclass(frozen=True)
class UrlIdent:
    """Publisher and module name extracted from a repository URL."""

    publisher: str
    name: str


@dataclass(frozen=True)
class Module:
    """A resolved module query.

    Attributes:
        query: The token this module was resolved from
        name: Module name (last identifier segment)
        publisher: Publisher segment(s); empty for official modules
        url: Repository URL; empty for registry modules until metadata is fetched
        requested_version: Version requested with `@version`; empty for the default head
        install_path: Directory the module is (or would be) installed in
        formatted_install_path: install_path for display, with ~ for the home directory
        is_installed: Whether install_path already exists
        installed_version: Manifest version of the installed module; empty if unknown
        pinned_version: Tag checked out in the installed module; empty if not pinned
        is_external: Whether the module was given as a URL instead of a registry name
        vcs: Backend of the installed checkout, or the one to install with
    """

    query: str
    name: str
    publisher: str
    url: str
    requested_version: str
    install_path: Path
    formatted_install_path: str
    is_installed: bool
    installed_version: str
    pinned_version: str
    is_external: bool
    vcs: Vcs | None

    @property
    def ident(self) -> str:
        """Dotted identifier: `publisher.name`, or `name` for official modules."""
        if self.publisher:
            return f"{self.publisher}.{self.name}"
        return self.name

    @property
    def is_pinned(self) -> bool:
        return self.pinned_version != ""


def is_url(query: str) -> bool:
    return "://" in query


def split_version(query: str) -> tuple[str, str]:
    """Split a trailing `@version` off a query.

    Only an `@` after the last `/` counts, so `ssh://git@host/a/b` keeps its user.

    Returns:
        (query without version, version or "")
    """
    at = query.rfind("@")
    if at == -1 or at < query.rfind("/"):
        return query, ""
    return query[:at], query[at + 1 :]


def parse_url_ident(url: str) -> UrlIdent:
    """Extract publisher and name from the last two path segments of `url`.

    Raises:
        InvalidURLError: If the URL cannot be parsed
        UnresolvableNameError: If the URL has no path segments
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise InvalidURLError(url, str(e)) from e

    if not parts.scheme or not parts.netloc:
        raise InvalidURLError(url, "expected `scheme://host/path`")

    segments = [segment for segment in parts.path.split("/") if segment]
    if not segments:
        raise UnresolvableNameError(url)

    name = segments[-1]
    if name.endswith(_GIT_SUFFIX):
        name = name[: -len(_GIT_SUFFIX)]
    if not name:
        raise UnresolvableNameError(url)

    publisher = segments[-2] if len(segments) > 1 else ""
    return UrlIdent(publisher=publisher, name=name)


def validate_ident(ident: str) -> None:
    """Check that a registry identifier is well-formed.

    Raises:
        InvalidIdentifierError: If shorter than 2 characters or not starting
            with a letter or digit
    """
    if len(ident) < 2 or not ident[0].isalnum():
        raise InvalidIdentifierError(ident)


def format_install_path(install_path: Path) -> str:
    home = Path.home()
    if install_path.is_relative_to(home):
        return str(Path("~") / install_path.relative_to(home))
    return str(install_path)


def read_installed_version(install_path: Path) -> str:
    """Read the manifest version of an installed module; empty if unknown."""
    try:
        manifest = read_module_manifest(install_path)
    except ManifestError as e:
        logger.warning("Ignoring unreadable manifest: %s", e)
        return ""
    if manifest is None:
        return ""
    return manifest.version


def read_pinned_version(install_path: Path, vcs: Vcs, shell: Shell) -> str:
    """Ask the VCS which tag, if any, is checked out at `install_path`."""
    if shell.get_installed_tool_path(vcs.executable) is None:
        return ""
    result = shell.run_command(vcs.build_pinned_version_command(install_path))
    if not result.ok:
        return ""
    return vcs.parse_pinned_version(result.stdout)


def resolve_module(query: str, ctx: ModpmContext) -> Module:
    """Resolve one query token into a Module.

    Args:
        query: Name, dotted identifier or URL, optionally with `@version`
        ctx: Context supplying settings and the shell used for tag detection

    Returns:
        The resolved module

    Raises:
        InvalidIdentifierError: For malformed registry identifiers
        InvalidURLError: For URLs that cannot be parsed
        UnresolvableNameError: For URLs without a module name
    """
    target, version = split_version(query.strip())
    settings = ctx.settings

    if is_url(target):
        url_ident = parse_url_ident(target)
        publisher = url_ident.publisher
        name = url_ident.name
        url = target
        is_external = True
        ident = f"{publisher}.{name}" if publisher else name
    else:
        validate_ident(target)
        ident = normalize_ident(target)
        publisher, _, name = ident.rpartition(".")
        url = ""
        is_external = False

    install_path = ident_to_path(ident, settings.modules_root)
    is_installed = install_path.is_dir()

    vcs: Vcs | None = None
    installed_version = ""
    pinned_version = ""
    if is_installed:
        vcs = detect_vcs(install_path)
        installed_version = read_installed_version(install_path)
        if vcs is not None:
            pinned_version = read_pinned_version(install_path, vcs, ctx.shell)
    elif is_external:
        vcs = get_vcs(settings.vcs_kind)

    module = Module(
        query=query,
        name=name,
        publisher=publisher,
        url=url,
        requested_version=version,
        install_path=install_path,
        formatted_install_path=format_install_path(install_path),
        is_installed=is_installed,
        installed_version=installed_version,
        pinned_version=pinned_version,
        is_external=is_external,
        vcs=vcs,
    )
    logger.debug("Resolved %r to %s", query, module)
    return module
