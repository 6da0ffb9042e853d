"""Install, update and remove orchestration.

Every mutation of the modules root goes through Installer, one module at a
time, including dependency cascades. Per-module failures are reported and
counted on the Installer so the command can exit non-zero while still
processing the remaining modules. Pre-flight failures (missing VCS executable,
a confirmation that cannot be asked) propagate and end the run.
"""

import logging
import shutil
from collections.abc import Collection, Sequence
from enum import Enum
from pathlib import Path

from modpm.core.context import ModpmContext
from modpm.core.errors import (
    InvalidIdentifierError,
    InvalidURLError,
    ManifestError,
    MirrorError,
    ModuleFilesystemError,
    PromptUnavailableError,
    UnresolvableNameError,
    VcsExecutionError,
)
from modpm.core.inventory import find_installed_module, ident_to_path, path_to_ident
from modpm.core.lookup import Absent, Failed
from modpm.core.manifest import read_module_manifest
from modpm.core.resolver import Module, resolve_module, validate_ident
from modpm.core.settings import Settings
from modpm.core.subprocess import format_command, run_with_context
from modpm.core.vcs.abc import Vcs
from modpm.core.vcs.registry import ensure_vcs_available, get_vcs

logger = logging.getLogger(__name__)


class InstallAction(Enum):
    """What to do with a resolved module."""

    INSTALL = "install"
    UPDATE_BY_NAME = "update_by_name"
    UPDATE_EXTERNAL = "update_external"
    OVERWRITE = "overwrite"
    CONFIRM_OVERWRITE = "confirm_overwrite"
    SKIP = "skip"


def decide_install_action(module: Module, settings: Settings) -> InstallAction:
    """Decide how to handle an install request for `module`.

    - Not installed: fresh install
    - Installed and --once: skip
    - Installed, no version requested, nothing pinned: update in place. Modules
      installed from a plain HTTP URL are updated by their install path, others
      by their identifier.
    - Installed otherwise: overwrite when forced, else ask first
    """
    if not module.is_installed:
        return InstallAction.INSTALL

    if settings.once:
        return InstallAction.SKIP

    if not module.requested_version and not module.is_pinned:
        if module.is_external and module.url.startswith("http://"):
            return InstallAction.UPDATE_EXTERNAL
        return InstallAction.UPDATE_BY_NAME

    if settings.force:
        return InstallAction.OVERWRITE

    return InstallAction.CONFIRM_OVERWRITE


def is_requested_version_installed(module: Module) -> bool:
    requested = module.requested_version
    return requested == module.installed_version or (
        requested != "" and requested == module.pinned_version
    )


def confirm_install(module: Module, ctx: ModpmContext) -> bool:
    """Ask whether an installed module should be replaced.

    Returns False without asking when the requested version is the installed
    one.

    Raises:
        PromptUnavailableError: If a question is needed but prompting is disabled
    """
    installed_label = _with_version(module.ident, module.pinned_version or module.installed_version)

    if is_requested_version_installed(module):
        ctx.feedback.info(
            f"Module `{installed_label}` is already installed, use --force to overwrite."
        )
        return False

    if ctx.settings.fail_on_prompt:
        raise PromptUnavailableError(
            f"Module `{installed_label}` is already installed at "
            f"`{module.formatted_install_path}` and replacing it needs confirmation."
        )

    replacement = _with_version(
        module.ident, module.requested_version or module.pinned_version or module.installed_version
    )
    ctx.feedback.info(
        f"Module `{installed_label}` is already installed at `{module.formatted_install_path}`."
    )
    return ctx.prompt.confirm(f"Replace it with `{replacement}`?", default=True)


def cascade_dependencies(dependencies: Sequence[str], queries: Collection[str]) -> list[str]:
    """Return the dependencies that are not part of the original queries, in order."""
    return [dep for dep in dependencies if dep not in queries]


def remove_module_dir(install_path: Path, modules_root: Path) -> None:
    """Delete a module checkout, and its publisher directory if that becomes empty.

    Raises:
        ModuleFilesystemError: If a directory cannot be removed
    """
    try:
        shutil.rmtree(install_path)
    except OSError as e:
        raise ModuleFilesystemError(f"Failed to remove `{install_path}`: {e}") from e

    parent = install_path.parent
    if parent == modules_root or not parent.is_relative_to(modules_root):
        return
    if any(parent.iterdir()):
        return

    try:
        parent.rmdir()
    except OSError as e:
        raise ModuleFilesystemError(f"Failed to remove empty directory `{parent}`: {e}") from e


def _with_version(ident: str, version: str) -> str:
    if version:
        return f"{ident}@{version}"
    return ident


class Installer:
    """Sequential installer for one run.

    Attributes:
        error_count: Number of modules that failed so far
    """

    def __init__(self, ctx: ModpmContext) -> None:
        self._ctx = ctx
        self.error_count = 0

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def _fail(self, message: str, detail: str = "") -> None:
        self.error_count += 1
        self._ctx.feedback.error(message)
        if detail:
            self._ctx.feedback.detail(detail)

    # ------------------------------------------------------------------
    # install
    # ------------------------------------------------------------------

    def install(self, queries: Sequence[str]) -> None:
        """Install every query, then cascade into their dependencies.

        Raises:
            ToolMissingError: If a required VCS executable is not installed
            PromptUnavailableError: If a conflict needs confirmation but
                prompting is disabled
        """
        self._install_queries(queries, frozenset(queries))

    def _install_queries(self, queries: Sequence[str], original_queries: frozenset[str]) -> None:
        for query in queries:
            self._install_query(query, original_queries)

    def _install_query(self, query: str, original_queries: frozenset[str]) -> None:
        try:
            module = resolve_module(query, self._ctx)
        except (InvalidIdentifierError, InvalidURLError, UnresolvableNameError) as e:
            self._fail(str(e))
            return

        action = decide_install_action(module, self._ctx.settings)
        logger.debug("Action for `%s`: %s", module.ident, action.value)

        match action:
            case InstallAction.SKIP:
                self._ctx.feedback.info(f"Module `{module.ident}` is already installed, skipping.")
                return
            case InstallAction.UPDATE_BY_NAME:
                self.update([module.ident])
                return
            case InstallAction.UPDATE_EXTERNAL:
                self.update([path_to_ident(module.install_path, self._ctx.settings.modules_root)])
                return
            case InstallAction.CONFIRM_OVERWRITE:
                if not confirm_install(module, self._ctx):
                    return
            case InstallAction.OVERWRITE | InstallAction.INSTALL:
                pass

        # Nothing is removed until the source is known and its VCS is usable
        source = self._resolve_source(module)
        if source is None:
            return
        url, vcs = source
        ensure_vcs_available(vcs, self._ctx.shell)

        if module.is_installed:
            try:
                remove_module_dir(module.install_path, self._ctx.settings.modules_root)
            except ModuleFilesystemError as e:
                self._fail(f"Failed to replace `{module.ident}`.", str(e))
                return

        if self._install_fresh(module, url, vcs):
            self._install_dependencies(module, original_queries)

    def _resolve_source(self, module: Module) -> tuple[str, Vcs] | None:
        """Find the URL and VCS to install `module` from.

        Registry modules are looked up remotely; external modules carry both.
        """
        if module.is_external:
            if module.vcs is not None:
                return module.url, module.vcs
            return module.url, get_vcs(self._ctx.settings.vcs_kind)

        lookup = self._ctx.registry.fetch_metadata(module.ident)
        if isinstance(lookup, Failed):
            self._fail(f"Failed to retrieve metadata for `{module.ident}`.", lookup.reason)
            return None
        if isinstance(lookup, Absent):
            self._fail(f"Module `{module.ident}` was not found in the registry.")
            return None

        metadata = lookup.value
        try:
            vcs = get_vcs(metadata.vcs)
        except ValueError as e:
            self._fail(f"Failed to install `{module.ident}`: {e}")
            return None
        return metadata.url, vcs

    def _install_fresh(self, module: Module, url: str, vcs: Vcs) -> bool:
        try:
            module.install_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._fail(f"Failed to create the install directory for `{module.ident}`.", str(e))
            return False

        label = _with_version(module.ident, module.requested_version)
        cmd = vcs.build_install_command(url, module.install_path, module.requested_version)
        self._ctx.feedback.info(f"Installing `{label}`...")
        self._ctx.feedback.detail(f"  Command: {format_command(cmd)}")

        try:
            result = run_with_context(self._ctx.shell, cmd, f"install `{label}`")
        except VcsExecutionError as e:
            self._fail(f"Failed to install `{label}`.", str(e))
            return False

        if result.stdout.strip():
            self._ctx.feedback.detail(result.stdout.strip())
        self._ctx.feedback.success(f"Installed `{label}` to `{module.formatted_install_path}`.")

        if not module.is_external:
            try:
                self._ctx.registry.increment_download_count(module.ident)
            except MirrorError as e:
                self._fail(f"Failed to increment the download count for `{module.ident}`.", str(e))

        return True

    def _install_dependencies(self, module: Module, original_queries: frozenset[str]) -> None:
        try:
            manifest = read_module_manifest(module.install_path)
        except ManifestError as e:
            self._fail(f"Failed to read the manifest of `{module.ident}`.", str(e))
            return

        if manifest is None:
            return

        dependencies = cascade_dependencies(manifest.dependencies, original_queries)
        if not dependencies:
            return

        self._ctx.feedback.info(
            f"Resolving {len(dependencies)} dependencies for module `{module.ident}`..."
        )
        self._ctx.feedback.detail(f"  Dependencies: {', '.join(dependencies)}")
        self._install_queries(dependencies, original_queries)

    # ------------------------------------------------------------------
    # update
    # ------------------------------------------------------------------

    def update(self, idents: Sequence[str]) -> None:
        """Update installed modules in place.

        Raises:
            ToolMissingError: If a module's VCS executable is not installed
        """
        for ident in idents:
            self._update_one(ident)

    def _update_one(self, ident: str) -> None:
        try:
            validate_ident(ident)
        except InvalidIdentifierError as e:
            self._fail(str(e))
            return

        lookup = find_installed_module(ident, self._ctx.settings.modules_root)
        if isinstance(lookup, Absent):
            self._fail(f"Module `{ident}` is not installed.")
            return
        if isinstance(lookup, Failed):
            self._fail(f"Skipping `{ident}`: {lookup.reason}.")
            return

        installed = lookup.value
        ensure_vcs_available(installed.vcs, self._ctx.shell)

        cmd = installed.vcs.build_update_command(installed.path)
        self._ctx.feedback.info(f"Updating module `{ident}`...")
        self._ctx.feedback.detail(f"  Command: {format_command(cmd)}")

        try:
            result = run_with_context(self._ctx.shell, cmd, f"update `{ident}`")
        except VcsExecutionError as e:
            self._fail(f"Failed to update module `{ident}`.", str(e))
            return

        if result.stdout.strip():
            self._ctx.feedback.detail(result.stdout.strip())
        self._ctx.feedback.success(f"Updated module `{ident}`.")

    # ------------------------------------------------------------------
    # remove
    # ------------------------------------------------------------------

    def remove(self, idents: Sequence[str]) -> None:
        """Delete installed modules and any publisher directory left empty."""
        modules_root = self._ctx.settings.modules_root
        for ident in idents:
            try:
                validate_ident(ident)
            except InvalidIdentifierError as e:
                self._fail(str(e))
                continue

            install_path = ident_to_path(ident, modules_root)
            if not install_path.is_dir():
                self._fail(f"Module `{ident}` is not installed.")
                continue

            self._ctx.feedback.info(f"Removing module `{ident}`...")
            self._ctx.feedback.detail(f"  Path: {install_path}")
            try:
                remove_module_dir(install_path, modules_root)
            except ModuleFilesystemError as e:
                self._fail(f"Failed to remove module `{ident}`.", str(e))
                continue
            self._ctx.feedback.success(f"Removed module `{ident}`.")
