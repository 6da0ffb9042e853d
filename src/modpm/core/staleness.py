"""Concurrent detection of outdated modules.

One task per module is submitted to a bounded thread pool. Tasks share only
read-only state (settings and the shell), and every task produces its own
StalenessResult. Results are collected after all tasks finish; nothing acts on
them before the pool has drained.
"""

import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from modpm.core.context import ModpmContext
from modpm.core.errors import VcsExecutionError
from modpm.core.inventory import find_installed_module, get_installed_modules
from modpm.core.lookup import Found
from modpm.core.vcs.registry import ensure_vcs_available

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StalenessResult:
    """Outcome of checking one module against its upstream.

    `outdated` is meaningless when `exec_error` is set.
    """

    module_name: str
    outdated: bool
    exec_error: bool
    error_message: str = ""


def max_workers_for(job_count: int) -> int:
    return max(1, min(job_count, os.cpu_count() or 1))


def check_module(module_name: str, ctx: ModpmContext) -> StalenessResult:
    """Check a single module.

    Modules that are not installed, or whose VCS is not supported, are
    reported as up to date rather than as errors.

    Raises:
        ToolMissingError: If the module's VCS executable is not installed
    """
    lookup = find_installed_module(module_name, ctx.settings.modules_root)
    if not isinstance(lookup, Found):
        logger.debug("Skipping staleness check for `%s`: %s", module_name, lookup)
        return StalenessResult(module_name=module_name, outdated=False, exec_error=False)

    installed = lookup.value
    ensure_vcs_available(installed.vcs, ctx.shell)
    try:
        outdated = installed.vcs.check_outdated(installed.path, ctx.shell)
    except VcsExecutionError as e:
        logger.debug("Staleness check for `%s` failed: %s", module_name, e)
        return StalenessResult(
            module_name=module_name,
            outdated=False,
            exec_error=True,
            error_message=str(e),
        )

    logger.debug("`%s` outdated: %s", module_name, outdated)
    return StalenessResult(module_name=module_name, outdated=outdated, exec_error=False)


def check_all(module_names: Sequence[str], ctx: ModpmContext) -> list[StalenessResult]:
    """Check every module concurrently.

    Returns:
        One result per module, in completion order
    """
    if not module_names:
        return []

    results: list[StalenessResult] = []
    with ThreadPoolExecutor(max_workers=max_workers_for(len(module_names))) as executor:
        futures = [executor.submit(check_module, name, ctx) for name in module_names]
        for future in as_completed(futures):
            results.append(future.result())

    return results


def get_outdated(ctx: ModpmContext) -> tuple[list[str], list[StalenessResult]]:
    """Check every installed module.

    Returns:
        (sorted names of outdated modules, results that failed to execute)
    """
    results = check_all(get_installed_modules(ctx.settings.modules_root), ctx)
    failures = sorted(
        (result for result in results if result.exec_error), key=lambda r: r.module_name
    )
    outdated = sorted(result.module_name for result in results if result.outdated)
    return outdated, failures
