"""Outdated command."""

import click

from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.exit_codes import EXIT_FAILURE
from modpm.cli.output import machine_output, user_output
from modpm.core.context import ModpmContext
from modpm.core.staleness import get_outdated


def collect_outdated_or_exit(ctx: ModpmContext) -> list[str]:
    """Check every installed module and return the outdated ones.

    A module whose check failed leaves the state of the modules root unknown,
    so any failure ends the run before anything acts on the result.

    Raises:
        SystemExit: If any module could not be checked
    """
    outdated, failures = get_outdated(ctx)
    if failures:
        for failure in failures:
            ctx.feedback.error(f"Failed to check module `{failure.module_name}` for updates.")
            ctx.feedback.detail(failure.error_message)
        raise SystemExit(EXIT_FAILURE)
    return outdated


@click.command("outdated")
@click.pass_obj
@cli_error_boundary
def outdated_cmd(ctx: ModpmContext) -> None:
    """List installed modules that have upstream changes."""
    outdated = collect_outdated_or_exit(ctx)

    if not outdated:
        user_output("Modules are up to date.")
        return

    user_output("Outdated modules:")
    for name in outdated:
        machine_output(f"  {name}")
