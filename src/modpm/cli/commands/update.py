"""Update and upgrade commands."""

import click

from modpm.cli.commands.outdated import collect_outdated_or_exit
from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.exit_codes import EXIT_FAILURE
from modpm.cli.output import user_output
from modpm.core.context import ModpmContext
from modpm.core.installer import Installer
from modpm.core.inventory import get_installed_modules


def _run_update(ctx: ModpmContext, modules: list[str]) -> None:
    installer = Installer(ctx)
    installer.update(modules)
    if installer.has_errors:
        raise SystemExit(EXIT_FAILURE)


@click.command("update")
@click.argument("modules", nargs=-1)
@click.pass_obj
@cli_error_boundary
def update_cmd(ctx: ModpmContext, modules: tuple[str, ...]) -> None:
    """Update installed modules.

    Without arguments, every installed module is updated.

    Examples:

        modpm update jane.json_tools

        modpm update
    """
    targets = list(modules)
    if not targets:
        targets = get_installed_modules(ctx.settings.modules_root)
        if not targets:
            user_output("You have no modules installed.")
            return

    _run_update(ctx, targets)


@click.command("upgrade")
@click.pass_obj
@cli_error_boundary
def upgrade_cmd(ctx: ModpmContext) -> None:
    """Update every installed module that has upstream changes."""
    outdated = collect_outdated_or_exit(ctx)

    if not outdated:
        user_output("Modules are up to date.")
        return

    _run_update(ctx, outdated)
