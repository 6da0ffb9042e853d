"""List command for showing installed modules."""

import click

from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.output import machine_output, user_output
from modpm.core.context import ModpmContext
from modpm.core.inventory import get_installed_modules


@click.command("list")
@click.pass_obj
@cli_error_boundary
def list_cmd(ctx: ModpmContext) -> None:
    """List all installed modules."""
    modules = get_installed_modules(ctx.settings.modules_root)

    if not modules:
        user_output("You have no modules installed.")
        return

    user_output(f"Installed {len(modules)} module(s):")
    for name in modules:
        machine_output(f"  {name}")
