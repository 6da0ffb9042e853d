"""Remove command for uninstalling modules."""

import click

from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.exit_codes import EXIT_FAILURE
from modpm.core.context import ModpmContext
from modpm.core.installer import Installer


@click.command("remove")
@click.argument("modules", nargs=-1, required=True)
@click.pass_obj
@cli_error_boundary
def remove_cmd(ctx: ModpmContext, modules: tuple[str, ...]) -> None:
    """Remove installed modules.

    The publisher directory is removed too once its last module is gone.

    Examples:

        modpm remove jane.json_tools
    """
    installer = Installer(ctx)
    installer.remove(list(modules))

    if installer.has_errors:
        raise SystemExit(EXIT_FAILURE)
