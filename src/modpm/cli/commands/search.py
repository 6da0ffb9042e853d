"""Search command for registry modules."""

import click

from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.output import machine_output, user_output
from modpm.core.context import ModpmContext
from modpm.core.inventory import get_installed_modules


def filter_module_names(names: list[str], terms: tuple[str, ...]) -> list[str]:
    """Keep the names that contain every term, case-insensitively."""
    lowered = [term.lower() for term in terms]
    return sorted(name for name in names if all(term in name.lower() for term in lowered))


@click.command("search")
@click.argument("terms", nargs=-1, required=True)
@click.pass_obj
@cli_error_boundary
def search_cmd(ctx: ModpmContext, terms: tuple[str, ...]) -> None:
    """Search the registry for modules whose names contain every term.

    Examples:

        modpm search json

        modpm search json tools
    """
    matches = filter_module_names(ctx.registry.list_all_modules(), terms)

    if not matches:
        user_output(f"No module found matching `{' '.join(terms)}`.")
        return

    installed = set(get_installed_modules(ctx.settings.modules_root))
    user_output(f"Found {len(matches)} module(s):")
    for name in matches:
        marker = click.style(" (installed)", fg="green") if name in installed else ""
        machine_output(f"  {name}{marker}")
