import logging
import os
from pathlib import Path

import click
import httpx

from modpm import __version__
from modpm.cli.commands.help import help_cmd
from modpm.cli.commands.install import install_cmd
from modpm.cli.commands.list import list_cmd
from modpm.cli.commands.outdated import outdated_cmd
from modpm.cli.commands.remove import remove_cmd
from modpm.cli.commands.search import search_cmd
from modpm.cli.commands.show import show_cmd
from modpm.cli.commands.update import update_cmd, upgrade_cmd
from modpm.cli.exit_codes import EXIT_FAILURE, EXIT_NO_COMMAND
from modpm.cli.help_formatter import ModpmGroup
from modpm.cli.output import format_error, user_output
from modpm.core.context import create_context
from modpm.core.settings import debug_requested, load_settings, parse_server_urls

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def _configure_logging(verbose: bool) -> None:
    if verbose or debug_requested():
        logging.basicConfig(
            level=logging.DEBUG,
            format="[DEBUG %(name)s:%(lineno)d] %(message)s",
        )


@click.group(cls=ModpmGroup, invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="modpm")
@click.option("-v", "--verbose", is_flag=True, help="Show commands and raw VCS output.")
@click.option(
    "--server-urls",
    default=None,
    help="Comma-separated registry mirrors, queried in the given order.",
)
@click.option(
    "--fail-on-prompt",
    is_flag=True,
    help="Abort instead of asking for confirmation.",
)
@click.pass_context
def cli(
    ctx: click.Context, verbose: bool, server_urls: str | None, fail_on_prompt: bool
) -> None:
    """Install and maintain modules from the module registry or VCS URLs."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        raise SystemExit(EXIT_NO_COMMAND)

    _configure_logging(verbose)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is not None:
        return

    try:
        settings = load_settings(
            env=os.environ,
            server_urls_override=parse_server_urls(server_urls) if server_urls else None,
            verbose=verbose,
            fail_on_prompt=fail_on_prompt,
        )
    except ValueError as e:
        user_output(format_error(str(e)))
        raise SystemExit(EXIT_FAILURE) from None

    http_client = httpx.Client(
        follow_redirects=True,
        headers={"User-Agent": f"modpm/{__version__}"},
    )
    ctx.call_on_close(http_client.close)
    ctx.obj = create_context(settings, http_client=http_client, cwd=Path.cwd())


# Register all commands
cli.add_command(help_cmd)
cli.add_command(install_cmd)
cli.add_command(list_cmd)
cli.add_command(outdated_cmd)
cli.add_command(remove_cmd)
cli.add_command(search_cmd)
cli.add_command(show_cmd)
cli.add_command(update_cmd)
cli.add_command(upgrade_cmd)


def main() -> None:
    """CLI entry point used by the `modpm` console script."""
    cli()
