"""Install command."""

import click

from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.exit_codes import EXIT_FAILURE, EXIT_MISSING_ARGUMENTS
from modpm.cli.output import format_error, user_output
from modpm.core.context import ModpmContext
from modpm.core.installer import Installer
from modpm.core.manifest import MANIFEST_FILE_NAME, read_module_manifest


def _dependencies_of_current_project(ctx: ModpmContext) -> list[str]:
    manifest = read_module_manifest(ctx.cwd)
    if manifest is None:
        user_output(
            format_error(
                f"Specify at least one module to install, "
                f"or run from a directory containing {MANIFEST_FILE_NAME}."
            )
        )
        raise SystemExit(EXIT_MISSING_ARGUMENTS)
    return manifest.dependencies


@click.command("install")
@click.argument("modules", nargs=-1)
@click.option("-f", "--force", is_flag=True, help="Replace installed modules without asking.")
@click.option("--once", is_flag=True, help="Skip modules that are already installed.")
@click.option("--git", "use_git", is_flag=True, help="Install URLs with git (default).")
@click.option("--hg", "use_hg", is_flag=True, help="Install URLs with mercurial.")
@click.pass_obj
@cli_error_boundary
def install_cmd(
    ctx: ModpmContext,
    modules: tuple[str, ...],
    force: bool,
    once: bool,
    use_git: bool,
    use_hg: bool,
) -> None:
    """Install modules by name or repository URL.

    Without arguments, installs the dependencies listed in the module.yaml of
    the current directory. Dependencies of every installed module are
    installed as well.

    Examples:

        # Install a published module
        modpm install jane.json_tools

        # Install a specific version
        modpm install jane.json_tools@v0.3.1

        # Install straight from a repository
        modpm install --hg https://hg.example.com/jane/json_tools
    """
    if use_git and use_hg:
        raise click.UsageError("--git and --hg are mutually exclusive.")

    ctx = ctx.with_settings(force=force, once=once, vcs_kind="hg" if use_hg else "git")

    queries = list(modules)
    if not queries:
        queries = _dependencies_of_current_project(ctx)
        if not queries:
            user_output(f"No dependencies listed in {MANIFEST_FILE_NAME}.")
            return

    installer = Installer(ctx)
    installer.install(queries)

    if installer.has_errors:
        raise SystemExit(EXIT_FAILURE)
