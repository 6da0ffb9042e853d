"""Show command for module details."""

import click
from rich.console import Console
from rich.table import Table

from modpm.cli.error_boundary import cli_error_boundary
from modpm.cli.exit_codes import EXIT_FAILURE
from modpm.core.context import ModpmContext
from modpm.core.errors import (
    InvalidIdentifierError,
    InvalidURLError,
    ManifestError,
    UnresolvableNameError,
)
from modpm.core.lookup import Absent, Failed
from modpm.core.manifest import read_module_manifest
from modpm.core.resolver import Module, resolve_module


def _details_table(title: str, rows: list[tuple[str, str]]) -> Table:
    table = Table(title=title, show_header=False, title_justify="left")
    table.add_column("field", style="cyan", no_wrap=True)
    table.add_column("value")
    for field_name, value in rows:
        table.add_row(field_name, value)
    return table


def _installed_rows(module: Module) -> list[tuple[str, str]] | None:
    manifest = read_module_manifest(module.install_path)
    if manifest is None:
        return None

    rows = [
        ("name", manifest.name or module.ident),
        ("version", manifest.version),
        ("description", manifest.description),
        ("author", manifest.author),
        ("license", manifest.license),
        ("repo", manifest.repo_url),
        ("path", module.formatted_install_path),
    ]
    if module.pinned_version:
        rows.append(("pinned", module.pinned_version))
    if manifest.dependencies:
        rows.append(("dependencies", ", ".join(manifest.dependencies)))
    return rows


@click.command("show")
@click.argument("modules", nargs=-1, required=True)
@click.pass_obj
@cli_error_boundary
def show_cmd(ctx: ModpmContext, modules: tuple[str, ...]) -> None:
    """Show details of modules.

    Installed modules are described from their module.yaml, other modules
    from the registry.
    """
    console = Console(width=200)
    has_errors = False

    for query in modules:
        try:
            module = resolve_module(query, ctx)
        except (InvalidIdentifierError, InvalidURLError, UnresolvableNameError) as e:
            ctx.feedback.error(str(e))
            has_errors = True
            continue

        if module.is_installed:
            try:
                rows = _installed_rows(module)
            except ManifestError as e:
                ctx.feedback.error(f"Failed to read the manifest of `{module.ident}`.")
                ctx.feedback.detail(str(e))
                has_errors = True
                continue
            if rows is None:
                ctx.feedback.error(f"Module `{module.ident}` has no manifest.")
                has_errors = True
                continue
            console.print(_details_table(module.ident, rows))
            continue

        if module.is_external:
            ctx.feedback.error(f"Module `{module.ident}` is not installed.")
            has_errors = True
            continue

        lookup = ctx.registry.fetch_metadata(module.ident)
        if isinstance(lookup, Failed):
            ctx.feedback.error(f"Failed to retrieve metadata for `{module.ident}`.")
            ctx.feedback.detail(lookup.reason)
            has_errors = True
            continue
        if isinstance(lookup, Absent):
            ctx.feedback.error(f"Module `{module.ident}` was not found in the registry.")
            has_errors = True
            continue

        metadata = lookup.value
        rows = [
            ("name", metadata.name),
            ("url", metadata.url),
            ("vcs", metadata.vcs),
            ("downloads", str(metadata.download_count)),
        ]
        if metadata.description:
            rows.append(("description", metadata.description))
        console.print(_details_table(metadata.name, rows))

    if has_errors:
        raise SystemExit(EXIT_FAILURE)
