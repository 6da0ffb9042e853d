"""Help command."""

import click

from modpm.cli.exit_codes import EXIT_UNKNOWN_COMMAND
from modpm.cli.output import format_error, machine_output, user_output
from modpm.core.context import ModpmContext


@click.command("help")
@click.argument("command_name", required=False)
@click.pass_context
def help_cmd(ctx: click.Context, command_name: str | None) -> None:
    """Show help for modpm or one of its commands."""
    parent = ctx.parent
    assert parent is not None, "help is always invoked through the modpm group"
    group = parent.command
    assert isinstance(group, click.Group)

    modpm_ctx = ctx.obj
    exe = modpm_ctx.settings.frontend_exe if isinstance(modpm_ctx, ModpmContext) else "modpm"

    if command_name is None:
        machine_output(group.get_help(parent))
        user_output(f"\nRun `{exe} help <command>` for details on a command.")
        return

    command = group.get_command(parent, command_name)
    if command is None:
        user_output(format_error(f"Unknown command `{command_name}`."))
        raise SystemExit(EXIT_UNKNOWN_COMMAND)

    with click.Context(command, info_name=command_name, parent=parent) as sub_ctx:
        machine_output(command.get_help(sub_ctx))
