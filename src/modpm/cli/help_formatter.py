"""Custom Click group for organized command display and command aliases."""

import click

from modpm.cli.exit_codes import EXIT_UNKNOWN_COMMAND
from modpm.cli.output import format_error, user_output

# Alternative names accepted on the command line; not listed in help
COMMAND_ALIASES = {"uninstall": "remove"}


class ModpmGroup(click.Group):
    """Click Group that organizes commands into sections in help output.

    Commands are organized into sections based on what they touch:
    - Manage Modules: commands that change the modules root
    - Inspect: read-only commands

    Unknown command names end the run with EXIT_UNKNOWN_COMMAND instead of
    click's usage error.
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0]
        if not cmd_name.startswith("-") and self.get_command(ctx, cmd_name) is None:
            user_output(format_error(f"Unknown command `{cmd_name}`."))
            user_output(f"Run `{ctx.command_path} help` for usage.")
            raise SystemExit(EXIT_UNKNOWN_COMMAND)
        return super().resolve_command(ctx, args)

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Format commands into organized sections."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd))

        if not commands:
            return

        manage = ["install", "update", "upgrade", "remove"]

        manage_cmds = [(name, cmd) for name, cmd in commands if name in manage]
        inspect_cmds = [(name, cmd) for name, cmd in commands if name not in manage]

        if manage_cmds:
            with formatter.section("Manage Modules"):
                self._format_command_list(formatter, manage_cmds)

        if inspect_cmds:
            with formatter.section("Inspect"):
                self._format_command_list(formatter, inspect_cmds)

    def _format_command_list(
        self,
        formatter: click.HelpFormatter,
        commands: list[tuple[str, click.Command]],
    ) -> None:
        """Format a list of commands with their help text."""
        rows = []
        for name, cmd in commands:
            help_text = cmd.get_short_help_str(limit=formatter.width)
            rows.append((name, help_text))

        if rows:
            formatter.write_dl(rows)
