"""Output routing for CLI commands.

- user_output: progress, diagnostics and errors, written to stderr
- machine_output: results meant to be consumed (lists, search hits), written to stdout
"""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a user-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", *, nl: bool = True) -> None:
    """Write a result line to stdout."""
    click.echo(message, nl=nl)


def format_error(message: str) -> str:
    """Prefix `message` with the red "Error: " marker."""
    return click.style("Error: ", fg="red") + message
