"""User-facing diagnostic output with verbosity awareness."""

from abc import ABC, abstractmethod

import click

from modpm.cli.output import format_error, user_output


class UserFeedback(ABC):
    """Provides user-facing output that respects the verbosity setting.

    Functions call ctx.feedback methods instead of printing, so the
    orchestration code does not need to know whether --verbose is active or
    whether it runs under test.

    Usage:
        ctx.feedback.info("Installing `publisher.name`...")
        ctx.feedback.detail(f"Command: {command}")
        ctx.feedback.success("Installed `publisher.name`")
        ctx.feedback.error("Failed to install `publisher.name`")

    Mode behavior:
        - info() / success() / error() are always shown
        - detail() is shown only in verbose mode
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message with the "Error: " prefix."""

    @abstractmethod
    def detail(self, message: str) -> None:
        """Show diagnostic detail (suppressed unless verbose)."""


class InteractiveFeedback(UserFeedback):
    """Feedback written to stderr."""

    def __init__(self, *, verbose: bool) -> None:
        self._verbose = verbose

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def error(self, message: str) -> None:
        user_output(format_error(message))

    def detail(self, message: str) -> None:
        if self._verbose:
            user_output(click.style(message, dim=True))
