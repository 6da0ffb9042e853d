"""Interactive confirmation prompts."""

from abc import ABC, abstractmethod

import click


class Prompt(ABC):
    """Abstract interface for yes/no questions to the user."""

    @abstractmethod
    def confirm(self, message: str, *, default: bool) -> bool:
        """Ask a yes/no question.

        Args:
            message: Question shown to the user
            default: Answer used when the user just presses enter

        Returns:
            True if the user agreed
        """
        ...


class InteractivePrompt(Prompt):
    """Asks on the terminal using click."""

    def confirm(self, message: str, *, default: bool) -> bool:
        return click.confirm(message, default=default, err=True)
