"""Error boundary handling for CLI commands.

This module provides a decorator to catch well-known exceptions at CLI entry
points and display clean error messages without stack traces.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from modpm.cli.output import format_error, user_output
from modpm.core.errors import ModpmError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


def cli_error_boundary(func: T) -> T:
    """Decorator that turns fatal modpm errors into a clean message and exit code 1.

    Catches:
        - ModpmError: missing VCS tools, unreachable mirrors, disabled prompts,
          unreadable manifests and every other modpm failure that ends the run
        - PermissionError / FileNotFoundError: filesystem access problems
        - ValueError: invalid configuration

    All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @click.pass_obj
        @cli_error_boundary
        def my_command(ctx: ModpmContext) -> None:
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (ModpmError, PermissionError, FileNotFoundError, ValueError) as e:
            logger.debug("Fatal error in %s", func.__name__, exc_info=True)
            user_output(format_error(str(e)))
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
