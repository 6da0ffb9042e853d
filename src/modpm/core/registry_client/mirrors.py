"""Registry mirror list and load-spreading order."""

import functools
import random

DEFAULT_SERVER_URLS: tuple[str, ...] = (
    "https://registry.modpm.dev",
    "https://mirror-eu.modpm.dev",
    "https://mirror-us.modpm.dev",
)


@functools.cache
def shuffled_server_urls(server_urls: tuple[str, ...]) -> tuple[str, ...]:
    """Return `server_urls` in a random order that is fixed for the process.

    The order is drawn on first use and cached, so every request made during
    one run walks the mirrors in the same sequence while separate runs spread
    their load across mirrors.
    """
    return tuple(random.sample(server_urls, k=len(server_urls)))
