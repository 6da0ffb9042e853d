"""Run settings and their loading.

Settings are built once at the CLI entry point from, in increasing priority:

1. Built-in defaults
2. ~/.modpm/config.toml (`modules_root`, `server_urls`)
3. Environment variables (MODPM_MODULES, MODPM_FAIL_ON_PROMPT, MODPM_EXE)
4. Command-line options

and then carried, unchanged, in ModpmContext.
"""

import os
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from modpm.core.registry_client.mirrors import DEFAULT_SERVER_URLS, shuffled_server_urls
from modpm.core.vcs.abc import VcsKind

MODULES_ROOT_ENV = "MODPM_MODULES"
FAIL_ON_PROMPT_ENV = "MODPM_FAIL_ON_PROMPT"
FRONTEND_EXE_ENV = "MODPM_EXE"
DEBUG_ENV = "MODPM_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Immutable settings for a single run.

    Attributes:
        modules_root: Directory that holds every installed module
        server_urls: Registry mirrors in the order they are queried
        force: Overwrite installed modules without asking
        once: Skip modules that are already installed
        verbose: Show commands and raw VCS output
        fail_on_prompt: Abort instead of asking for confirmation
        vcs_kind: VCS used to install modules given by URL
        frontend_exe: Path of the executable that invoked modpm, for help text
    """

    modules_root: Path
    server_urls: tuple[str, ...]
    force: bool = False
    once: bool = False
    verbose: bool = False
    fail_on_prompt: bool = False
    vcs_kind: VcsKind = "git"
    frontend_exe: str = "modpm"


def default_config_path() -> Path:
    return Path.home() / ".modpm" / "config.toml"


def default_modules_root() -> Path:
    return Path.home() / ".modpm" / "modules"


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def load_config_file(config_path: Path) -> dict[str, object]:
    """Read the optional TOML config file.

    Returns:
        Parsed table, or an empty dict if the file does not exist

    Raises:
        ValueError: If the file is not valid TOML or has fields of the wrong type
    """
    if not config_path.exists():
        return {}

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    modules_root = data.get("modules_root")
    if modules_root is not None and not isinstance(modules_root, str):
        raise ValueError(f"`modules_root` in {config_path} must be a string")

    server_urls = data.get("server_urls")
    if server_urls is not None:
        if not isinstance(server_urls, list) or not all(isinstance(u, str) for u in server_urls):
            raise ValueError(f"`server_urls` in {config_path} must be a list of strings")

    return data


def parse_server_urls(value: str) -> tuple[str, ...]:
    """Split a comma-separated `--server-urls` value."""
    return tuple(url.strip() for url in value.split(",") if url.strip())


def load_settings(
    *,
    env: Mapping[str, str],
    config_path: Path | None = None,
    server_urls_override: Sequence[str] | None = None,
    verbose: bool = False,
    fail_on_prompt: bool = False,
) -> Settings:
    """Build the settings for this run.

    Mirrors from the defaults or the config file are shuffled once per process;
    an explicit `server_urls_override` is used in the order given.

    Args:
        env: Environment variables, usually os.environ
        config_path: Config file location; defaults to ~/.modpm/config.toml
        server_urls_override: Mirrors passed on the command line
        verbose: --verbose flag
        fail_on_prompt: --fail-on-prompt flag

    Returns:
        Settings for the run

    Raises:
        ValueError: If the config file is malformed
    """
    data = load_config_file(config_path if config_path is not None else default_config_path())

    modules_root = default_modules_root()
    config_root = data.get("modules_root")
    if isinstance(config_root, str):
        modules_root = Path(config_root)
    env_root = env.get(MODULES_ROOT_ENV)
    if env_root:
        modules_root = Path(env_root)

    if server_urls_override:
        server_urls = tuple(server_urls_override)
    else:
        config_urls = data.get("server_urls")
        base_urls = tuple(config_urls) if isinstance(config_urls, list) else DEFAULT_SERVER_URLS
        server_urls = shuffled_server_urls(base_urls)

    return Settings(
        modules_root=modules_root.expanduser().resolve(),
        server_urls=server_urls,
        verbose=verbose,
        fail_on_prompt=fail_on_prompt or is_truthy(env.get(FAIL_ON_PROMPT_ENV)),
        frontend_exe=env.get(FRONTEND_EXE_ENV) or "modpm",
    )


def debug_requested(env: Mapping[str, str] = os.environ) -> bool:
    return is_truthy(env.get(DEBUG_ENV))
