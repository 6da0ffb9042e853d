"""Application context with dependency injection."""

from dataclasses import dataclass, replace
from pathlib import Path

import httpx

from modpm.core.prompt import InteractivePrompt, Prompt
from modpm.core.registry_client.abc import RegistryClient
from modpm.core.registry_client.real import RealRegistryClient
from modpm.core.settings import Settings
from modpm.core.shell.abc import Shell
from modpm.core.shell.real import RealShell
from modpm.core.user_feedback import InteractiveFeedback, UserFeedback


@dataclass(frozen=True)
class ModpmContext:
    """Immutable context holding all dependencies for modpm operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime; commands that add
    per-command flags derive a new context with with_settings().
    """

    shell: Shell
    registry: RegistryClient
    prompt: Prompt
    feedback: UserFeedback
    settings: Settings
    cwd: Path  # Current working directory at CLI invocation

    def with_settings(self, **changes: object) -> "ModpmContext":
        """Return a copy of this context with some settings replaced.

        Example:
            >>> ctx = ctx.with_settings(force=True, once=False)
        """
        return replace(self, settings=replace(self.settings, **changes))

    @staticmethod
    def for_test(
        shell: Shell | None = None,
        registry: RegistryClient | None = None,
        prompt: Prompt | None = None,
        feedback: UserFeedback | None = None,
        settings: Settings | None = None,
        modules_root: Path | None = None,
        cwd: Path | None = None,
    ) -> "ModpmContext":
        """Create test context with optional pre-configured integration classes.

        Provides full control over all context parameters with sensible test
        defaults for any unspecified values.

        Args:
            shell: Optional Shell. If None, creates FakeShell with git and hg installed.
            registry: Optional RegistryClient. If None, creates empty FakeRegistryClient.
            prompt: Optional Prompt. If None, creates FakePrompt that always declines.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            settings: Optional Settings. If None, builds test defaults rooted at
                `modules_root`.
            modules_root: Modules root used when `settings` is None.
                Defaults to Path("/test/modules").
            cwd: Optional current working directory. Defaults to Path("/test/cwd").

        Returns:
            ModpmContext configured with provided values and test defaults

        Example:
            >>> shell = FakeShell(results={...})
            >>> ctx = ModpmContext.for_test(shell=shell, modules_root=tmp_path)
        """
        from tests.fakes.prompt import FakePrompt
        from tests.fakes.registry import FakeRegistryClient
        from tests.fakes.shell import FakeShell
        from tests.fakes.user_feedback import FakeUserFeedback

        if shell is None:
            shell = FakeShell(installed_tools={"git": "/usr/bin/git", "hg": "/usr/bin/hg"})

        if registry is None:
            registry = FakeRegistryClient()

        if prompt is None:
            prompt = FakePrompt(answer=False)

        if feedback is None:
            feedback = FakeUserFeedback()

        if settings is None:
            settings = Settings(
                modules_root=modules_root if modules_root is not None else Path("/test/modules"),
                server_urls=("https://registry.test",),
            )

        return ModpmContext(
            shell=shell,
            registry=registry,
            prompt=prompt,
            feedback=feedback,
            settings=settings,
            cwd=cwd if cwd is not None else Path("/test/cwd"),
        )


def create_context(settings: Settings, *, http_client: httpx.Client, cwd: Path) -> ModpmContext:
    """Create production context with real implementations.

    Called once at CLI entry point to create the context for the entire
    command execution.

    Args:
        settings: Settings for the run
        http_client: HTTP client used for registry requests; owned by the caller
        cwd: Current working directory

    Returns:
        ModpmContext with real shell, registry client and prompt
    """
    return ModpmContext(
        shell=RealShell(),
        registry=RealRegistryClient(settings.server_urls, http_client),
        prompt=InteractivePrompt(),
        feedback=InteractiveFeedback(verbose=settings.verbose),
        settings=settings,
        cwd=cwd,
    )
