"""Git backend."""

from pathlib import Path
from typing import ClassVar

from modpm.core.shell.abc import Shell
from modpm.core.subprocess import run_with_context
from modpm.core.vcs.abc import Vcs, VcsKind


class GitVcs(Vcs):
    """Git backend.

    A working copy is outdated when `rev-parse @` (local HEAD) and
    `rev-parse @{u}` (upstream HEAD) disagree after a `fetch`.
    """

    kind: ClassVar[VcsKind] = "git"
    executable: ClassVar[str] = "git"
    marker_dir: ClassVar[str] = ".git"
    install_args: ClassVar[tuple[str, ...]] = (
        "clone",
        "--depth=1",
        "--recursive",
        "--shallow-submodules",
    )
    version_pin_flag: ClassVar[str] = "--branch"
    path_flag: ClassVar[str] = "-C"
    update_args: ClassVar[tuple[str, ...]] = ("pull", "--recurse-submodules")
    outdated_steps: ClassVar[tuple[tuple[str, ...], ...]] = (
        ("fetch",),
        ("rev-parse", "@"),
        ("rev-parse", "@{u}"),
    )

    def build_pinned_version_command(self, path: Path) -> list[str]:
        return [self.executable, self.path_flag, str(path), "describe", "--tags", "--exact-match"]

    def parse_pinned_version(self, output: str) -> str:
        return output.strip()

    def check_outdated(self, path: Path, shell: Shell) -> bool:
        fetch, local_head, upstream_head = self.build_outdated_steps(path)
        run_with_context(shell, fetch, f"fetch upstream changes for `{path}`")
        local = run_with_context(shell, local_head, f"read local revision of `{path}`")
        upstream = run_with_context(shell, upstream_head, f"read upstream revision of `{path}`")
        return local.stdout.strip() != upstream.stdout.strip()
