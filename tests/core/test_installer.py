"""Tests for the install/update/remove orchestration."""

from dataclasses import replace
from pathlib import Path

import pytest

from modpm.core.context import ModpmContext
from modpm.core.errors import PromptUnavailableError, ToolMissingError
from modpm.core.installer import (
    InstallAction,
    Installer,
    cascade_dependencies,
    confirm_install,
    decide_install_action,
    remove_module_dir,
)
from modpm.core.registry_client.types import ModuleMetadata
from modpm.core.resolver import Module
from modpm.core.settings import Settings
from modpm.core.shell.abc import CommandResult
from modpm.core.vcs.registry import GIT
from tests.fakes.prompt import FakePrompt
from tests.fakes.registry import FakeRegistryClient
from tests.fakes.shell import FakeShell
from tests.fakes.user_feedback import FakeUserFeedback


def _module(**overrides: object) -> Module:
    module = Module(
        query="jane.json_tools",
        name="json_tools",
        publisher="jane",
        url="",
        requested_version="",
        install_path=Path("/test/modules/jane/json_tools"),
        formatted_install_path="/test/modules/jane/json_tools",
        is_installed=True,
        installed_version="0.3.1",
        pinned_version="",
        is_external=False,
        vcs=GIT,
    )
    return replace(module, **overrides)


def _settings(**overrides: object) -> Settings:
    return replace(Settings(modules_root=Path("/test/modules"), server_urls=()), **overrides)


def _metadata(name: str) -> ModuleMetadata:
    publisher, _, short = name.rpartition(".")
    return ModuleMetadata(
        name=name, url=f"https://example.com/{publisher}/{short}", vcs="git", download_count=1
    )


def _cloning_shell(
    manifests: dict[str, str] | None = None, fail_urls: set[str] | None = None
) -> FakeShell:
    """FakeShell whose `git clone` creates the checkout, with an optional manifest per URL."""
    manifests = manifests or {}
    fail_urls = fail_urls or set()

    def handler(command: list[str]) -> CommandResult | None:
        if command[:2] != ["git", "clone"]:
            return None
        url, destination = command[-2], Path(command[-1])
        if url in fail_urls:
            return CommandResult(128, "", "fatal: repository not found")
        (destination / ".git").mkdir(parents=True)
        if url in manifests:
            (destination / "module.yaml").write_text(manifests[url], encoding="utf-8")
        return None

    return FakeShell(installed_tools={"git": "/usr/bin/git"}, handler=handler)


# ----------------------------------------------------------------------
# decide_install_action
# ----------------------------------------------------------------------


def test_not_installed_is_a_fresh_install() -> None:
    action = decide_install_action(_module(is_installed=False), _settings())

    assert action is InstallAction.INSTALL


def test_installed_without_version_or_pin_routes_to_update() -> None:
    assert decide_install_action(_module(), _settings()) is InstallAction.UPDATE_BY_NAME
    assert decide_install_action(_module(), _settings(force=True)) is InstallAction.UPDATE_BY_NAME


def test_installed_external_http_routes_to_external_update() -> None:
    module = _module(is_external=True, url="http://example.com/jane/json_tools")

    assert decide_install_action(module, _settings()) is InstallAction.UPDATE_EXTERNAL


def test_installed_external_https_routes_to_update_by_name() -> None:
    module = _module(is_external=True, url="https://example.com/jane/json_tools")

    assert decide_install_action(module, _settings()) is InstallAction.UPDATE_BY_NAME


def test_requested_version_on_installed_module_conflicts() -> None:
    module = _module(requested_version="0.4.0")

    assert decide_install_action(module, _settings()) is InstallAction.CONFIRM_OVERWRITE
    assert decide_install_action(module, _settings(force=True)) is InstallAction.OVERWRITE


def test_pinned_module_conflicts() -> None:
    module = _module(pinned_version="v0.3.1")

    assert decide_install_action(module, _settings()) is InstallAction.CONFIRM_OVERWRITE


def test_once_skips_installed_modules() -> None:
    module = _module(requested_version="0.4.0")

    assert decide_install_action(module, _settings(once=True)) is InstallAction.SKIP


# ----------------------------------------------------------------------
# confirm_install
# ----------------------------------------------------------------------


def test_confirm_skips_when_requested_version_is_installed() -> None:
    prompt = FakePrompt(answer=True)
    ctx = ModpmContext.for_test(prompt=prompt)

    assert confirm_install(_module(requested_version="0.3.1"), ctx) is False
    assert prompt.questions == []


def test_confirm_skips_when_requested_version_is_the_pinned_tag() -> None:
    prompt = FakePrompt(answer=True)
    ctx = ModpmContext.for_test(prompt=prompt)
    module = _module(requested_version="v0.3.1", pinned_version="v0.3.1", installed_version="")

    assert confirm_install(module, ctx) is False
    assert prompt.questions == []


def test_confirm_asks_for_a_different_version() -> None:
    prompt = FakePrompt(answer=True)
    ctx = ModpmContext.for_test(prompt=prompt)

    assert confirm_install(_module(requested_version="0.4.0"), ctx) is True
    assert prompt.questions == ["Replace it with `jane.json_tools@0.4.0`?"]


def test_confirm_raises_when_prompting_is_disabled() -> None:
    prompt = FakePrompt(answer=True)
    ctx = ModpmContext.for_test(prompt=prompt, settings=_settings(fail_on_prompt=True))

    with pytest.raises(PromptUnavailableError):
        confirm_install(_module(requested_version="0.4.0"), ctx)
    assert prompt.questions == []


# ----------------------------------------------------------------------
# cascade and removal helpers
# ----------------------------------------------------------------------


def test_cascade_excludes_original_queries_and_keeps_order() -> None:
    dependencies = ["c.lib", "a.json", "b.http"]

    assert cascade_dependencies(dependencies, {"a.json"}) == ["c.lib", "b.http"]


def test_remove_module_dir_deletes_empty_publisher(tmp_path: Path) -> None:
    module_dir = tmp_path / "jane" / "json_tools"
    (module_dir / ".git").mkdir(parents=True)

    remove_module_dir(module_dir, tmp_path)

    assert not (tmp_path / "jane").exists()
    assert tmp_path.exists()


def test_remove_module_dir_keeps_publisher_with_other_modules(tmp_path: Path) -> None:
    (tmp_path / "jane" / "json_tools").mkdir(parents=True)
    (tmp_path / "jane" / "strings").mkdir()

    remove_module_dir(tmp_path / "jane" / "json_tools", tmp_path)

    assert (tmp_path / "jane" / "strings").is_dir()


def test_remove_official_module_keeps_root(tmp_path: Path) -> None:
    (tmp_path / "ui").mkdir()

    remove_module_dir(tmp_path / "ui", tmp_path)

    assert tmp_path.is_dir()


# ----------------------------------------------------------------------
# Installer
# ----------------------------------------------------------------------


def test_install_clones_and_reports_download(tmp_path: Path) -> None:
    registry = FakeRegistryClient(modules=[_metadata("jane.json_tools")])
    shell = _cloning_shell()
    ctx = ModpmContext.for_test(shell=shell, registry=registry, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.install(["jane.json_tools"])

    assert not installer.has_errors
    assert (tmp_path / "jane" / "json_tools" / ".git").is_dir()
    assert shell.commands == [
        [
            "git",
            "clone",
            "--depth=1",
            "--recursive",
            "--shallow-submodules",
            "https://example.com/jane/json_tools",
            str(tmp_path / "jane" / "json_tools"),
        ]
    ]
    assert registry.incremented == ["jane.json_tools"]


def test_install_cascades_dependencies_not_in_original_queries(tmp_path: Path) -> None:
    registry = FakeRegistryClient(
        modules=[_metadata("jane.app"), _metadata("jane.json"), _metadata("bob.http")]
    )
    shell = _cloning_shell(
        manifests={
            "https://example.com/jane/app": "name: app\ndependencies:\n  - jane.json\n  - bob.http\n",
        }
    )
    ctx = ModpmContext.for_test(shell=shell, registry=registry, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.install(["jane.app", "jane.json"])

    assert not installer.has_errors
    # jane.json was an original query, so only bob.http is cascaded
    assert registry.fetched == ["jane.app", "bob.http", "jane.json"]
    assert (tmp_path / "bob" / "http").is_dir()
    assert (tmp_path / "jane" / "json").is_dir()


def test_install_continues_after_item_failures(tmp_path: Path) -> None:
    registry = FakeRegistryClient(
        modules=[_metadata("jane.good"), _metadata("jane.broken")],
        failures={"jane.flaky": "Failed to reach `https://registry.test`"},
    )
    shell = _cloning_shell(fail_urls={"https://example.com/jane/broken"})
    feedback = FakeUserFeedback()
    ctx = ModpmContext.for_test(
        shell=shell, registry=registry, feedback=feedback, modules_root=tmp_path
    )

    installer = Installer(ctx)
    installer.install(["a", "jane.unknown", "jane.flaky", "jane.broken", "jane.good"])

    assert installer.error_count == 4
    assert (tmp_path / "jane" / "good").is_dir()
    assert feedback.errors[1] == "Module `jane.unknown` was not found in the registry."
    assert registry.incremented == ["jane.good"]


def test_install_requires_vcs_tool(tmp_path: Path) -> None:
    registry = FakeRegistryClient(modules=[_metadata("jane.json_tools")])
    ctx = ModpmContext.for_test(
        shell=FakeShell(installed_tools={}), registry=registry, modules_root=tmp_path
    )

    with pytest.raises(ToolMissingError):
        Installer(ctx).install(["jane.json_tools"])


def test_install_external_url_skips_registry(tmp_path: Path) -> None:
    registry = FakeRegistryClient()
    shell = _cloning_shell()
    ctx = ModpmContext.for_test(shell=shell, registry=registry, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.install(["https://example.com/owner/repo.git"])

    assert not installer.has_errors
    assert (tmp_path / "owner" / "repo").is_dir()
    assert registry.fetched == []
    assert registry.incremented == []


def test_failed_download_count_is_an_item_error(tmp_path: Path) -> None:
    registry = FakeRegistryClient(modules=[_metadata("jane.json_tools")], increment_fails=True)
    ctx = ModpmContext.for_test(shell=_cloning_shell(), registry=registry, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.install(["jane.json_tools"])

    assert installer.error_count == 1
    assert (tmp_path / "jane" / "json_tools").is_dir()


def test_install_of_installed_module_updates_instead(tmp_path: Path) -> None:
    module_dir = tmp_path / "jane" / "json_tools"
    (module_dir / ".git").mkdir(parents=True)
    shell = FakeShell(
        installed_tools={"git": "/usr/bin/git"},
        results={
            ("git", "-C", str(module_dir), "describe", "--tags", "--exact-match"): CommandResult(
                128, "", "fatal: no tag"
            )
        },
    )
    ctx = ModpmContext.for_test(shell=shell, modules_root=tmp_path)

    Installer(ctx).install(["jane.json_tools"])

    assert module_dir.is_dir()
    assert shell.commands[-1] == ["git", "-C", str(module_dir), "pull", "--recurse-submodules"]


def test_declined_overwrite_leaves_module_alone(tmp_path: Path) -> None:
    module_dir = tmp_path / "jane" / "json_tools"
    (module_dir / ".git").mkdir(parents=True)
    (module_dir / "module.yaml").write_text("version: 0.3.1\n", encoding="utf-8")
    prompt = FakePrompt(answer=False)
    shell = _cloning_shell()
    ctx = ModpmContext.for_test(shell=shell, prompt=prompt, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.install(["jane.json_tools@0.4.0"])

    assert not installer.has_errors
    assert len(prompt.questions) == 1
    assert (module_dir / "module.yaml").is_file()
    assert not any(cmd[:2] == ["git", "clone"] for cmd in shell.commands)


def test_forced_overwrite_reinstalls_requested_version(tmp_path: Path) -> None:
    module_dir = tmp_path / "jane" / "json_tools"
    (module_dir / ".git").mkdir(parents=True)
    (module_dir / "module.yaml").write_text("version: 0.3.1\n", encoding="utf-8")
    registry = FakeRegistryClient(modules=[_metadata("jane.json_tools")])
    shell = _cloning_shell()
    ctx = ModpmContext.for_test(
        shell=shell,
        registry=registry,
        settings=_settings(modules_root=tmp_path, force=True),
    )

    installer = Installer(ctx)
    installer.install(["jane.json_tools@0.4.0"])

    assert not installer.has_errors
    assert not (module_dir / "module.yaml").exists()
    clone = shell.commands[-1]
    assert clone[:2] == ["git", "clone"]
    assert "--branch" in clone
    assert "0.4.0" in clone


def test_failed_lookup_on_confirmed_overwrite_keeps_installed_module(tmp_path: Path) -> None:
    module_dir = tmp_path / "jane" / "json_tools"
    (module_dir / ".git").mkdir(parents=True)
    (module_dir / "module.yaml").write_text("version: 0.3.1\n", encoding="utf-8")
    registry = FakeRegistryClient(failures={"jane.json_tools": "Failed to reach `https://r.test`"})
    shell = _cloning_shell()
    ctx = ModpmContext.for_test(
        shell=shell, registry=registry, prompt=FakePrompt(answer=True), modules_root=tmp_path
    )

    installer = Installer(ctx)
    installer.install(["jane.json_tools@0.4.0"])

    assert installer.error_count == 1
    assert (module_dir / "module.yaml").is_file()
    assert not any(cmd[:2] == ["git", "clone"] for cmd in shell.commands)


def test_missing_tool_on_forced_overwrite_keeps_installed_module(tmp_path: Path) -> None:
    module_dir = tmp_path / "jane" / "json_tools"
    (module_dir / ".git").mkdir(parents=True)
    (module_dir / "module.yaml").write_text("version: 0.3.1\n", encoding="utf-8")
    registry = FakeRegistryClient(modules=[_metadata("jane.json_tools")])
    ctx = ModpmContext.for_test(
        shell=FakeShell(installed_tools={}),
        registry=registry,
        settings=_settings(modules_root=tmp_path, force=True),
    )

    with pytest.raises(ToolMissingError):
        Installer(ctx).install(["jane.json_tools@0.4.0"])
    assert (module_dir / "module.yaml").is_file()


def test_dependency_cycle_installs_each_module_once(tmp_path: Path) -> None:
    registry = FakeRegistryClient(
        modules=[_metadata("jane.app"), _metadata("jane.a"), _metadata("jane.b")]
    )
    shell = _cloning_shell(
        manifests={
            "https://example.com/jane/app": "dependencies:\n  - jane.a\n",
            "https://example.com/jane/a": "dependencies:\n  - jane.b\n",
            "https://example.com/jane/b": "dependencies:\n  - jane.a\n",
        }
    )
    ctx = ModpmContext.for_test(shell=shell, registry=registry, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.install(["jane.app"])

    assert not installer.has_errors
    clones = [cmd[-2] for cmd in shell.commands if cmd[:2] == ["git", "clone"]]
    assert clones == [
        "https://example.com/jane/app",
        "https://example.com/jane/a",
        "https://example.com/jane/b",
    ]
    # jane.b leads back to jane.a, which is now installed and only updated
    a_dir = tmp_path / "jane" / "a"
    assert shell.commands[-1] == ["git", "-C", str(a_dir), "pull", "--recurse-submodules"]


def test_update_runs_pull_and_counts_failures(tmp_path: Path) -> None:
    good = tmp_path / "jane" / "good"
    (good / ".git").mkdir(parents=True)
    bad = tmp_path / "bob" / "bad"
    (bad / ".hg").mkdir(parents=True)
    shell = FakeShell(
        installed_tools={"git": "/usr/bin/git", "hg": "/usr/bin/hg"},
        results={("hg", "-R", str(bad), "pull", "--update"): CommandResult(255, "", "abort")},
    )
    ctx = ModpmContext.for_test(shell=shell, modules_root=tmp_path)

    installer = Installer(ctx)
    installer.update(["jane.good", "bob.bad", "jane.missing"])

    assert installer.error_count == 2
    assert shell.commands == [
        ["git", "-C", str(good), "pull", "--recurse-submodules"],
        ["hg", "-R", str(bad), "pull", "--update"],
    ]


def test_remove_counts_missing_modules(tmp_path: Path) -> None:
    (tmp_path / "jane" / "json_tools" / ".git").mkdir(parents=True)
    ctx = ModpmContext.for_test(modules_root=tmp_path)

    installer = Installer(ctx)
    installer.remove(["jane.json_tools", "jane.missing"])

    assert installer.error_count == 1
    assert not (tmp_path / "jane").exists()
