"""Tests for settings loading from defaults, config file and environment."""

from pathlib import Path

import pytest

from modpm.core.registry_client.mirrors import DEFAULT_SERVER_URLS
from modpm.core.settings import load_settings, parse_server_urls


def test_defaults_without_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    settings = load_settings(env={}, config_path=tmp_path / "missing.toml")

    assert settings.modules_root == (tmp_path / ".modpm" / "modules").resolve()
    assert sorted(settings.server_urls) == sorted(DEFAULT_SERVER_URLS)
    assert settings.fail_on_prompt is False
    assert settings.frontend_exe == "modpm"


def test_config_file_values(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        f'modules_root = "{tmp_path / "mods"}"\nserver_urls = ["https://only.test"]\n',
        encoding="utf-8",
    )

    settings = load_settings(env={}, config_path=config)

    assert settings.modules_root == (tmp_path / "mods").resolve()
    assert settings.server_urls == ("https://only.test",)


def test_environment_overrides_config(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text(f'modules_root = "{tmp_path / "from_config"}"\n', encoding="utf-8")
    env = {
        "MODPM_MODULES": str(tmp_path / "from_env"),
        "MODPM_FAIL_ON_PROMPT": "1",
        "MODPM_EXE": "/usr/local/bin/tool",
    }

    settings = load_settings(env=env, config_path=config)

    assert settings.modules_root == (tmp_path / "from_env").resolve()
    assert settings.fail_on_prompt is True
    assert settings.frontend_exe == "/usr/local/bin/tool"


def test_server_urls_override_keeps_given_order(tmp_path: Path) -> None:
    settings = load_settings(
        env={},
        config_path=tmp_path / "missing.toml",
        server_urls_override=parse_server_urls("https://b.test, https://a.test,"),
    )

    assert settings.server_urls == ("https://b.test", "https://a.test")


def test_invalid_config_raises_value_error(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text("server_urls = 'not-a-list'\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must be a list of strings"):
        load_settings(env={}, config_path=config)


def test_malformed_toml_raises_value_error(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text("modules_root = \n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid config file"):
        load_settings(env={}, config_path=config)
