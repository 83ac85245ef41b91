"""Tests for ssoauth.config -- XDG paths, config file, precedence, credentials."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from ssoauth.catalog import Environment, Provider
from ssoauth.config import (
    _atomic_write,
    config_path,
    get_config_dir,
    get_data_dir,
    load_config,
    resolve_config,
    resolve_credential,
    save_config,
    update_config,
)
from ssoauth.exceptions import ConfigError
from ssoauth.models import ServiceConfig


class TestPaths:
    def test_config_dir_under_xdg(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "ssoauth"
        assert get_config_dir().is_dir()

    def test_data_dir_under_xdg(self, isolated_config: Path) -> None:
        assert get_data_dir() == isolated_config / "data" / "ssoauth"

    def test_fallback_dir_on_non_xdg_platform(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("ssoauth.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".ssoauth"


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        _atomic_write(target, "{}\n")
        assert target.read_text() == "{}\n"
        assert [p.name for p in target.parent.iterdir()] == ["file.json"]


class TestConfigFile:
    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_config() == ServiceConfig()

    def test_round_trip(self, isolated_config: Path) -> None:
        config = ServiceConfig(environment=Environment.QA, client_id="abc")
        save_config(config)
        assert load_config() == config

    def test_saved_file_omits_unset_fields(self, isolated_config: Path) -> None:
        save_config(ServiceConfig())
        data = json.loads(config_path().read_text())
        assert "base_url" not in data
        assert data["environment"] == "production"

    def test_invalid_json(self, isolated_config: Path) -> None:
        config_path().write_text("{not json")
        with pytest.raises(ConfigError):
            load_config()

    def test_invalid_values(self, isolated_config: Path) -> None:
        config_path().write_text(json.dumps({"environment": "moon"}))
        with pytest.raises(ConfigError):
            load_config()


class TestUpdateConfig:
    def test_sets_value(self, isolated_config: Path) -> None:
        config = update_config("provider", "onelogin")
        assert config.provider == Provider.ONELOGIN
        assert load_config().provider == Provider.ONELOGIN

    def test_unknown_key(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            update_config("colour", "blue")

    def test_invalid_value(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            update_config("timeout", "soon")
        assert not config_path().exists()


class TestResolveConfig:
    def test_file_value_used(self, isolated_config: Path) -> None:
        save_config(ServiceConfig(environment=Environment.STAGING))
        assert resolve_config().environment == Environment.STAGING

    def test_env_overrides_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        save_config(ServiceConfig(environment=Environment.STAGING))
        monkeypatch.setenv("SSOAUTH_ENVIRONMENT", "dev")
        monkeypatch.setenv("SSOAUTH_BASE_URL", "http://127.0.0.1:9999")
        monkeypatch.setenv("SSOAUTH_API_KEY_SOURCE", "file:/tmp/key")

        config = resolve_config()
        assert config.environment == Environment.DEV
        assert config.base_url == "http://127.0.0.1:9999"
        assert config.api_key_source == "file:/tmp/key"

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SSOAUTH_ENVIRONMENT", "dev")
        config = resolve_config(cli_environment="qa", cli_base_url="http://x.example")
        assert config.environment == Environment.QA
        assert config.base_url == "http://x.example"

    def test_invalid_override(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(cli_environment="moon")


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_KEY", "secret")
        assert resolve_credential("env:MY_KEY") == "secret"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_KEY", raising=False)
        with pytest.raises(ConfigError, match="MY_KEY"):
            resolve_credential("env:MY_KEY")

    def test_file(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key"
        key_file.write_text("  secret\n")
        assert resolve_credential(f"file:{key_file}") == "secret"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_prompt_requires_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO())
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_unknown_source(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:thing")
