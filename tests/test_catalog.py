"""Tests for ssoauth.catalog -- providers and environments."""

from __future__ import annotations

import pytest

from ssoauth.catalog import Environment, Provider, resolve_base_url


class TestProvider:
    def test_connection_values(self) -> None:
        assert Provider.CWS.connection == "cws"
        assert Provider.ONELOGIN.connection == "onelogin"

    def test_lookup_by_value(self) -> None:
        assert Provider("onelogin") is Provider.ONELOGIN

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError):
            Provider("okta")


class TestEnvironment:
    def test_every_environment_has_a_base_url(self) -> None:
        for env in Environment:
            assert env.base_url.startswith(("http://", "https://"))
            assert not env.base_url.endswith("/")

    def test_local(self) -> None:
        assert resolve_base_url("local") == "http://localhost:10175"

    def test_production(self) -> None:
        assert (
            resolve_base_url(Environment.PRODUCTION)
            == "https://uptake-prod-production.apigee.net/cat/auth/v1"
        )

    def test_unknown_environment(self) -> None:
        with pytest.raises(ValueError):
            resolve_base_url("moon")
