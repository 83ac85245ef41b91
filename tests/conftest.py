"""Shared test fixtures for ssoauth.

Provides fixtures for isolating configuration, resetting the global output
state, building mock auth API transports, and recording delegate
notifications. They are discovered by pytest automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from ssoauth.models import ServiceToken
from ssoauth.output import OutputFormat, OutputManager, reset_output, set_output
from ssoauth.service import AuthService, AuthServiceDelegate


LOCAL_BASE_URL = "http://localhost:10175"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, plain-format output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Forces XDG path resolution, points XDG_CONFIG_HOME and XDG_DATA_HOME
    under tmp_path, and clears all SSOAUTH_* environment variables.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("ssoauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SSOAUTH_ENVIRONMENT",
        "SSOAUTH_BASE_URL",
        "SSOAUTH_API_KEY_SOURCE",
        "SSOAUTH_API_KEY",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Auth API doubles
# ---------------------------------------------------------------------------


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_service() -> Callable[..., AuthService]:
    """Factory for an AuthService talking to an httpx.MockTransport.

    Usage::

        service = make_service(handler, delegate=delegate, api_key="k")
    """

    def _make(
        handler: Handler,
        delegate: AuthServiceDelegate | None = None,
        api_key: str = "apiKey",
        **kwargs: object,
    ) -> AuthService:
        return AuthService(
            "local",
            api_key,
            delegate,
            transport=httpx.MockTransport(handler),
            **kwargs,  # type: ignore[arg-type]
        )

    return _make


class RecordingDelegate(AuthServiceDelegate):
    """Delegate that appends every notification to ``events``."""

    def __init__(self) -> None:
        self.events: list[tuple[object, ...]] = []

    def auth_service_received_callback(self, service: AuthService) -> None:
        self.events.append(("received",))

    def auth_service_resolved_token(self, service: AuthService, token: ServiceToken) -> None:
        self.events.append(("resolved", token))

    def auth_service_failed(self, service: AuthService, error: Exception) -> None:
        self.events.append(("failed", error))

    @property
    def terminal(self) -> list[tuple[object, ...]]:
        return [e for e in self.events if e[0] in ("resolved", "failed")]


@pytest.fixture
def delegate() -> RecordingDelegate:
    return RecordingDelegate()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
