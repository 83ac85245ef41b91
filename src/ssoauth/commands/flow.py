"""SSO flow commands -- ``url``, ``parse`` and ``exchange``.

Typical workflow::

    ssoauth url --client-id abc --callback myapp://example/callback
    # ... sign in through the printed URL, copy the redirect URL ...
    ssoauth exchange 'myapp://example/callback#access_token=...'

``parse`` decodes a redirect URL offline, without contacting the auth API.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx
import typer

from ssoauth.callback import parse_callback_url
from ssoauth.catalog import Provider
from ssoauth.commands import exit_with_error
from ssoauth.config import resolve_config, resolve_credential
from ssoauth.exceptions import InvalidUsageError, SsoAuthError
from ssoauth.models import ServiceConfig, ServiceToken
from ssoauth.output import get_output, info, success, suggest
from ssoauth.service import AuthService, AuthServiceDelegate


def _load_config(ctx: typer.Context) -> ServiceConfig:
    obj: dict[str, Any] = ctx.obj or {}
    return resolve_config(
        cli_environment=obj.get("environment"),
        cli_base_url=obj.get("base_url"),
    )


def _build_service(
    config: ServiceConfig, delegate: Optional[AuthServiceDelegate] = None
) -> AuthService:
    return AuthService(
        config.environment,
        resolve_credential(config.api_key_source),
        delegate,
        base_url=config.base_url,
        timeout=config.timeout,
        verify_ssl=config.verify_ssl,
    )


class _CollectingDelegate(AuthServiceDelegate):
    """Delegate that reports progress on stderr and keeps the outcome."""

    def __init__(self) -> None:
        self.token: Optional[ServiceToken] = None
        self.error: Optional[Exception] = None

    def auth_service_received_callback(self, service: AuthService) -> None:
        info(f"Callback accepted, exchanging token with {service.base_url}")

    def auth_service_resolved_token(self, service: AuthService, token: ServiceToken) -> None:
        self.token = token

    def auth_service_failed(self, service: AuthService, error: Exception) -> None:
        self.error = error


def url_command(
    ctx: typer.Context,
    provider: Optional[Provider] = typer.Option(
        None, "--provider", "-P", help="SSO provider (defaults to config)."
    ),
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="Client ID registered with the provider."
    ),
    callback: Optional[str] = typer.Option(
        None, "--callback", help="Redirect URI registered with the provider."
    ),
    scope: Optional[str] = typer.Option(
        None, "--scope", help="Scope requested with the access token."
    ),
) -> None:
    """Print the sign-in URL of an SSO provider.

    Values not given as options come from the config file
    (``client_id``, ``callback_uri``, ``provider``, ``scope``).

    Example::

        ssoauth url --provider onelogin --client-id abc \\
            --callback myapp://example/callback
    """
    try:
        config = _load_config(ctx)
        client_id = client_id or config.client_id
        callback = callback or config.callback_uri
        if not client_id:
            raise InvalidUsageError("A client ID is required (--client-id or config client_id)")
        if not callback:
            raise InvalidUsageError("A callback URI is required (--callback or config callback_uri)")

        service = _build_service(config)
        url = asyncio.run(
            service.get_authentication_url(
                provider or config.provider,
                client_id,
                callback,
                scope if scope is not None else config.scope,
            )
        )
    except (SsoAuthError, httpx.RequestError) as exc:
        exit_with_error(exc)

    get_output().print_value(str(url), key="url")
    suggest("Open the URL, sign in, then run: ssoauth exchange '<redirect URL>'")


def parse_command(
    callback_url: str = typer.Argument(help="Redirect URL received from the provider."),
) -> None:
    """Decode a provider redirect URL without contacting the auth API."""
    try:
        token = parse_callback_url(callback_url)
    except SsoAuthError as exc:
        exit_with_error(exc)

    get_output().print_record(token.model_dump(), title="Provisional token")


def exchange_command(
    ctx: typer.Context,
    callback_url: str = typer.Argument(help="Redirect URL received from the provider."),
) -> None:
    """Exchange the token in a provider redirect URL for a service token."""
    delegate = _CollectingDelegate()
    try:
        service = _build_service(_load_config(ctx), delegate)
    except SsoAuthError as exc:
        exit_with_error(exc)

    asyncio.run(service.process_callback(callback_url))

    if delegate.error is not None:
        exit_with_error(delegate.error)
    assert delegate.token is not None

    success("Service token issued.")
    get_output().print_record(delegate.token.model_dump(), title="Service token")
