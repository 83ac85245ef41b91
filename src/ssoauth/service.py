"""The SSO flow controller.

:class:`AuthService` drives the two calls the auth API offers:

1. :meth:`~AuthService.get_authentication_url` asks the API for the sign-in
   page of a provider. The user is sent there by the caller.
2. :meth:`~AuthService.process_callback` takes the redirect URL the provider
   sends back, extracts the provisional token and exchanges it for a
   :class:`~ssoauth.models.ServiceToken`.

The outcome of :meth:`~AuthService.process_callback` is reported to an
:class:`AuthServiceDelegate`, never raised. The service keeps only a weak
reference to its delegate: if the delegate has been garbage collected, the
notification is dropped.

Notifications are delivered on the event loop task that awaits
:meth:`~AuthService.process_callback`. A delegate that updates state owned
by another thread must hand the work over itself (e.g. with
:meth:`asyncio.AbstractEventLoop.call_soon_threadsafe`).
"""

from __future__ import annotations

import logging
import re
import weakref
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ssoauth.callback import parse_callback_url
from ssoauth.catalog import Environment, Provider
from ssoauth.client import AuthApiClient
from ssoauth.exceptions import (
    InvalidCallbackPayload,
    TokenPayloadError,
    UnexpectedBody,
    UnexpectedStatus,
)
from ssoauth.models import ProvisionalToken, ServiceToken, mask_secret

logger = logging.getLogger(__name__)

AUTHENTICATE_URL_PATH = "/authenticate_url"
TOKEN_PATH = "/token"

# RFC 3986 unreserved, reserved, and percent characters.
_URL_CHARS = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")


class AuthServiceDelegate(ABC):
    """Receiver of :meth:`AuthService.process_callback` outcomes.

    Each call to :meth:`~AuthService.process_callback` ends with exactly one
    of :meth:`auth_service_resolved_token` or :meth:`auth_service_failed`.
    :meth:`auth_service_received_callback` fires before the token exchange
    starts, only when the callback URL parsed.
    """

    def auth_service_received_callback(self, service: AuthService) -> None:
        """Called once the callback URL has been parsed successfully.

        A typical use is dismissing the browser window that showed the
        provider's sign-in page. The default does nothing.
        """

    @abstractmethod
    def auth_service_resolved_token(self, service: AuthService, token: ServiceToken) -> None:
        """Called when the auth API issued a service token."""
        ...

    @abstractmethod
    def auth_service_failed(self, service: AuthService, error: Exception) -> None:
        """Called when the flow failed.

        Possible errors:

        - :class:`~ssoauth.exceptions.InvalidCallbackPayload` -- the callback
          URL had no usable ``access_token``.
        - :class:`~ssoauth.exceptions.UnexpectedStatus` -- non-2xx response.
        - :class:`~ssoauth.exceptions.UnexpectedBody` -- the response body
          was not a token object.
        - Any :class:`httpx.RequestError` (transport or response decoding
          failure), unchanged.
        """
        ...


class AuthService:
    """Client for the auth API's SSO endpoints.

    Configuration is fixed at construction; each operation opens its own
    :class:`~ssoauth.client.AuthApiClient`, so concurrent calls do not share
    state.

    Args:
        environment: Auth API deployment. Selects the base URL.
        api_key: Value sent in the ``X-Api-Key`` header.
        delegate: Receiver of :meth:`process_callback` outcomes. Held
            weakly; the caller must keep it alive.
        base_url: Overrides the environment's base URL.
        timeout: Request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional :mod:`httpx` transport for the underlying client.
    """

    def __init__(
        self,
        environment: Environment | str,
        api_key: str,
        delegate: Optional[AuthServiceDelegate] = None,
        *,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.environment = Environment(environment)
        self.base_url = base_url or self.environment.base_url
        self._api_key = api_key
        self._delegate_ref = weakref.ref(delegate) if delegate is not None else None
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport

        logger.debug(
            "Auth service for %s at %s (api key %s)",
            self.environment.value,
            self.base_url,
            mask_secret(api_key),
        )

    @property
    def delegate(self) -> Optional[AuthServiceDelegate]:
        """The delegate, or ``None`` if unset or already garbage collected."""
        if self._delegate_ref is None:
            return None
        return self._delegate_ref()

    # ------------------------------------------------------------------ #
    # Sign-in URL
    # ------------------------------------------------------------------ #

    async def get_authentication_url(
        self,
        provider: Provider | str,
        client_id: str,
        callback: str | httpx.URL,
        scope: str,
    ) -> httpx.URL:
        """Fetch the URL of a provider's sign-in page.

        Args:
            provider: The SSO provider to sign in with.
            client_id: Client ID registered with the provider.
            callback: Redirect URI registered with the provider.
            scope: Scope requested along with the access token.

        Returns:
            The sign-in URL the user should be sent to.

        Raises:
            UnexpectedStatus: The API answered with a non-2xx status.
            UnexpectedBody: The body was not a JSON string holding a URL.
            httpx.RequestError: The API could not be reached or its
                response could not be decoded.
        """
        provider = Provider(provider)
        params = {
            "clientId": client_id,
            "callbackUri": str(callback),
            "scope": scope,
            "connection": provider.connection,
        }
        logger.debug(
            "Requesting sign-in URL: provider=%s scope=%s callback=%s client_id=%s",
            provider.value,
            scope,
            callback,
            client_id,
        )

        async with self._open_client() as client:
            response = await client.get(AUTHENTICATE_URL_PATH, params=params)

        if not response.ok:
            raise UnexpectedStatus(response.status_code)
        if not isinstance(response.body, str):
            raise UnexpectedBody("Expected a JSON string holding the sign-in URL")

        url = _parse_url(response.body)
        if url is None:
            raise UnexpectedBody(f"Sign-in URL is not a valid URL: {response.body!r}")
        return url

    # ------------------------------------------------------------------ #
    # Callback processing
    # ------------------------------------------------------------------ #

    async def process_callback(self, url: str | httpx.URL) -> None:
        """Exchange the token in a provider callback URL for a service token.

        The outcome goes to the delegate; nothing is raised for the failures
        listed on :meth:`AuthServiceDelegate.auth_service_failed`.

        Args:
            url: The redirect URL received from the identity provider.
        """
        logger.debug("Processing callback")

        try:
            provisional = parse_callback_url(url)
        except InvalidCallbackPayload as exc:
            logger.debug("Callback rejected: %s", exc)
            self._notify_failed(exc)
            return

        self._notify("auth_service_received_callback")

        try:
            token = await self.exchange_token(provisional)
        except (UnexpectedStatus, UnexpectedBody, httpx.RequestError) as exc:
            logger.debug("Token exchange failed: %r", exc)
            self._notify_failed(exc)
            return

        logger.debug("Resolved service token: %r", token)
        self._notify("auth_service_resolved_token", token)

    async def exchange_token(self, token: ProvisionalToken) -> ServiceToken:
        """Exchange a provisional token for a service token.

        Args:
            token: Token taken from the provider's callback.

        Returns:
            The service token issued by the API.

        Raises:
            UnexpectedStatus: The API answered with a non-2xx status.
            UnexpectedBody: The body was not a JSON object with an
                ``access_token`` string.
            httpx.RequestError: The API could not be reached or its
                response could not be decoded.
        """
        async with self._open_client() as client:
            response = await client.get(
                TOKEN_PATH, headers={"Authorization": token.access_token}
            )

        if not response.ok:
            raise UnexpectedStatus(response.status_code)
        if not isinstance(response.body, dict):
            raise UnexpectedBody("Expected a JSON object holding the service token")

        try:
            return ServiceToken.from_json(response.body)
        except TokenPayloadError as exc:
            raise UnexpectedBody(str(exc)) from exc

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _open_client(self) -> AuthApiClient:
        return AuthApiClient(
            self.base_url,
            self._api_key,
            timeout=self._timeout,
            verify_ssl=self._verify_ssl,
            transport=self._transport,
        )

    def _notify(self, method: str, *args: object) -> None:
        delegate = self.delegate
        if delegate is None:
            logger.debug("No delegate, dropping %s", method)
            return
        getattr(delegate, method)(self, *args)

    def _notify_failed(self, error: Exception) -> None:
        self._notify("auth_service_failed", error)


def _parse_url(value: str) -> Optional[httpx.URL]:
    """Return *value* as a URL, or ``None`` if it is not a well-formed one."""
    if not _URL_CHARS.match(value):
        return None
    try:
        return httpx.URL(value)
    except httpx.InvalidURL:
        return None
