"""Asynchronous HTTP client for the auth API.

This module provides :class:`AuthApiClient`, which wraps
:class:`httpx.AsyncClient` with the auth API's base URL and its constant
``X-Api-Key`` header. It deliberately stays thin: no retries and no error
mapping. Status codes are returned to the caller and request failures
(:class:`httpx.RequestError`) propagate untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ssoauth.client.response import ApiResponse
from ssoauth.models import mask_secret

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Api-Key"


class AuthApiClient:
    """Asynchronous HTTP client for auth API calls.

    Must be used as an async context manager so that the underlying
    connection pool is opened and closed around the calls it serves.

    Args:
        base_url: Base URL of the auth API; request paths are appended to it.
        api_key: Value of the ``X-Api-Key`` header sent with every request.
        timeout: Request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with AuthApiClient(base_url, api_key) as client:
            response = await client.get("/authenticate_url", params={...})
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AuthApiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={API_KEY_HEADER: self._api_key},
            timeout=self._timeout,
            verify=self._verify_ssl,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse:
        """Send a GET request and decode the response.

        Args:
            path: URL path appended to the base URL.
            params: Query parameters.
            headers: Extra request headers, merged over the constant ones.

        Returns:
            The :class:`~ssoauth.client.response.ApiResponse`.

        Raises:
            httpx.RequestError: On connection, DNS, TLS, timeout or
                content-decoding failures, exactly as raised by :mod:`httpx`.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        logger.debug(
            "GET %s%s (api key %s)", self._base_url, path, mask_secret(self._api_key)
        )
        response = await self._client.get(path, params=params, headers=headers)
        logger.debug("GET %s -> HTTP %d", path, response.status_code)
        return ApiResponse.from_httpx(response)
