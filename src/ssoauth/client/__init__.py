"""HTTP client module for ssoauth.

Provides :class:`AuthApiClient`, a non-blocking client backed by
:class:`httpx.AsyncClient` that attaches the constant ``X-Api-Key``
header to every request and hands back the status code together with the
decoded JSON body.

Example::

    from ssoauth.client import AuthApiClient

    async with AuthApiClient("http://localhost:10175", api_key="k") as client:
        resp = await client.get("/token", headers={"Authorization": "abc"})
"""

from ssoauth.client.async_client import AuthApiClient
from ssoauth.client.response import ApiResponse, extract_json_body

__all__ = ["AuthApiClient", "ApiResponse", "extract_json_body"]
