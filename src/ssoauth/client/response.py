"""Response bridge -- maps :class:`httpx.Response` to a loosely-typed JSON result.

The auth API answers either with a bare JSON string (``/authenticate_url``)
or with a JSON object (``/token``). Callers only care about the status code
and the decoded value, so :func:`extract_json_body` reduces a response to
that and :class:`ApiResponse` carries the pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class ApiResponse:
    """Status code and decoded JSON body of an auth API response.

    Attributes:
        status_code: The HTTP status code.
        body: The decoded JSON value (``str``, ``dict``, ``list``, number,
            ``bool``), or ``None`` for an empty or non-JSON body.
    """

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        """``True`` for a 2xx status code."""
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> ApiResponse:
        return cls(status_code=response.status_code, body=extract_json_body(response))


def extract_json_body(response: httpx.Response) -> Any:
    """Decode the body of *response* as JSON.

    Returns ``None`` for responses with no content or whose content is not
    valid JSON (e.g. an HTML error page).

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        The JSON-decoded value, or ``None``.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return None
