"""Parsing of identity-provider redirect URLs.

Providers hand the token back on a redirect such as::

    myapp://example/callback#access_token=abc&expires_in=3600&scope=openid

Some providers use a fragment (``#``) and others a query (``?``) after the
callback path. :func:`parse_callback_url` rewrites the first ``callback#``
into ``callback?`` so that both forms go through the same query parsing.
"""

from __future__ import annotations

import logging
from urllib.parse import unquote, urlsplit

import httpx

from ssoauth.exceptions import InvalidCallbackPayload
from ssoauth.models import ProvisionalToken

logger = logging.getLogger(__name__)

_FRAGMENT_MARKER = "callback#"
_QUERY_MARKER = "callback?"


def parse_callback_url(url: str | httpx.URL) -> ProvisionalToken:
    """Extract a :class:`~ssoauth.models.ProvisionalToken` from a redirect URL.

    ``access_token`` is required and must be sendable as an HTTP header
    value (printable ASCII). ``scope`` is passed through as-is, and
    ``expires_in`` is read as seconds; a value that is not a number is
    dropped rather than failing the parse. When a parameter is repeated
    the first value wins. Names and values are percent-decoded only, so a
    literal ``+`` stays a ``+``.

    Args:
        url: The redirect URL received from the identity provider.

    Returns:
        The provisional token.

    Raises:
        InvalidCallbackPayload: If the URL has no query component, no
            non-empty ``access_token``, or one that cannot be sent as a
            header.
    """
    normalized = str(url).replace(_FRAGMENT_MARKER, _QUERY_MARKER, 1)

    try:
        query = urlsplit(normalized).query
    except ValueError as exc:
        raise InvalidCallbackPayload() from exc

    params = _parse_query(query)

    access_token = params.get("access_token")
    if not access_token:
        raise InvalidCallbackPayload()
    if not _is_header_safe(access_token):
        raise InvalidCallbackPayload("The callback access token is not a valid header value.")

    token = ProvisionalToken(
        access_token=access_token,
        expires_in=_parse_seconds(params.get("expires_in")),
        scope=params.get("scope"),
    )
    logger.debug("Parsed callback token: %r", token)
    return token


def _parse_seconds(value: str | None) -> float | None:
    """Parse a duration in seconds, returning ``None`` when it is not a number."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_query(query: str) -> dict[str, str]:
    """Split a query into percent-decoded pairs, keeping the first of repeats.

    Unlike form decoding, ``+`` is left as-is.
    """
    params: dict[str, str] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        name, _, value = pair.partition("=")
        params.setdefault(unquote(name), unquote(value))
    return params


def _is_header_safe(value: str) -> bool:
    return value.isascii() and value.isprintable()
