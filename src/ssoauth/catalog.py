"""Closed catalogs of identity providers and deployment environments.

:class:`Provider` names the SSO connections the auth API knows about and
maps each to the ``connection`` value sent on the wire.
:class:`Environment` names a deployment of the auth API and resolves it to
a fixed base URL.

Both are plain string enums, so ``Provider("cws")`` and
``Environment("qa")`` work for values read from config files or CLI flags.
Unknown values raise :class:`ValueError`.
"""

from __future__ import annotations

from enum import Enum


class Provider(str, Enum):
    """SSO providers that can be used through the auth API."""

    CWS = "cws"
    """CAT's Corporate Web Security (https://login.cat.com/)."""

    ONELOGIN = "onelogin"
    """OneLogin-backed corporate login."""

    @property
    def connection(self) -> str:
        """The ``connection`` query value identifying this provider."""
        return _CONNECTIONS[self]


class Environment(str, Enum):
    """The auth API deployment to authenticate against."""

    STAGING = "staging"
    DEV = "dev"
    PRODUCTION = "production"
    QA = "qa"
    LOCAL = "local"

    @property
    def base_url(self) -> str:
        """Base URL of the auth API in this environment."""
        return _BASE_URLS[self]


_CONNECTIONS: dict[Provider, str] = {
    Provider.CWS: "cws",
    Provider.ONELOGIN: "onelogin",
}

_BASE_URLS: dict[Environment, str] = {
    Environment.DEV: "http://auth.services.symphony.dev.uptake.com/v1",
    Environment.STAGING: "https://uptake-prod-staging.apigee.net/cat/auth/v1",
    Environment.PRODUCTION: "https://uptake-prod-production.apigee.net/cat/auth/v1",
    Environment.QA: "https://auth.services.qa2.qa.uptake.com/v1",
    Environment.LOCAL: "http://localhost:10175",
}


def resolve_base_url(environment: Environment | str) -> str:
    """Return the auth API base URL for *environment*.

    Args:
        environment: An :class:`Environment` member or its string value.

    Returns:
        The base URL, without a trailing slash.

    Raises:
        ValueError: If *environment* is not one of the known names.
    """
    return Environment(environment).base_url
