"""Canonical Pydantic models shared across ssoauth modules.

The models fall into two groups:

**Token models** -- immutable values produced by the SSO flow:
    :class:`ProvisionalToken` (taken from the identity provider's redirect)
    and :class:`ServiceToken` (issued by the auth API in exchange).

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`ServiceConfig`.

All models use Pydantic v2. Token models are frozen so a token cannot be
altered after it has been parsed or validated.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ssoauth.catalog import Environment, Provider
from ssoauth.exceptions import TokenPayloadError


def mask_secret(value: str, visible: int = 4) -> str:
    """Return *value* with everything but its last *visible* characters hidden."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


# --- Tokens ---


class ProvisionalToken(BaseModel):
    """Token carried by an identity provider's redirect, not yet validated.

    Built by :func:`~ssoauth.callback.parse_callback_url` and consumed by
    :meth:`~ssoauth.service.AuthService.exchange_token`.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    expires_in: Optional[float] = Field(
        default=None, description="Lifetime in seconds, when the provider sent one"
    )
    scope: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"ProvisionalToken(access_token={mask_secret(self.access_token)!r}, "
            f"expires_in={self.expires_in!r}, scope={self.scope!r})"
        )


class ServiceToken(BaseModel):
    """Access token issued by the auth API for subsequent service calls."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    expires_in: Optional[float] = Field(
        default=None, description="Lifetime in seconds"
    )
    token_type: Optional[str] = None

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> ServiceToken:
        """Build a token from a decoded ``/token`` response object.

        ``access_token`` must be a string. ``expires_in`` is kept only when
        it is a JSON number and ``token_type`` only when it is a string;
        other values for the optional fields are ignored.

        Args:
            payload: The decoded JSON object.

        Returns:
            The validated :class:`ServiceToken`.

        Raises:
            TokenPayloadError: If ``access_token`` is missing or not a string.
        """
        access_token = payload.get("access_token")
        if not isinstance(access_token, str):
            raise TokenPayloadError()

        expires_in = payload.get("expires_in")
        if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)):
            expires_in = None

        token_type = payload.get("token_type")
        if not isinstance(token_type, str):
            token_type = None

        return cls(
            access_token=access_token,
            expires_in=None if expires_in is None else float(expires_in),
            token_type=token_type,
        )

    def __repr__(self) -> str:
        return (
            f"ServiceToken(access_token={mask_secret(self.access_token)!r}, "
            f"expires_in={self.expires_in!r}, token_type={self.token_type!r})"
        )


# --- Config ---


class ServiceConfig(BaseModel):
    """User configuration persisted at ``~/.config/ssoauth/config.json``.

    Loaded by :func:`~ssoauth.config.load_config`. Values here have the
    lowest precedence and can be overridden by environment variables or
    CLI flags. See :func:`~ssoauth.config.resolve_config`.
    """

    environment: Environment = Field(
        default=Environment.PRODUCTION, description="Auth API deployment to use"
    )
    api_key_source: str = Field(
        default="env:SSOAUTH_API_KEY",
        description="Where to read the X-Api-Key value: env:VAR, file:/path, prompt",
    )
    base_url: Optional[str] = Field(
        default=None, description="Overrides the environment's base URL"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    client_id: Optional[str] = Field(
        default=None, description="Client ID registered with the SSO provider"
    )
    provider: Provider = Provider.CWS
    scope: str = "openid"
    callback_uri: Optional[str] = Field(
        default=None, description="Redirect URI registered with the SSO provider"
    )

    def effective_base_url(self) -> str:
        """The base URL requests are sent to."""
        return self.base_url or self.environment.base_url
