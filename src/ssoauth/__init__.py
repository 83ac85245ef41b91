"""ssoauth -- client side of an SSO sign-in and token exchange flow.

The flow has three steps:

1. ask the auth API for a provider's sign-in URL and send the user there,
2. parse the redirect URL the provider sends back into a provisional token,
3. exchange that token with the auth API for a service access token.

Typical use::

    service = AuthService(Environment.STAGING, api_key, delegate)
    url = await service.get_authentication_url(
        Provider.CWS, client_id, "myapp://example/callback", "openid"
    )
    ...
    await service.process_callback(redirect_url)  # outcome -> delegate

Modules:
    service: :class:`AuthService` and its delegate interface.
    callback: Redirect URL parsing.
    catalog: Provider and environment enumerations.
    models: Token and configuration models.
    client: Async HTTP client for the auth API.
    config: Config file and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from ssoauth.callback import parse_callback_url  # noqa: E402
from ssoauth.catalog import Environment, Provider  # noqa: E402
from ssoauth.exceptions import (  # noqa: E402
    InvalidCallbackPayload,
    SsoAuthError,
    UnexpectedBody,
    UnexpectedStatus,
)
from ssoauth.models import ProvisionalToken, ServiceToken  # noqa: E402
from ssoauth.service import AuthService, AuthServiceDelegate  # noqa: E402

__all__ = [
    "AuthService",
    "AuthServiceDelegate",
    "Environment",
    "InvalidCallbackPayload",
    "ProvisionalToken",
    "Provider",
    "ServiceToken",
    "SsoAuthError",
    "UnexpectedBody",
    "UnexpectedStatus",
    "parse_callback_url",
]
