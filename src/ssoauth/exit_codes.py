"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ssoauth.exceptions.SsoAuthError` subclass.
Shell wrappers can inspect the exit code to tell a rejected callback from
an unreachable auth API without parsing stderr.

Example::

    $ ssoauth exchange 'myapp://host/callback#scope=openid'
    $ echo $?
    3   # EXIT_INVALID_CALLBACK -- no access_token in the redirect
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_INVALID_CALLBACK = 3
"""The callback URL did not carry a usable access token."""

EXIT_UNEXPECTED_RESPONSE = 5
"""The auth API answered with a non-2xx status or a malformed body."""

EXIT_CONNECTION_ERROR = 6
"""The auth API request failed (timeout, DNS failure, connection refused, undecodable response)."""
