"""Exception hierarchy for ssoauth.

All exceptions inherit from :class:`SsoAuthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ssoauth.exit_codes`.
The CLI entry point catches ``SsoAuthError`` and exits with the matching
code. Transport failures are not part of this hierarchy: they surface as
the :class:`httpx.RequestError` raised by the HTTP layer, unchanged.

Subclass hierarchy::

    SsoAuthError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- InvalidCallbackPayload   (exit 3)
    +-- UnexpectedStatus         (exit 5)
    +-- UnexpectedBody           (exit 5)
    +-- TokenPayloadError        (exit 5)
    +-- ConfigError              (exit 1)
"""

from ssoauth.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_CALLBACK,
    EXIT_INVALID_USAGE,
    EXIT_UNEXPECTED_RESPONSE,
)


class SsoAuthError(Exception):
    """Base exception for all ssoauth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SsoAuthError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class InvalidCallbackPayload(SsoAuthError):
    """Raised when a callback URL is unparseable or lacks ``access_token``."""

    exit_code = EXIT_INVALID_CALLBACK

    def __init__(self, message: str = "The callback URL cannot be parsed."):
        super().__init__(message)


class UnexpectedStatus(SsoAuthError):
    """Raised when the auth API answers with a non-2xx status code.

    Args:
        status_code: The HTTP status code that was received.
    """

    exit_code = EXIT_UNEXPECTED_RESPONSE

    def __init__(self, status_code: int):
        super().__init__(f"Unexpected HTTP status {status_code} from auth API")
        self.status_code = status_code


class UnexpectedBody(SsoAuthError):
    """Raised when a 2xx response body does not have the expected shape.

    Both a wrong JSON type and a token object missing its required fields
    are reported with this class. The finer-grained cause, when there is
    one, is chained as ``__cause__``.
    """

    exit_code = EXIT_UNEXPECTED_RESPONSE

    def __init__(self, message: str = "Unexpected response body from auth API"):
        super().__init__(message)


class TokenPayloadError(SsoAuthError):
    """Raised when a JSON object cannot be turned into a service token."""

    exit_code = EXIT_UNEXPECTED_RESPONSE

    def __init__(self, message: str = "Unable to initialize service token with given data."):
        super().__init__(message)


class ConfigError(SsoAuthError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
