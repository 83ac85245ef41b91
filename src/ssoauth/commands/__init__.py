"""Built-in CLI commands for ssoauth.

Each sub-module exposes Typer commands or sub-apps that
:mod:`ssoauth.app` registers on the root application:

- :mod:`~ssoauth.commands.flow` -- ``url``, ``parse`` and ``exchange``,
  the steps of the SSO flow.
- :mod:`~ssoauth.commands.config` -- ``config show``, ``config set`` and
  ``config path``.
"""

from __future__ import annotations

from typing import NoReturn

import httpx
import typer

from ssoauth.exceptions import SsoAuthError
from ssoauth.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE
from ssoauth.output import error


def exit_with_error(exc: Exception) -> NoReturn:
    """Report *exc* on stderr and exit with the code matching its category."""
    if isinstance(exc, httpx.RequestError):
        error(f"Request to the auth API failed: {str(exc) or type(exc).__name__}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR)
    error(str(exc))
    if isinstance(exc, SsoAuthError):
        raise typer.Exit(code=exc.exit_code)
    raise typer.Exit(code=EXIT_GENERIC_FAILURE)
