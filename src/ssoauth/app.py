"""Typer application and CLI entry point for ssoauth.

This module wires together the top-level Typer application and registers
the built-in commands (``url``, ``parse``, ``exchange``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`ssoauth.config`: Configuration resolution.
    :mod:`ssoauth.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ssoauth import __version__
from ssoauth.catalog import Environment
from ssoauth.commands.config import config_app
from ssoauth.commands.flow import exchange_command, parse_command, url_command
from ssoauth.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="ssoauth",
    help="Sign in through an SSO provider and exchange the callback for a service token.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.command("url")(url_command)
app.command("parse")(parse_command)
app.command("exchange")(exchange_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"ssoauth {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, console: Console) -> None:
    """Route ``ssoauth`` library logs to stderr when *verbose* is set."""
    logger = logging.getLogger("ssoauth")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    if verbose:
        logger.addHandler(RichHandler(console=console, show_path=False))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    environment: Optional[Environment] = typer.Option(
        None, "--env", "-e", help="Auth API environment."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the environment's base URL."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~ssoauth.output.OutputManager` and
    logging from CLI flags, and stores the environment overrides in
    ``ctx.obj`` for the sub-commands.
    """
    from ssoauth.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
    )
    set_output(output)
    _configure_logging(verbose, output.stderr_console)

    ctx.ensure_object(dict)
    ctx.obj["environment"] = environment.value if environment else None
    ctx.obj["base_url"] = base_url


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from ssoauth.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``ssoauth`` console script.

    :class:`~ssoauth.exceptions.SsoAuthError` instances that escape a
    command cause a clean exit with the error's ``exit_code``. All other
    exceptions produce a crash log and a generic failure exit.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from ssoauth.exceptions import SsoAuthError
        from ssoauth.output import error

        if isinstance(exc, SsoAuthError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
