"""Config commands -- inspect and edit the ssoauth config file.

Provides the ``ssoauth config`` sub-command group::

    ssoauth config show              # effective configuration
    ssoauth config set environment qa
    ssoauth config path              # where the file lives
"""

from __future__ import annotations

import typer

from ssoauth.commands import exit_with_error
from ssoauth.config import config_path, resolve_config, update_config
from ssoauth.exceptions import SsoAuthError
from ssoauth.output import get_output, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration after env and flag overrides."""
    obj = ctx.obj or {}
    try:
        config = resolve_config(
            cli_environment=obj.get("environment"),
            cli_base_url=obj.get("base_url"),
        )
    except SsoAuthError as exc:
        exit_with_error(exc)

    data = config.model_dump(mode="json")
    data["effective_base_url"] = config.effective_base_url()
    get_output().print_record(data, title="ssoauth config")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config field, e.g. environment or client_id."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Set a value in the config file."""
    try:
        update_config(key, value)
    except SsoAuthError as exc:
        exit_with_error(exc)
    success(f"Set {key} = {value}")


@config_app.command("path")
def config_path_command() -> None:
    """Print the location of the config file."""
    get_output().print_data(str(config_path()))
