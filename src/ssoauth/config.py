"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for ssoauth:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.ssoauth/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Config file** -- A single :class:`~ssoauth.models.ServiceConfig` JSON
  file holding the environment, API key source and flow defaults.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables and the config file into the effective
  configuration.
* **Credential resolution** -- :func:`resolve_credential` reads the API key
  from an env var, a file, or an interactive prompt.

File writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`).
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ssoauth.exceptions import ConfigError
from ssoauth.models import ServiceConfig

_APP_NAME = "ssoauth"
_CONFIG_FILENAME = "config.json"

ENV_ENVIRONMENT = "SSOAUTH_ENVIRONMENT"
ENV_BASE_URL = "SSOAUTH_BASE_URL"
ENV_API_KEY_SOURCE = "SSOAUTH_API_KEY_SOURCE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory layout (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/ssoauth/`` (default ``~/.config/ssoauth/``).
    On macOS/Windows: ``~/.ssoauth/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/ssoauth/`` (default ``~/.local/share/ssoauth/``).
    On macOS/Windows: ``~/.ssoauth/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def config_path() -> Path:
    """Path to the config file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created next to *path* so that ``os.replace`` is
    an atomic rename on POSIX systems. On failure the temp file is removed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Config file ---


def load_config() -> ServiceConfig:
    """Load the configuration file.

    Returns:
        The deserialised :class:`~ssoauth.models.ServiceConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file holds invalid JSON or fails validation.
    """
    path = config_path()
    if not path.is_file():
        return ServiceConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ServiceConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_config(config: ServiceConfig) -> None:
    """Persist *config* atomically to the config file."""
    data = config.model_dump(mode="json", exclude_none=True)
    _atomic_write(config_path(), json.dumps(data, indent=2) + "\n")


def update_config(key: str, value: str) -> ServiceConfig:
    """Set a single config field from its string form and save the result.

    Args:
        key: A :class:`~ssoauth.models.ServiceConfig` field name.
        value: The new value, validated and coerced by Pydantic.

    Returns:
        The updated configuration.

    Raises:
        ConfigError: If *key* is unknown or *value* fails validation.
    """
    if key not in ServiceConfig.model_fields:
        known = ", ".join(sorted(ServiceConfig.model_fields))
        raise ConfigError(f"Unknown config key '{key}' (known keys: {known})")

    data: dict[str, Any] = load_config().model_dump(mode="json")
    data[key] = value
    try:
        config = ServiceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid value for '{key}': {exc.errors()[0]['msg']}") from exc
    save_config(config)
    return config


# --- Precedence resolution ---


def resolve_config(
    cli_environment: Optional[str] = None,
    cli_base_url: Optional[str] = None,
) -> ServiceConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``cli_environment``, ``cli_base_url``)
        2. Environment variables (``SSOAUTH_ENVIRONMENT``,
           ``SSOAUTH_BASE_URL``, ``SSOAUTH_API_KEY_SOURCE``)
        3. Config file (``~/.config/ssoauth/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or an override names an
            unknown environment.
    """
    overrides: dict[str, Any] = {}

    for env_var, field in (
        (ENV_ENVIRONMENT, "environment"),
        (ENV_BASE_URL, "base_url"),
        (ENV_API_KEY_SOURCE, "api_key_source"),
    ):
        value = os.environ.get(env_var)
        if value:
            overrides[field] = value

    if cli_environment is not None:
        overrides["environment"] = cli_environment
    if cli_base_url is not None:
        overrides["base_url"] = cli_base_url

    if not overrides:
        return load_config()

    data = load_config().model_dump(mode="json")
    data.update(overrides)
    try:
        return ServiceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration override: {exc.errors()[0]['msg']}") from exc


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - ``"prompt"`` -- prompts user interactively (requires a TTY)

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter API key: ")

    raise ConfigError(f"Unknown credential source format: {source}")
