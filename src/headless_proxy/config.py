"""Server settings for headless-proxy.

server.json lives in the app directory next to the default project list.
`serve` loads it strictly; other commands fall back to defaults.

    config = load_server_config_strict()
    config = config.model_copy(update={"port": 9000})
    save_server_config(config)
"""

from __future__ import annotations

__all__ = [
    "ServerConfig",
    "get_default_projects_path",
    "get_server_config_path",
    "get_server_log_path",
    "load_server_config",
    "load_server_config_strict",
    "save_server_config",
]

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from headless_proxy.constants import (
    APP_NAME,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REGISTER_PASSWORD,
    DEFAULT_UPSTREAM_BASE_URL,
    DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
    PROJECTS_FILENAME,
    SERVER_CONFIG_FILENAME,
)
from headless_proxy.exceptions import ConfigurationError
from headless_proxy.utils.file_helpers import get_app_dir, write_json_atomic

_logger = logging.getLogger(f"{APP_NAME}.config")


def get_default_projects_path() -> Path:
    """Get the default path of the project list file.

    Returns:
        Path to headless-config.json in the app directory.
    """
    return get_app_dir() / PROJECTS_FILENAME


class ServerConfig(BaseModel):
    """Local proxy server configuration.

    Attributes:
        host: Interface the HTTP server binds to.
        port: HTTP port for the local API.
        projects_path: Path of the JSON project list. None means the
            default location in the app directory.
        upstream_base_url: Base URL of the upstream provider.
        upstream_timeout_seconds: Per-request upstream timeout. None waits
            indefinitely.
        register_password: Password assigned to members created by the
            register route.
        fallback_url: Where unmatched requests are forwarded. None disables
            forwarding.
        static_dir: Directory with a built admin UI to serve for unmatched
            requests when no fallback_url is set.
        log_dir: Directory for the JSONL warning log. None logs to stderr only.
        log_level: Console log level.
    """

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    projects_path: str | None = None
    upstream_base_url: str = Field(default=DEFAULT_UPSTREAM_BASE_URL, min_length=1)
    upstream_timeout_seconds: float | None = Field(default=DEFAULT_UPSTREAM_TIMEOUT_SECONDS, gt=0)
    register_password: str = Field(default=DEFAULT_REGISTER_PASSWORD, min_length=1)
    fallback_url: str | None = None
    static_dir: str | None = None
    log_dir: str | None = None
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    model_config = {"extra": "ignore"}

    def resolved_projects_path(self) -> Path:
        """Return the project list path, falling back to the default location."""
        if self.projects_path:
            return Path(self.projects_path).expanduser()
        return get_default_projects_path()


def get_server_config_path() -> Path:
    """Get the full path to the server config file.

    Returns:
        Path to server.json in the config directory.
    """
    return get_app_dir() / SERVER_CONFIG_FILENAME


def get_server_log_path(config: ServerConfig) -> Path | None:
    """Get the JSONL log file path, or None when file logging is off.

    Args:
        config: Server configuration.

    Returns:
        Path to <log_dir>/system.jsonl, or None if log_dir is unset.
    """
    if not config.log_dir:
        return None
    return Path(config.log_dir).expanduser() / "system.jsonl"


def load_server_config_strict(config_path: Path | None = None) -> ServerConfig:
    """Load server configuration, raising on a broken file.

    A missing file is not an error and yields defaults.

    Args:
        config_path: Config file to read. Defaults to get_server_config_path().

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or invalid.
    """
    config_path = config_path or get_server_config_path()
    if not config_path.exists():
        return ServerConfig()

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    try:
        return ServerConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config in {config_path}: {e}") from e


def load_server_config(config_path: Path | None = None) -> ServerConfig:
    """Load server configuration, falling back to defaults on any problem.

    Used where a broken file should not stop the command (CLI server URL
    lookup, config show). The problem is logged as a warning.
    """
    config_path = config_path or get_server_config_path()
    try:
        return load_server_config_strict(config_path)
    except ConfigurationError as e:
        _logger.warning(
            {
                "event": "server_config_unusable",
                "message": f"Using default server config: {e}",
                "error_type": type(e.__cause__).__name__,
                "config_path": str(config_path),
            }
        )
        return ServerConfig()


def save_server_config(config: ServerConfig, config_path: Path | None = None) -> Path:
    """Write server configuration (owner-only permissions).

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    config_path = config_path or get_server_config_path()
    write_json_atomic(config_path, config.model_dump())
    return config_path
