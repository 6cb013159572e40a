"""Server entry point (run_server).

Loads the project registry, builds the app and runs it under uvicorn.
"""

from __future__ import annotations

__all__ = [
    "build_app",
    "run_server",
]

import logging

import uvicorn
from fastapi import FastAPI

from headless_proxy.api.routes import create_app
from headless_proxy.config import ServerConfig, get_server_log_path
from headless_proxy.constants import APP_NAME
from headless_proxy.registry import ProjectRegistry
from headless_proxy.utils.logging import configure_logging

_logger = logging.getLogger(f"{APP_NAME}.server")


def build_app(config: ServerConfig) -> FastAPI:
    """Load the registry and create the app.

    Raises:
        ConfigurationError: If the project list is missing or malformed.
    """
    registry = ProjectRegistry.from_file(config.resolved_projects_path())
    return create_app(registry, config)


def run_server(config: ServerConfig) -> None:
    """Run the proxy server until interrupted.

    Args:
        config: Server configuration.

    Raises:
        ConfigurationError: If the project list is missing or malformed.
    """
    configure_logging(config.log_level, get_server_log_path(config))
    app = build_app(config)

    _logger.info(
        {
            "event": "server_starting",
            "message": f"Listening on http://{config.host}:{config.port}",
            "host": config.host,
            "port": config.port,
        }
    )
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_config=None,
        ws="none",
    )
