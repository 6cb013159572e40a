"""Serve command: run the proxy server."""

from __future__ import annotations

__all__ = ["serve"]

import sys
from pathlib import Path
from typing import Any

import click

from headless_proxy.config import get_server_config_path, load_server_config_strict
from headless_proxy.exceptions import ConfigurationError
from headless_proxy.server import run_server

from ..styling import style_error, style_label


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Server config file (default: app config directory)",
)
@click.option("--host", default=None, help="Interface to bind")
@click.option("--port", "-p", type=int, default=None, help="HTTP port")
@click.option(
    "--projects",
    "projects_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Project list JSON file",
)
@click.option("--fallback-url", default=None, help="Forward unmatched requests to this URL")
@click.option(
    "--static-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Serve a built admin UI from this directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Console log level",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    projects_path: Path | None,
    fallback_url: str | None,
    static_dir: Path | None,
    log_level: str | None,
) -> None:
    """Run the proxy server.

    Options override values from the server config file.
    """
    try:
        config = load_server_config_strict(config_path or get_server_config_path())
    except ConfigurationError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    overrides: dict[str, Any] = {
        "host": host,
        "port": port,
        "projects_path": str(projects_path) if projects_path else None,
        "fallback_url": fallback_url,
        "static_dir": str(static_dir) if static_dir else None,
        "log_level": log_level.upper() if log_level else None,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    click.echo(style_label("Projects") + f" {config.resolved_projects_path()}")
    click.echo(style_label("Listening") + f" http://{config.host}:{config.port}")
    try:
        run_server(config)
    except ConfigurationError as e:
        click.echo(style_error(f"Failed to start: {e}"), err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Server stopped.")
