"""Helpers shared by CLI commands."""

from __future__ import annotations

__all__ = [
    "echo_json",
    "get_server_url",
    "site_id_option",
]

import json
from typing import Any, Callable, TypeVar

import click

from headless_proxy.config import load_server_config

F = TypeVar("F", bound=Callable[..., Any])


def get_server_url(ctx: click.Context) -> str:
    """Resolve the server URL: --server/HEADLESS_PROXY_URL, else server config."""
    obj = ctx.find_root().obj or {}
    server_url = obj.get("server_url")
    if server_url:
        return str(server_url).rstrip("/")
    config = load_server_config()
    return f"http://{config.host}:{config.port}"


def site_id_option(func: F) -> F:
    """Add the required --site-id option."""
    return click.option(
        "--site-id",
        "-s",
        envvar="HEADLESS_SITE_ID",
        required=True,
        help="Site identifier of the target project",
    )(func)


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))
