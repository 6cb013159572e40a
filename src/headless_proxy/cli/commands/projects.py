"""Projects command group: view and replace the server's project list."""

from __future__ import annotations

__all__ = ["projects"]

import json
import sys
from pathlib import Path

import click

from ..api_client import api_request
from ..styling import style_dim, style_error, style_header, style_success
from .helpers import echo_json, get_server_url


def mask_key(api_key: str) -> str:
    """Mask an API key, keeping the last 4 characters."""
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * 8 + api_key[-4:]


@click.group()
def projects() -> None:
    """Project list commands (requires a running server)."""
    pass


@projects.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON (includes API keys)")
@click.pass_context
def list_projects(ctx: click.Context, as_json: bool) -> None:
    """List configured projects."""
    data = api_request("GET", "/api/headless-get-config", server_url=get_server_url(ctx))
    if as_json:
        echo_json(data)
        return

    if not data:
        click.echo(style_dim("No projects configured."))
        return

    click.echo(style_header("Projects"))
    for project in data:
        name = project.get("projectName") or style_dim("(unnamed)")
        click.echo(f"  {name}")
        click.echo(f"    siteId: {project.get('siteId')}")
        click.echo(f"    apiKey: {mask_key(str(project.get('apiKey', '')))}")


@projects.command("replace")
@click.argument("file", type=click.Path(exists=True, path_type=Path, dir_okay=False))
@click.pass_context
def replace(ctx: click.Context, file: Path) -> None:
    """Replace the project list with the contents of FILE."""
    try:
        new_config = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        click.echo(style_error(f"Invalid JSON in {file}: {e}"), err=True)
        sys.exit(1)

    result = api_request(
        "POST",
        "/api/headless-update-config",
        server_url=get_server_url(ctx),
        json_data={"config": new_config},
    )
    click.echo(style_success(f"{result.get('message', 'Config updated.')} ({result.get('count', '?')} project(s))"))
