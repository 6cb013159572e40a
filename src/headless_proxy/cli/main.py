"""Main CLI entry point for headless-proxy.

Defines the CLI group and registers all subcommands.

Commands:
    serve      - Run the proxy server
    config     - Server configuration (show, path, init)
    projects   - Project list management (list, replace)
    members    - Member management (import, search, list, delete)
    sender     - Sender details (show, set-name)
    campaigns  - Campaign tools (validate-link, validate-html, send-test, stats, recipients)

Subcommand help:
    headless-proxy COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from headless_proxy import __version__

from .commands.campaigns import campaigns
from .commands.config import config
from .commands.members import members
from .commands.projects import projects
from .commands.sender import sender
from .commands.serve import serve


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--server",
    "server_url",
    envvar="HEADLESS_PROXY_URL",
    default=None,
    help="Base URL of a running server (default: from server config)",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, server_url: str | None) -> None:
    """headless-proxy: member and email-marketing admin for headless sites."""
    if version:
        click.echo(f"headless-proxy {__version__}")
        sys.exit(0)
    ctx.ensure_object(dict)
    ctx.obj["server_url"] = server_url
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(campaigns)
cli.add_command(config)
cli.add_command(members)
cli.add_command(projects)
cli.add_command(sender)
cli.add_command(serve)


def main() -> None:
    """CLI entry point."""
    cli()
