"""Sender command group: view and rename the email sender."""

from __future__ import annotations

__all__ = ["sender"]

import click

from ..api_client import api_request
from ..styling import style_label, style_success
from .helpers import get_server_url, site_id_option

_SENDER_PATH = "/api/headless-sender-details"


def _fetch_sender_details(server_url: str, site_id: str) -> dict:
    data = api_request("POST", _SENDER_PATH, server_url=server_url, json_data={"siteId": site_id})
    return data.get("senderDetails") or {}


@click.group()
def sender() -> None:
    """Sender details commands (requires a running server)."""
    pass


@sender.command("show")
@site_id_option
@click.pass_context
def show(ctx: click.Context, site_id: str) -> None:
    """Show the sender name and email."""
    details = _fetch_sender_details(get_server_url(ctx), site_id)
    click.echo(style_label("From name") + f" {details.get('fromName', '')}")
    click.echo(style_label("From email") + f" {details.get('fromEmail', '')}")


@sender.command("set-name")
@site_id_option
@click.argument("from_name")
@click.pass_context
def set_name(ctx: click.Context, site_id: str, from_name: str) -> None:
    """Change the sender name; the sender email is left as it is."""
    server_url = get_server_url(ctx)
    current = _fetch_sender_details(server_url, site_id)

    api_request(
        "PATCH",
        _SENDER_PATH,
        server_url=server_url,
        json_data={
            "siteId": site_id,
            "senderDetails": {"fromName": from_name, "fromEmail": current.get("fromEmail")},
        },
    )
    click.echo(style_success(f"Sender name set to {from_name!r}"))
