"""Campaigns command group: link validation, test emails, statistics.

Responses are upstream payloads relayed by the server and printed as JSON.
"""

from __future__ import annotations

__all__ = ["campaigns"]

from typing import TextIO

import click

from ..api_client import api_request
from ..styling import style_success
from .helpers import echo_json, get_server_url, site_id_option


@click.group()
def campaigns() -> None:
    """Email campaign commands (requires a running server)."""
    pass


@campaigns.command("validate-link")
@site_id_option
@click.argument("url")
@click.pass_context
def validate_link(ctx: click.Context, site_id: str, url: str) -> None:
    """Check a single URL."""
    echo_json(
        api_request(
            "POST",
            "/api/headless-validate-link",
            server_url=get_server_url(ctx),
            json_data={"url": url, "siteId": site_id},
        )
    )


@campaigns.command("validate-html")
@site_id_option
@click.argument("html_file", type=click.File("r"))
@click.pass_context
def validate_html(ctx: click.Context, site_id: str, html_file: TextIO) -> None:
    """Check every link in an HTML file ('-' for stdin)."""
    echo_json(
        api_request(
            "POST",
            "/api/headless-validate-links",
            server_url=get_server_url(ctx),
            json_data={"html": html_file.read(), "siteId": site_id},
        )
    )


@campaigns.command("send-test")
@site_id_option
@click.argument("campaign_id")
@click.option("--subject", required=True, help="Email subject")
@click.option("--to", "to_email", required=True, help="Recipient address")
@click.pass_context
def send_test(ctx: click.Context, site_id: str, campaign_id: str, subject: str, to_email: str) -> None:
    """Send a test email for CAMPAIGN_ID."""
    api_request(
        "POST",
        "/api/headless-send-test-email",
        server_url=get_server_url(ctx),
        json_data={
            "campaignId": campaign_id,
            "emailSubject": subject,
            "toEmailAddress": to_email,
            "siteId": site_id,
        },
    )
    click.echo(style_success(f"Test email sent to {to_email}"))


@campaigns.command("stats")
@site_id_option
@click.argument("campaign_ids", nargs=-1, required=True)
@click.pass_context
def stats(ctx: click.Context, site_id: str, campaign_ids: tuple[str, ...]) -> None:
    """Show statistics for one or more campaigns."""
    echo_json(
        api_request(
            "POST",
            "/api/headless-get-stats",
            server_url=get_server_url(ctx),
            json_data={"campaignIds": list(campaign_ids), "siteId": site_id},
        )
    )


@campaigns.command("recipients")
@site_id_option
@click.argument("campaign_id")
@click.option("--activity", default="DELIVERED", show_default=True, help="Recipient activity filter")
@click.pass_context
def recipients(ctx: click.Context, site_id: str, campaign_id: str, activity: str) -> None:
    """List recipients of CAMPAIGN_ID by activity."""
    echo_json(
        api_request(
            "POST",
            "/api/headless-get-recipients",
            server_url=get_server_url(ctx),
            json_data={"campaignId": campaign_id, "activity": activity, "siteId": site_id},
        )
    )
