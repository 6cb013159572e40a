"""Members command group.

Bulk import (register), search, full listing and batch delete of members
of a headless project, through the local server.
"""

from __future__ import annotations

__all__ = [
    "ImportResult",
    "classify_register_response",
    "members",
    "parse_emails",
]

import re
import sys
from dataclasses import dataclass
from typing import Any, Literal

import click
import httpx

from ..api_client import api_request, send_request
from ..styling import style_dim, style_error, style_header, style_label, style_success
from .helpers import echo_json, get_server_url, site_id_option

_EMAIL_SEPARATORS = re.compile(r"[,\s]+")

# Registration states the upstream reports for a created member
_REGISTERED_STATES = {
    "SUCCESS": "Member registered instantly.",
    "REQUIRE_EMAIL_VERIFICATION": "Success (Email verification sent).",
}


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of registering one email.

    Attributes:
        email: The email that was submitted.
        status: "Success" or "Failed".
        message: Human-readable outcome.
        full_response: Response body (or error info) for inspection.
    """

    email: str
    status: Literal["Success", "Failed"]
    message: str
    full_response: Any


def parse_emails(text: str) -> list[str]:
    """Split free text on commas and whitespace, keeping entries with '@'."""
    return [part.strip() for part in _EMAIL_SEPARATORS.split(text) if "@" in part]


def classify_register_response(email: str, status_code: int, payload: Any) -> ImportResult:
    """Turn a register response into an ImportResult."""
    state = payload.get("state") if isinstance(payload, dict) else None
    if 200 <= status_code < 300 and state in _REGISTERED_STATES:
        return ImportResult(email, "Success", _REGISTERED_STATES[state], payload)

    message = payload.get("message") if isinstance(payload, dict) else None
    return ImportResult(email, "Failed", message or "Registration failed.", payload)


def _register_one(server_url: str, site_id: str, email: str) -> ImportResult:
    try:
        response = send_request(
            "POST",
            "/api/headless-register",
            server_url=server_url,
            json_data={"email": email, "siteId": site_id},
        )
        payload = response.json()
    except (click.ClickException, httpx.HTTPError, ValueError) as e:
        return ImportResult(
            email,
            "Failed",
            "Network error connecting to local server.",
            {"error": "Network error or issue with local server.", "details": str(e)},
        )
    return classify_register_response(email, response.status_code, payload)


@click.group()
def members() -> None:
    """Member commands (requires a running server)."""
    pass


@members.command("import")
@site_id_option
@click.argument("emails", nargs=-1)
@click.option(
    "--file",
    "-f",
    "email_file",
    type=click.File("r"),
    default=None,
    help="Read emails from a file ('-' for stdin)",
)
@click.option("--json", "as_json", is_flag=True, help="Print full responses as JSON")
@click.pass_context
def import_members(
    ctx: click.Context,
    site_id: str,
    emails: tuple[str, ...],
    email_file: Any,
    as_json: bool,
) -> None:
    """Register members from a list of emails.

    Emails may be separated by commas, spaces or newlines. Entries without
    '@' are ignored. Emails are registered one at a time.
    """
    text = " ".join(emails)
    if email_file is not None:
        text = f"{text}\n{email_file.read()}"
    email_list = parse_emails(text)

    if not email_list:
        click.echo(style_error("Please enter at least one valid email address."), err=True)
        sys.exit(1)

    server_url = get_server_url(ctx)
    click.echo(style_label("Importing") + f" {len(email_list)} email(s) into {site_id}")

    results: list[ImportResult] = []
    for email in email_list:
        result = _register_one(server_url, site_id, email)
        results.append(result)
        line = f"{result.email}: {result.message}"
        click.echo(style_success(line) if result.status == "Success" else style_error(line))

    succeeded = sum(1 for r in results if r.status == "Success")
    click.echo()
    click.echo(style_header("Import Results"))
    click.echo(f"  {succeeded} succeeded, {len(results) - succeeded} failed")

    if as_json:
        echo_json(
            [
                {"email": r.email, "status": r.status, "message": r.message, "fullResponse": r.full_response}
                for r in results
            ]
        )

    if succeeded < len(results):
        sys.exit(1)


@members.command("search")
@site_id_option
@click.argument("email")
@click.pass_context
def search(ctx: click.Context, site_id: str, email: str) -> None:
    """Find members by login EMAIL."""
    data = api_request(
        "POST",
        "/api/headless-search",
        server_url=get_server_url(ctx),
        json_data={"query": email, "siteId": site_id},
    )
    found = data.get("members", []) if isinstance(data, dict) else []
    if not found:
        click.echo(style_dim(f"No members found for {email}."))
        return
    _echo_members(found)


@members.command("list")
@site_id_option
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def list_members(ctx: click.Context, site_id: str, as_json: bool) -> None:
    """List every member of the project."""
    data = api_request(
        "POST",
        "/api/headless-list-all",
        server_url=get_server_url(ctx),
        json_data={"siteId": site_id},
    )
    found = data.get("members", [])
    if as_json:
        echo_json(found)
        return
    click.echo(style_header(f"Members ({len(found)})"))
    _echo_members(found)


@members.command("delete")
@site_id_option
@click.argument("member_ids", nargs=-1, required=True)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete(ctx: click.Context, site_id: str, member_ids: tuple[str, ...], yes: bool) -> None:
    """Delete members by id."""
    if not yes:
        click.confirm(f"Delete {len(member_ids)} member(s) from {site_id}?", abort=True)

    results = api_request(
        "POST",
        "/api/headless-delete",
        server_url=get_server_url(ctx),
        json_data={"memberIds": list(member_ids), "siteId": site_id},
    )

    failed = 0
    for result in results:
        member_id = result.get("memberId")
        if result.get("status") == "success":
            click.echo(style_success(f"Deleted {member_id}"))
        else:
            failed += 1
            click.echo(style_error(f"Failed {member_id}: {result.get('error', '')}"))

    click.echo(f"{len(results) - failed} deleted, {failed} failed")
    if failed:
        sys.exit(1)


def _echo_members(found: list[Any]) -> None:
    for member in found:
        profile = member.get("profile") or {}
        nickname = profile.get("nickname") or style_dim("(no nickname)")
        click.echo(f"  {member.get('id')}  {member.get('loginEmail', '')}  {nickname}")
