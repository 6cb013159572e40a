"""Upstream provider client.

Issues HTTP requests to the headless provider's REST API on behalf of a
configured project. Every request carries the project's credentials:

    Content-Type: application/json
    Authorization: <project.api_key>
    wix-site-id:   <project.site_id>

Three call shapes:
- Simple call: one request, response returned untouched for relaying.
- Paginated fetch: sequential offset/limit pages accumulated in order.
- Fan-out batch: concurrent independent requests, every outcome kept.

No retries: each request, page or batch item is attempted once.
"""

from __future__ import annotations

__all__ = [
    "BatchDeleteResult",
    "UpstreamClient",
]

import asyncio
import logging
import time
from collections.abc import Iterable
from typing import Any, Literal
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from headless_proxy.constants import (
    APP_NAME,
    DEFAULT_REGISTER_PASSWORD,
    DEFAULT_UPSTREAM_BASE_URL,
    DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
    MEMBERS_PAGE_SIZE,
    SITE_ID_HEADER,
)
from headless_proxy.exceptions import AggregationError, UpstreamError
from headless_proxy.registry import Project

_logger = logging.getLogger(f"{APP_NAME}.upstream")

# Upstream endpoints
REGISTER_PATH = "/_api/iam/authentication/v2/register"
MEMBERS_PATH = "/members/v1/members"
MEMBERS_QUERY_PATH = "/members/v1/members/query"
SENDER_DETAILS_PATH = "/email-marketing/v1/sender-details"
VALIDATE_HTML_LINKS_PATH = "/email-marketing/v1/campaign-validation/validate-html-links"
VALIDATE_LINK_PATH = "/email-marketing/v1/campaign-validation/validate-link"
CAMPAIGNS_PATH = "/email-marketing/v1/campaigns"
CAMPAIGN_STATS_PATH = "/email-marketing/v1/campaigns/statistics"

# Max characters of an upstream body kept in error details
_ERROR_BODY_LIMIT = 500


class BatchDeleteResult(BaseModel):
    """Outcome of deleting a single member in a batch.

    Attributes:
        member_id: The member the outcome belongs to.
        status: "success" if upstream answered 200, otherwise "failed".
        error: Upstream error body or transport error text (failed only).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    member_id: str = Field(alias="memberId")
    status: Literal["success", "failed"]
    error: str | None = None


class UpstreamClient:
    """Async client for the upstream provider.

    Owns one httpx.AsyncClient for its lifetime. Use as an async context
    manager or call aclose() when done.

    Example:
        async with UpstreamClient() as upstream:
            response = await upstream.get_sender_details(project)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_UPSTREAM_BASE_URL,
        *,
        timeout: float | None = DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
        register_password: str = DEFAULT_REGISTER_PASSWORD,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Upstream base URL.
            timeout: Request timeout in seconds, None for no timeout.
            register_password: Password given to newly registered members.
            transport: Optional transport override (used by tests).
        """
        self._register_password = register_password
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @staticmethod
    def build_headers(project: Project) -> dict[str, str]:
        """Build the authentication headers for a project."""
        return {
            "Content-Type": "application/json",
            "Authorization": project.api_key,
            SITE_ID_HEADER: project.site_id,
        }

    # ======================================================================
    # Simple call
    # ======================================================================

    async def request(
        self,
        project: Project,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Any = None,
    ) -> httpx.Response:
        """Send one request to the upstream provider.

        The response is returned whatever its status; callers relay it.

        Args:
            project: Project whose credentials authenticate the call.
            method: HTTP method.
            path: Path relative to the upstream base URL.
            json: Optional JSON body.
            params: Optional query parameters.

        Returns:
            The upstream response with its body fully read.

        Raises:
            UpstreamError: On connection failure, timeout or other transport error.
        """
        start_time = time.monotonic()
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=self.build_headers(project),
            )
        except httpx.HTTPError as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            _logger.warning(
                {
                    "event": "upstream_request_failed",
                    "message": f"Upstream {method} {path} failed: {type(e).__name__}",
                    "site_id": project.site_id,
                    "method": method,
                    "path": path,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "duration_ms": duration_ms,
                }
            )
            raise UpstreamError(
                "API call error.",
                details={"method": method, "path": path, "error_type": type(e).__name__},
            ) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        _logger.debug(
            {
                "event": "upstream_response",
                "message": f"Upstream {method} {path} -> {response.status_code}",
                "site_id": project.site_id,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
        )
        return response

    async def register_member(self, project: Project, email: str) -> httpx.Response:
        """Register a new member by login email."""
        body = {
            "loginId": {"email": email},
            "password": self._register_password,
            "captcha_tokens": [],
        }
        return await self.request(project, "POST", REGISTER_PATH, json=body)

    async def query_members(self, project: Project, login_email: str) -> httpx.Response:
        """Search members by login email."""
        body = {
            "fieldsets": ["FULL"],
            "query": {"filter": {"loginEmail": login_email}},
        }
        return await self.request(project, "POST", MEMBERS_QUERY_PATH, json=body)

    async def get_sender_details(self, project: Project) -> httpx.Response:
        return await self.request(project, "GET", SENDER_DETAILS_PATH)

    async def update_sender_details(self, project: Project, sender_details: dict[str, Any]) -> httpx.Response:
        return await self.request(project, "PATCH", SENDER_DETAILS_PATH, json={"senderDetails": sender_details})

    async def validate_html_links(self, project: Project, html: str) -> httpx.Response:
        return await self.request(project, "POST", VALIDATE_HTML_LINKS_PATH, json={"html": html})

    async def validate_link(self, project: Project, url: str) -> httpx.Response:
        return await self.request(project, "POST", VALIDATE_LINK_PATH, json={"url": url})

    async def send_test_email(
        self,
        project: Project,
        campaign_id: str,
        email_subject: str,
        to_email_address: str,
    ) -> httpx.Response:
        """Send a campaign test email to a single address."""
        path = f"{CAMPAIGNS_PATH}/{quote(campaign_id, safe='')}/test"
        body = {"emailSubject": email_subject, "toEmailAddress": to_email_address}
        return await self.request(project, "POST", path, json=body)

    async def get_campaign_stats(self, project: Project, campaign_ids: Iterable[str]) -> httpx.Response:
        """Get statistics for one or more campaigns."""
        params = [("campaignIds", campaign_id) for campaign_id in campaign_ids]
        return await self.request(project, "GET", CAMPAIGN_STATS_PATH, params=params)

    async def get_campaign_recipients(self, project: Project, campaign_id: str, activity: str) -> httpx.Response:
        """List recipients of a campaign filtered by activity (e.g. DELIVERED)."""
        path = f"{CAMPAIGNS_PATH}/{quote(campaign_id, safe='')}/statistics/recipients"
        return await self.request(project, "GET", path, params={"activity": activity})

    # ======================================================================
    # Paginated fetch
    # ======================================================================

    async def fetch_all_members(self, project: Project, page_size: int = MEMBERS_PAGE_SIZE) -> list[Any]:
        """Fetch every member of a project, page by page.

        Pages are requested strictly in increasing offset order. Stops when a
        page is empty or the accumulated count reaches the total reported in
        the response metadata. Without a reported total, stops at the first
        empty page.

        Args:
            project: Project to list members for.
            page_size: Members requested per page.

        Returns:
            All members in upstream order.

        Raises:
            AggregationError: If a page has an error status or an unparseable body.
            UpstreamError: If a page request fails at the transport level.
        """
        members: list[Any] = []
        offset = 0
        pages = 0

        while True:
            params = {"paging.limit": page_size, "paging.offset": offset, "fieldsets": "FULL"}
            response = await self.request(project, "GET", MEMBERS_PATH, params=params)
            pages += 1
            page, total = self._parse_members_page(response, offset)
            members.extend(page)

            if not page:
                if total is not None and len(members) < total:
                    _logger.warning(
                        {
                            "event": "members_total_mismatch",
                            "message": f"Empty page at offset {offset} before reported total {total}",
                            "site_id": project.site_id,
                            "fetched": len(members),
                            "total": total,
                        }
                    )
                break

            if total is not None and len(members) >= total:
                if len(members) > total:
                    _logger.warning(
                        {
                            "event": "members_total_mismatch",
                            "message": f"Fetched {len(members)} members, more than reported total {total}",
                            "site_id": project.site_id,
                            "fetched": len(members),
                            "total": total,
                        }
                    )
                break

            offset += len(page)

        _logger.info(
            {
                "event": "members_listed",
                "message": f"Fetched {len(members)} member(s) in {pages} page(s)",
                "site_id": project.site_id,
                "count": len(members),
                "pages": pages,
            }
        )
        return members

    @staticmethod
    def _parse_members_page(response: httpx.Response, offset: int) -> tuple[list[Any], int | None]:
        """Extract the members and reported total from one page.

        A page without a "members" key counts as empty.

        Raises:
            AggregationError: On error status or malformed body.
        """
        if not response.is_success:
            raise AggregationError(
                f"Upstream returned {response.status_code} for members page at offset {offset}",
                details={
                    "status_code": response.status_code,
                    "offset": offset,
                    "body": response.text[:_ERROR_BODY_LIMIT],
                },
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise AggregationError(
                f"Unparseable members page at offset {offset}",
                details={"offset": offset, "error_message": str(e)},
            ) from e

        if not isinstance(payload, dict):
            raise AggregationError(
                f"Unexpected members page at offset {offset}",
                details={"offset": offset, "payload_type": type(payload).__name__},
            )

        page = payload.get("members", [])
        if not isinstance(page, list):
            raise AggregationError(
                f"Unexpected members field at offset {offset}",
                details={"offset": offset, "members_type": type(page).__name__},
            )

        metadata = payload.get("metadata")
        total = metadata.get("total") if isinstance(metadata, dict) else None
        if isinstance(total, str) and total.isdigit():
            total = int(total)
        if not isinstance(total, int) or isinstance(total, bool):
            total = None

        return page, total

    # ======================================================================
    # Fan-out batch
    # ======================================================================

    async def delete_members(self, project: Project, member_ids: Iterable[str]) -> list[BatchDeleteResult]:
        """Delete members concurrently, one request per id.

        Every request is awaited to completion; individual failures never
        cut the batch short. Each result carries its member id.

        Args:
            project: Project owning the members.
            member_ids: Ids to delete.

        Returns:
            One BatchDeleteResult per id.
        """
        results = await asyncio.gather(*(self._delete_member(project, member_id) for member_id in member_ids))

        failed = sum(1 for r in results if r.status == "failed")
        _logger.info(
            {
                "event": "members_deleted",
                "message": f"Batch delete finished: {len(results) - failed} succeeded, {failed} failed",
                "site_id": project.site_id,
                "succeeded": len(results) - failed,
                "failed": failed,
            }
        )
        return list(results)

    async def _delete_member(self, project: Project, member_id: str) -> BatchDeleteResult:
        """Delete one member; never raises."""
        path = f"{MEMBERS_PATH}/{quote(member_id, safe='')}"
        try:
            response = await self.request(project, "DELETE", path)
        except UpstreamError as e:
            cause = e.__cause__
            error = str(cause) if cause is not None and str(cause) else e.details.get("error_type", e.message)
            return BatchDeleteResult(member_id=member_id, status="failed", error=error)

        if response.status_code == 200:
            return BatchDeleteResult(member_id=member_id, status="success")
        return BatchDeleteResult(
            member_id=member_id,
            status="failed",
            error=response.text or f"HTTP {response.status_code}",
        )
