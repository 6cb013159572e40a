"""Email campaign routes: link validation, test email, statistics."""

from __future__ import annotations

__all__ = ["router"]

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from headless_proxy.api.deps import ProjectDep, UpstreamDep, project_body
from headless_proxy.api.schemas import (
    CampaignRecipientsRequest,
    CampaignStatsRequest,
    SendTestEmailRequest,
    ValidateLinkRequest,
    ValidateLinksRequest,
)
from headless_proxy.api.routes.helpers import relay

router = APIRouter(tags=["campaigns"])

ValidateLinksBody = Annotated[ValidateLinksRequest, Depends(project_body(ValidateLinksRequest))]
ValidateLinkBody = Annotated[ValidateLinkRequest, Depends(project_body(ValidateLinkRequest))]
SendTestEmailBody = Annotated[SendTestEmailRequest, Depends(project_body(SendTestEmailRequest))]
StatsBody = Annotated[CampaignStatsRequest, Depends(project_body(CampaignStatsRequest))]
RecipientsBody = Annotated[CampaignRecipientsRequest, Depends(project_body(CampaignRecipientsRequest))]


@router.post("/api/headless-validate-links")
async def validate_html_links(project: ProjectDep, body: ValidateLinksBody, upstream: UpstreamDep) -> Response:
    """Validate every link in an HTML campaign body."""
    return await relay(upstream.validate_html_links(project, body.html))


@router.post("/api/headless-validate-link")
async def validate_link(project: ProjectDep, body: ValidateLinkBody, upstream: UpstreamDep) -> Response:
    return await relay(upstream.validate_link(project, body.url))


@router.post("/api/headless-send-test-email")
async def send_test_email(project: ProjectDep, body: SendTestEmailBody, upstream: UpstreamDep) -> Response:
    return await relay(
        upstream.send_test_email(project, body.campaign_id, body.email_subject, body.to_email_address)
    )


@router.post("/api/headless-get-stats")
async def get_campaign_stats(project: ProjectDep, body: StatsBody, upstream: UpstreamDep) -> Response:
    return await relay(upstream.get_campaign_stats(project, body.campaign_ids))


@router.post("/api/headless-get-recipients")
async def get_campaign_recipients(project: ProjectDep, body: RecipientsBody, upstream: UpstreamDep) -> Response:
    """List campaign recipients filtered by activity."""
    return await relay(upstream.get_campaign_recipients(project, body.campaign_id, body.activity))
