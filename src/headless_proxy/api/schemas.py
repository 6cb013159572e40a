"""Request and response models for the local API.

Field names on the wire are camelCase (siteId, memberIds, ...) to match
the admin front end; Python attributes are snake_case via aliases.
Unknown fields are ignored.
"""

from __future__ import annotations

__all__ = [
    "CampaignRecipientsRequest",
    "CampaignStatsRequest",
    "ConfigUpdateRequest",
    "ConfigUpdateResponse",
    "DeleteMembersRequest",
    "HealthResponse",
    "ListAllMembersResponse",
    "RegisterMemberRequest",
    "SearchMembersRequest",
    "SendTestEmailRequest",
    "SenderDetailsUpdateRequest",
    "SiteRequest",
    "ValidateLinkRequest",
    "ValidateLinksRequest",
]

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from headless_proxy.registry import Project


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SiteRequest(_RequestModel):
    """Base for requests that act on a configured project.

    A missing siteId is not a validation error; it resolves to no project
    and the route answers 404.
    """

    site_id: str | None = Field(default=None, alias="siteId")


# =============================================================================
# Config
# =============================================================================


class ConfigUpdateRequest(_RequestModel):
    """Replacement project list."""

    config: list[Project] = Field(min_length=1)


class ConfigUpdateResponse(BaseModel):
    message: str
    count: int


# =============================================================================
# Members
# =============================================================================


class RegisterMemberRequest(SiteRequest):
    email: str = Field(min_length=1)


class SearchMembersRequest(SiteRequest):
    query: str


class DeleteMembersRequest(SiteRequest):
    member_ids: list[str] = Field(alias="memberIds")


class ListAllMembersResponse(BaseModel):
    members: list[Any]


# =============================================================================
# Campaigns
# =============================================================================


class ValidateLinksRequest(SiteRequest):
    html: str = Field(min_length=1)


class ValidateLinkRequest(SiteRequest):
    url: str = Field(min_length=1)


class SendTestEmailRequest(SiteRequest):
    campaign_id: str = Field(alias="campaignId", min_length=1)
    email_subject: str = Field(alias="emailSubject", min_length=1)
    to_email_address: str = Field(alias="toEmailAddress", min_length=1)


class CampaignStatsRequest(SiteRequest):
    campaign_ids: list[str] = Field(alias="campaignIds", min_length=1)


class CampaignRecipientsRequest(SiteRequest):
    campaign_id: str = Field(alias="campaignId", min_length=1)
    activity: str = Field(min_length=1)


# =============================================================================
# Sender details
# =============================================================================


class SenderDetailsUpdateRequest(SiteRequest):
    """Partial update; only fromName is meant to change.

    The whole senderDetails object is forwarded so fromEmail round-trips.
    """

    sender_details: dict[str, Any] = Field(alias="senderDetails")


# =============================================================================
# Health
# =============================================================================


class HealthResponse(BaseModel):
    status: str
    version: str
    projects: int
