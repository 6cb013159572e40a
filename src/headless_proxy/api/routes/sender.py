"""Sender details route.

One path, two behaviours selected by method:
- POST: read the current sender details
- PATCH: partial update (senderDetails forwarded as given)
Any other method is answered with 405.
"""

from __future__ import annotations

__all__ = ["SENDER_DETAILS_PATH", "router"]

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from headless_proxy.api.deps import ProjectDep, UpstreamDep, project_body
from headless_proxy.api.errors import APIError, ErrorCode
from headless_proxy.api.schemas import SenderDetailsUpdateRequest
from headless_proxy.api.routes.helpers import relay

SENDER_DETAILS_PATH = "/api/headless-sender-details"

router = APIRouter(tags=["sender"])

SenderUpdateBody = Annotated[SenderDetailsUpdateRequest, Depends(project_body(SenderDetailsUpdateRequest))]


@router.post(SENDER_DETAILS_PATH)
async def get_sender_details(project: ProjectDep, upstream: UpstreamDep) -> Response:
    """Read sender details (POST carries the siteId body)."""
    return await relay(upstream.get_sender_details(project))


@router.patch(SENDER_DETAILS_PATH)
async def update_sender_details(project: ProjectDep, body: SenderUpdateBody, upstream: UpstreamDep) -> Response:
    """Update sender details."""
    return await relay(upstream.update_sender_details(project, body.sender_details))


@router.api_route(SENDER_DETAILS_PATH, methods=["GET", "PUT", "DELETE", "OPTIONS"])
async def sender_details_method_not_allowed(request: Request) -> Response:
    """Answer methods other than POST and PATCH.

    Methods not listed here (TRACE, custom verbs) get the same answer from
    http_exception_handler.
    """
    raise APIError(
        status_code=405,
        code=ErrorCode.METHOD_NOT_ALLOWED,
        message=f"Method {request.method} not allowed for this route.",
        details={"method": request.method},
    )
