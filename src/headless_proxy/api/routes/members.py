"""Member routes: register, search, batch delete, list all."""

from __future__ import annotations

__all__ = ["router"]

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from headless_proxy.api.deps import ProjectDep, UpstreamDep, project_body
from headless_proxy.api.schemas import (
    DeleteMembersRequest,
    ListAllMembersResponse,
    RegisterMemberRequest,
    SearchMembersRequest,
)
from headless_proxy.api.routes.helpers import relay, upstream_api_error
from headless_proxy.exceptions import UpstreamError
from headless_proxy.upstream import BatchDeleteResult

router = APIRouter(tags=["members"])

RegisterBody = Annotated[RegisterMemberRequest, Depends(project_body(RegisterMemberRequest))]
SearchBody = Annotated[SearchMembersRequest, Depends(project_body(SearchMembersRequest))]
DeleteBody = Annotated[DeleteMembersRequest, Depends(project_body(DeleteMembersRequest))]


@router.post("/api/headless-register")
async def register_member(project: ProjectDep, body: RegisterBody, upstream: UpstreamDep) -> Response:
    """Register a member by email; the upstream response is relayed."""
    return await relay(upstream.register_member(project, body.email))


@router.post("/api/headless-search")
async def search_members(project: ProjectDep, body: SearchBody, upstream: UpstreamDep) -> Response:
    """Search members by login email; the upstream response is relayed."""
    return await relay(upstream.query_members(project, body.query))


@router.post(
    "/api/headless-delete",
    response_model=list[BatchDeleteResult],
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def delete_members(project: ProjectDep, body: DeleteBody, upstream: UpstreamDep) -> list[BatchDeleteResult]:
    """Delete members concurrently.

    Always 200 once the project is resolved: the body accounts for every
    id, success or failure.
    """
    return await upstream.delete_members(project, body.member_ids)


@router.post("/api/headless-list-all", response_model=ListAllMembersResponse)
async def list_all_members(project: ProjectDep, upstream: UpstreamDep) -> ListAllMembersResponse:
    """Fetch every member of the project across all pages."""
    try:
        members = await upstream.fetch_all_members(project)
    except UpstreamError as e:
        raise upstream_api_error(e) from e
    return ListAllMembersResponse(members=members)
