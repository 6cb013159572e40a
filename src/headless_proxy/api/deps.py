"""Shared dependencies for API routes.

FastAPI convention: deps.py contains reusable request dependencies.

Project routes resolve their project before the operation fields are
validated, so an unknown siteId is always a 404:

    1. read_json_body: raw body -> dict (empty body is {}; malformed -> 400)
    2. get_project: siteId -> Project (404 if no match)
    3. project_body(Model): the same dict validated against Model (400)

Usage with Annotated:
    RegisterBody = Annotated[RegisterMemberRequest, Depends(project_body(RegisterMemberRequest))]

    @router.post("/api/headless-register")
    async def register(project: ProjectDep, body: RegisterBody, upstream: UpstreamDep):
        ...
"""

from __future__ import annotations

__all__ = [
    # Dependency functions
    "get_project",
    "get_registry",
    "get_upstream",
    "project_body",
    "read_json_body",
    "require_project",
    # Type aliases for Annotated pattern
    "JsonBodyDep",
    "ProjectDep",
    "RegistryDep",
    "UpstreamDep",
]

import json
from collections.abc import Callable
from typing import Annotated, Any, TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from headless_proxy.api.errors import APIError, ErrorCode
from headless_proxy.registry import Project, ProjectRegistry
from headless_proxy.upstream import UpstreamClient

M = TypeVar("M", bound=BaseModel)


def get_registry(request: Request) -> ProjectRegistry:
    """Get the project registry from app.state."""
    registry: ProjectRegistry | None = getattr(request.app.state, "registry", None)
    if registry is None:
        raise APIError(503, ErrorCode.SERVICE_UNAVAILABLE, "Project registry not loaded")
    return registry


def get_upstream(request: Request) -> UpstreamClient:
    """Get the upstream client from app.state."""
    upstream: UpstreamClient | None = getattr(request.app.state, "upstream", None)
    if upstream is None:
        raise APIError(503, ErrorCode.SERVICE_UNAVAILABLE, "Upstream client not available")
    return upstream


RegistryDep = Annotated[ProjectRegistry, Depends(get_registry)]
UpstreamDep = Annotated[UpstreamClient, Depends(get_upstream)]


async def read_json_body(request: Request) -> dict[str, Any]:
    """Decode the request body as a JSON object.

    An empty body counts as {}.

    Raises:
        APIError: 400 if the body is not JSON or not an object.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise APIError(400, ErrorCode.VALIDATION_ERROR, "Invalid request body: malformed JSON") from e
    if not isinstance(data, dict):
        raise APIError(
            400,
            ErrorCode.VALIDATION_ERROR,
            "Invalid request body: expected a JSON object",
            details={"body_type": type(data).__name__},
        )
    return data


JsonBodyDep = Annotated[dict[str, Any], Depends(read_json_body)]


def require_project(registry: ProjectRegistry, site_id: str | None) -> Project:
    """Resolve a project by site id.

    Raises:
        APIError: 404 if no project matches.
    """
    project = registry.find(site_id)
    if project is None:
        raise APIError(
            status_code=404,
            code=ErrorCode.PROJECT_NOT_FOUND,
            message=f"Project configuration not found for siteId: {site_id}",
            details={"site_id": site_id},
        )
    return project


def get_project(body: JsonBodyDep, registry: RegistryDep) -> Project:
    """Resolve the project named by the body's siteId."""
    site_id = body.get("siteId")
    return require_project(registry, None if site_id is None else str(site_id))


ProjectDep = Annotated[Project, Depends(get_project)]


def project_body(model: type[M]) -> Callable[..., M]:
    """Build a dependency validating the body against model.

    Depends on get_project, so the project is resolved first.

    Raises:
        RequestValidationError: If required fields are missing or invalid
            (answered with 400 by validation_error_handler).
    """

    def dependency(body: JsonBodyDep, project: ProjectDep) -> M:
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False)) from e

    dependency.__name__ = f"parse_{model.__name__}"
    return dependency
