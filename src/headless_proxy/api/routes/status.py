"""Health endpoint."""

from __future__ import annotations

__all__ = ["router"]

from fastapi import APIRouter

from headless_proxy import __version__
from headless_proxy.api.deps import RegistryDep
from headless_proxy.api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=HealthResponse)
async def health(registry: RegistryDep) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, projects=len(registry.get_all()))
