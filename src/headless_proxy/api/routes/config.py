"""Project list routes.

Read and wholesale-replace the configured projects.
"""

from __future__ import annotations

__all__ = ["router"]

import logging
from typing import Any

from fastapi import APIRouter

from headless_proxy.api.deps import RegistryDep
from headless_proxy.api.errors import APIError, ErrorCode
from headless_proxy.api.schemas import ConfigUpdateRequest, ConfigUpdateResponse
from headless_proxy.constants import APP_NAME
from headless_proxy.exceptions import ConfigWriteError

_logger = logging.getLogger(f"{APP_NAME}.api.config")

router = APIRouter(tags=["config"])


@router.get("/api/headless-get-config")
async def get_config(registry: RegistryDep) -> list[dict[str, Any]]:
    """Return the full project list as stored."""
    return [project.to_dict() for project in registry.get_all()]


@router.post("/api/headless-update-config", response_model=ConfigUpdateResponse)
async def update_config(body: ConfigUpdateRequest, registry: RegistryDep) -> ConfigUpdateResponse:
    """Replace the project list.

    Storage is written before the in-memory list changes; a failed write
    leaves the current projects in place.
    """
    try:
        projects = await registry.replace_all(body.config)
    except ConfigWriteError as e:
        raise APIError(
            status_code=500,
            code=ErrorCode.CONFIG_SAVE_FAILED,
            message="Failed to write config file.",
            details={"error": str(e)},
        ) from e
    except ValueError as e:
        raise APIError(
            status_code=400,
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid config: {e}",
        ) from e

    return ConfigUpdateResponse(message="Config updated successfully.", count=len(projects))
