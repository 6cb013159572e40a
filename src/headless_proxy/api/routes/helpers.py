"""Shared helpers for API routes.

Relaying upstream responses and mapping upstream failures to API errors.
"""

from __future__ import annotations

__all__ = [
    "is_safe_path",
    "relay",
    "relay_response",
    "upstream_api_error",
]

from collections.abc import Awaitable
from pathlib import Path

import httpx
from fastapi import Response

from headless_proxy.api.errors import APIError, ErrorCode
from headless_proxy.exceptions import AggregationError, UpstreamError


def relay_response(response: httpx.Response) -> Response:
    """Copy an upstream response's status code and body verbatim.

    Only the content type is carried over; transfer headers no longer
    apply once httpx has read and decoded the body.

    Args:
        response: Upstream response with its body read.

    Returns:
        Response for the local caller.
    """
    return Response(
        content=response.content,
        status_code=response.status_code,
        media_type=response.headers.get("content-type", "application/json"),
    )


def upstream_api_error(error: UpstreamError) -> APIError:
    """Map an upstream failure to a 500 APIError."""
    code = ErrorCode.AGGREGATION_FAILED if isinstance(error, AggregationError) else ErrorCode.UPSTREAM_ERROR
    return APIError(
        status_code=500,
        code=code,
        message=error.message,
        details=error.details or None,
    )


async def relay(call: Awaitable[httpx.Response]) -> Response:
    """Await an upstream call and relay its response.

    Raises:
        APIError: 500 if the upstream could not be reached.
    """
    try:
        response = await call
    except UpstreamError as e:
        raise upstream_api_error(e) from e
    return relay_response(response)


def is_safe_path(base_dir: Path, requested_path: Path) -> bool:
    """Check if requested path is safely within base directory.

    Prevents path traversal attacks (e.g., ../../etc/passwd).

    Args:
        base_dir: Base directory that should contain the path.
        requested_path: Path to validate.

    Returns:
        True if path is safely within base_dir.
    """
    try:
        return requested_path.resolve().is_relative_to(base_dir.resolve())
    except (ValueError, RuntimeError):
        return False
