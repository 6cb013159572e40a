"""Fallback handling for requests no API route matched.

This app is one link in a request-handling chain: anything it does not
own is passed on, not answered. In order of preference:
1. Forward to the configured next hop (fallback_url), relaying its reply
2. Serve the built admin UI from static_dir (SPA fallback to index.html)
3. 404
"""

from __future__ import annotations

__all__ = ["router"]

import logging
import time
from pathlib import Path

import httpx
from fastapi import APIRouter, Request, Response
from fastapi.responses import FileResponse, HTMLResponse

from headless_proxy.api.errors import APIError, ErrorCode
from headless_proxy.api.routes.helpers import is_safe_path
from headless_proxy.constants import APP_NAME

_logger = logging.getLogger(f"{APP_NAME}.api.forwarding")

# Headers stripped when forwarding to the next hop.
# Hop-by-hop headers (RFC 7230 §6.1) must not cross connection boundaries.
_STRIP_REQUEST_HEADERS = frozenset(
    (
        "host",
        "connection",
        "keep-alive",
        "transfer-encoding",
        "te",
        "trailer",
        "upgrade",
        "proxy-authenticate",
        "proxy-authorization",
        "content-length",
    )
)

# httpx has already de-chunked and decoded the body
_STRIP_RESPONSE_HEADERS = frozenset(
    (
        "connection",
        "keep-alive",
        "transfer-encoding",
        "content-encoding",
        "content-length",
    )
)

router = APIRouter(tags=["forwarding"])


async def _forward_request(client: httpx.AsyncClient, request: Request) -> Response:
    """Forward a request to the next hop and relay its response.

    Args:
        client: HTTP client with base_url set to the next hop.
        request: Incoming request, forwarded with method, path, query and body intact.

    Returns:
        The next hop's response.

    Raises:
        APIError: 502 if the next hop cannot be reached.
    """
    target_path = request.url.path
    if request.url.query:
        target_path = f"{target_path}?{request.url.query}"

    body = await request.body()
    forward_headers = {k: v for k, v in request.headers.items() if k.lower() not in _STRIP_REQUEST_HEADERS}

    start_time = time.monotonic()
    try:
        response = await client.request(
            method=request.method,
            url=target_path,
            content=body or None,
            headers=forward_headers,
        )
    except httpx.HTTPError as e:
        duration_ms = int((time.monotonic() - start_time) * 1000)
        _logger.warning(
            {
                "event": "fallback_forward_failed",
                "message": f"Failed to forward {request.method} {target_path}: {type(e).__name__}",
                "path": target_path,
                "error_type": type(e).__name__,
                "duration_ms": duration_ms,
            }
        )
        raise APIError(
            status_code=502,
            code=ErrorCode.UPSTREAM_ERROR,
            message="Next handler unavailable",
            details={"path": target_path},
        ) from e

    headers = {k: v for k, v in response.headers.items() if k.lower() not in _STRIP_RESPONSE_HEADERS}
    return Response(content=response.content, status_code=response.status_code, headers=headers)


def _serve_static(static_dir: Path, path: str) -> Response | None:
    """Serve a file from the admin UI build, or index.html for SPA routes.

    Returns:
        The response, or None if the directory has no index.html.
    """
    if path:
        static_file = static_dir / path
        if not is_safe_path(static_dir, static_file):
            _logger.warning(
                {
                    "event": "path_traversal_blocked",
                    "message": f"Path traversal attempt blocked: {path}",
                    "path": path,
                }
            )
            return HTMLResponse(content="Not Found", status_code=404)
        if static_file.is_file():
            return FileResponse(static_file)

    index_file = static_dir / "index.html"
    if not index_file.is_file():
        return None
    return HTMLResponse(
        content=index_file.read_text(encoding="utf-8"),
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"],
    include_in_schema=False,
)
async def pass_to_next_handler(path: str, request: Request) -> Response:
    """Hand unmatched requests to the next handler in the chain."""
    fallback_client: httpx.AsyncClient | None = getattr(request.app.state, "fallback_client", None)
    if fallback_client is not None:
        return await _forward_request(fallback_client, request)

    static_dir: Path | None = getattr(request.app.state, "static_dir", None)
    if static_dir is not None and request.method in ("GET", "HEAD"):
        response = _serve_static(static_dir, path)
        if response is not None:
            return response

    raise APIError(
        status_code=404,
        code=ErrorCode.NOT_FOUND,
        message=f"No handler for {request.method} /{path}",
    )
