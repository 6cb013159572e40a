"""API routes package - the local request router.

This package splits the routes into focused modules:
- helpers: Upstream response relaying and error mapping
- status: Health check
- config: Project list read/replace
- members: Register, search, batch delete, list all
- campaigns: Link validation, test email, statistics
- sender: Sender details (method-sensitive)
- forwarding: Hand-off of unmatched requests to the next handler
"""

from __future__ import annotations

__all__ = ["create_app"]

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from headless_proxy import __version__
from headless_proxy.api.errors import (
    APIError,
    api_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from headless_proxy.config import ServerConfig
from headless_proxy.constants import APP_NAME
from headless_proxy.registry import ProjectRegistry
from headless_proxy.upstream import UpstreamClient

from . import campaigns
from . import config
from . import forwarding
from . import members
from . import sender
from . import status

_logger = logging.getLogger(f"{APP_NAME}.api")


def create_app(
    registry: ProjectRegistry,
    server_config: ServerConfig | None = None,
    *,
    upstream: UpstreamClient | None = None,
    fallback_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        registry: Loaded project registry.
        server_config: Server settings (defaults if None).
        upstream: Upstream client. Built from server_config if None.
        fallback_client: Client for the next hop. Built from
            server_config.fallback_url if None and a URL is configured.

    Returns:
        Configured FastAPI application. Clients it created are closed on
        shutdown.
    """
    server_config = server_config or ServerConfig()

    owned_clients: list[UpstreamClient | httpx.AsyncClient] = []
    if upstream is None:
        upstream = UpstreamClient(
            server_config.upstream_base_url,
            timeout=server_config.upstream_timeout_seconds,
            register_password=server_config.register_password,
        )
        owned_clients.append(upstream)
    if fallback_client is None and server_config.fallback_url:
        fallback_client = httpx.AsyncClient(
            base_url=server_config.fallback_url,
            timeout=server_config.upstream_timeout_seconds,
        )
        owned_clients.append(fallback_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        _logger.info(
            {
                "event": "server_started",
                "message": f"Serving {len(registry.get_all())} project(s)",
                "projects": len(registry.get_all()),
            }
        )
        yield
        for client in owned_clients:
            await client.aclose()

    app = FastAPI(
        title="Headless Proxy",
        description="Credential-injecting proxy for headless site projects",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.registry = registry
    app.state.upstream = upstream
    app.state.fallback_client = fallback_client
    app.state.static_dir = Path(server_config.static_dir).expanduser() if server_config.static_dir else None

    # Exception handlers for structured error responses
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Order matters: explicit routes before the catch-all hand-off
    app.include_router(status.router)
    app.include_router(config.router)
    app.include_router(members.router)
    app.include_router(campaigns.router)
    app.include_router(sender.router)
    app.include_router(forwarding.router)

    return app
