"""Shared fixtures: project files, registry and a scripted upstream."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from headless_proxy.registry import Project, ProjectRegistry
from headless_proxy.upstream import UpstreamClient

UPSTREAM_BASE_URL = "https://upstream.test"

PROJECTS: list[dict[str, str]] = [
    {"siteId": "site-a", "projectName": "Alpha", "apiKey": "key-a"},
    {"siteId": "site-b", "projectName": "Beta", "apiKey": "key-b"},
]

Handler = Callable[[httpx.Request], Any]


class FakeUpstream:
    """Scripted upstream provider for httpx.MockTransport.

    Routes are keyed by (method, path). Every request is recorded.
    Unrouted requests get a 404 JSON body.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler | httpx.Response] = {}

    def route(self, method: str, path: str, handler: Handler | httpx.Response) -> None:
        self._routes[(method, path)] = handler

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": f"no route for {request.method} {request.url.path}"})
        if isinstance(handler, httpx.Response):
            return handler
        result = handler(request)
        if not isinstance(result, httpx.Response):
            result = await result
        return result

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def project_data() -> list[dict[str, str]]:
    """The standard project list as stored on disk."""
    return [dict(p) for p in PROJECTS]


@pytest.fixture
def projects_file(tmp_path: Path, project_data: list[dict[str, str]]) -> Path:
    """Write the standard project list to a temp file."""
    path = tmp_path / "headless-config.json"
    path.write_text(json.dumps(project_data, indent=2))
    return path


@pytest.fixture
def registry(projects_file: Path) -> ProjectRegistry:
    """Registry loaded from the standard project list."""
    return ProjectRegistry.from_file(projects_file)


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def upstream(fake_upstream: FakeUpstream) -> AsyncIterator[UpstreamClient]:
    """Upstream client wired to the fake provider."""
    async with UpstreamClient(
        UPSTREAM_BASE_URL,
        register_password="Secret123!",
        transport=fake_upstream.transport(),
    ) as client:
        yield client


@pytest.fixture
def project() -> Project:
    return Project(site_id="site-a", api_key="key-a", project_name="Alpha")
