"""Fixtures for API route tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from headless_proxy.api.routes import create_app
from headless_proxy.registry import ProjectRegistry
from headless_proxy.upstream import UpstreamClient

UPSTREAM_BASE_URL = "https://upstream.test"


@pytest.fixture
def api_upstream(fake_upstream) -> UpstreamClient:
    """Upstream client for the app under test, wired to the fake provider."""
    return UpstreamClient(
        UPSTREAM_BASE_URL,
        register_password="Secret123!",
        transport=fake_upstream.transport(),
    )


@pytest.fixture
def client(registry: ProjectRegistry, api_upstream: UpstreamClient) -> TestClient:
    """Test client for an app with the standard projects and no fallback."""
    return TestClient(create_app(registry, upstream=api_upstream))
