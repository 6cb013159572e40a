"""API client helper for CLI commands.

CLI commands talk to a running headless-proxy server over plain HTTP,
the same routes the admin UI uses. File-based commands (config show,
config path) read files directly instead of using this module.
"""

from __future__ import annotations

__all__ = [
    "ServerAPIError",
    "ServerNotRunningError",
    "api_request",
    "error_message",
    "send_request",
]

from typing import Any

import click
import httpx

from headless_proxy.constants import CLI_REQUEST_TIMEOUT_SECONDS


class ServerNotRunningError(click.ClickException):
    """Raised when the local server cannot be reached."""

    def __init__(self, server_url: str) -> None:
        super().__init__(
            f"Cannot reach headless-proxy at {server_url}.\n" "Start it with: headless-proxy serve"
        )
        self.server_url = server_url


class ServerAPIError(click.ClickException):
    """Raised when an API request fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        if status_code:
            super().__init__(f"API error ({status_code}): {message}")
        else:
            super().__init__(f"API error: {message}")
        self.status_code = status_code


def send_request(
    method: str,
    endpoint: str,
    *,
    server_url: str,
    json_data: Any = None,
    timeout: float = CLI_REQUEST_TIMEOUT_SECONDS,
) -> httpx.Response:
    """Send a request to the local server and return the raw response.

    Error statuses are returned, not raised; use api_request() for that.

    Args:
        method: HTTP method.
        endpoint: API path (e.g., "/api/headless-search").
        server_url: Base URL of the local server.
        json_data: Optional JSON body.
        timeout: Request timeout in seconds.

    Raises:
        ServerNotRunningError: If the server cannot be reached.
        ServerAPIError: On other transport errors.
    """
    try:
        with httpx.Client(base_url=server_url, timeout=timeout) as client:
            return client.request(method, endpoint, json=json_data)
    except httpx.ConnectError as e:
        raise ServerNotRunningError(server_url) from e
    except httpx.HTTPError as e:
        raise ServerAPIError(str(e) or type(e).__name__) from e


def api_request(
    method: str,
    endpoint: str,
    *,
    server_url: str,
    json_data: Any = None,
    timeout: float = CLI_REQUEST_TIMEOUT_SECONDS,
) -> Any:
    """Make an API request and return the parsed JSON body.

    Args:
        method: HTTP method.
        endpoint: API path.
        server_url: Base URL of the local server.
        json_data: Optional JSON body.
        timeout: Request timeout in seconds.

    Returns:
        Parsed JSON response (empty dict for an empty body).

    Raises:
        ServerNotRunningError: If the server cannot be reached.
        ServerAPIError: If the response has an error status or is not JSON.
    """
    response = send_request(method, endpoint, server_url=server_url, json_data=json_data, timeout=timeout)

    if response.is_error:
        raise ServerAPIError(error_message(response), response.status_code)

    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise ServerAPIError(f"Invalid JSON response from {endpoint}", response.status_code) from e


def error_message(response: httpx.Response) -> str:
    """Extract a human-readable message from an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return str(payload)
