"""Custom exceptions for headless-proxy.

Domain errors raised by the registry and the upstream client. The API
layer translates them into structured HTTP error responses (see
api/errors.py); nothing here knows about HTTP status codes.

Usage:
    from headless_proxy.exceptions import UpstreamError, ConfigWriteError
"""

from __future__ import annotations

__all__ = [
    "AggregationError",
    "ConfigWriteError",
    "ConfigurationError",
    "HeadlessProxyError",
    "UpstreamError",
]

from typing import Any


class HeadlessProxyError(Exception):
    """Base class for all headless-proxy errors."""


class ConfigurationError(HeadlessProxyError):
    """Raised when configuration or project storage is missing or invalid.

    Fatal at startup: the server cannot route any request without a
    project list.
    """


class ConfigWriteError(HeadlessProxyError):
    """Raised when the project list cannot be persisted.

    The in-memory project list is left untouched when this is raised.
    """


class UpstreamError(HeadlessProxyError):
    """Raised when the upstream provider cannot be reached.

    Covers connection failures, timeouts and other transport errors.
    Non-2xx responses are not UpstreamErrors on pass-through routes;
    they are relayed to the caller as-is.

    Attributes:
        message: Human-readable error message.
        details: Optional contextual details (method, path, error type).
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AggregationError(UpstreamError):
    """Raised when a paginated fetch cannot assemble a complete result.

    A single bad page (unparseable body or error status) fails the
    whole listing.
    """
