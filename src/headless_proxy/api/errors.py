"""Error responses for the local API.

Every error leaves the server as one JSON shape:

    {"code": "PROJECT_NOT_FOUND", "message": "...", "details": {...}}

"details" is omitted when empty. Routes raise APIError; the handlers
registered by create_app() turn APIError, request parsing failures, plain
HTTPExceptions and anything unexpected into that shape.

Example:
    raise APIError(
        status_code=404,
        code=ErrorCode.PROJECT_NOT_FOUND,
        message=f"Project configuration not found for siteId: {site_id}",
    )
"""

from __future__ import annotations

__all__ = [
    "APIError",
    "ErrorCode",
    "api_error_handler",
    "error_body",
    "http_exception_handler",
    "unhandled_exception_handler",
    "validation_error_handler",
]

import logging
from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from headless_proxy.constants import APP_NAME

_logger = logging.getLogger(f"{APP_NAME}.api")


class ErrorCode(str, Enum):
    """Machine-readable error codes, grouped by what failed."""

    # Request body could not be parsed or is missing fields (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Project list update (400, 500)
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_SAVE_FAILED = "CONFIG_SAVE_FAILED"

    # Lookup and routing (404, 405)
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Upstream provider or next hop (500, 502)
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    AGGREGATION_FAILED = "AGGREGATION_FAILED"

    # Server side (500, 503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


# Code used when a bare HTTPException reaches the handlers
_CODE_FOR_STATUS: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    422: ErrorCode.VALIDATION_ERROR,
    502: ErrorCode.UPSTREAM_ERROR,
    503: ErrorCode.SERVICE_UNAVAILABLE,
}


def error_body(code: ErrorCode, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the JSON error body."""
    body: dict[str, Any] = {"code": code.value, "message": message}
    if details:
        body["details"] = details
    return body


class APIError(HTTPException):
    """HTTPException whose detail is a ready-made error body.

    Attributes:
        code: ErrorCode reported to the caller.
        error_message: The "message" field.
        error_details: The "details" field, if any.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.error_message = message
        self.error_details = details
        super().__init__(status_code=status_code, detail=error_body(code, message, details))


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.detail)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer unparseable or incomplete request bodies with 400.

    The first problem becomes the message ("email: Field required");
    the full list is kept under details.validation_errors.
    """
    problems = exc.errors()

    if any(p.get("type") == "json_invalid" for p in problems):
        message = "Invalid request body: malformed JSON"
    elif problems:
        first = problems[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        reason = first.get("msg", "Invalid value")
        message = f"{field}: {reason}" if field else reason
        if len(problems) > 1:
            message += f" (and {len(problems) - 1} more)"
    else:
        message = "Invalid request body"

    details = {
        "validation_errors": [
            {"loc": list(p.get("loc", ())), "msg": p.get("msg", ""), "type": p.get("type", "")} for p in problems
        ]
    }
    return JSONResponse(status_code=400, content=error_body(ErrorCode.VALIDATION_ERROR, message, details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap HTTPExceptions raised outside our routes (e.g. by Starlette)."""
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        content = exc.detail
    elif exc.status_code == 405:
        content = error_body(
            ErrorCode.METHOD_NOT_ALLOWED,
            f"Method {request.method} not allowed for this route.",
            {"method": request.method},
        )
    else:
        code = _CODE_FOR_STATUS.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
        content = error_body(code, str(exc.detail or f"HTTP {exc.status_code}"))
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log anything unexpected and answer 500; the server keeps running."""
    _logger.error(
        {
            "event": "unhandled_exception",
            "message": f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}",
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "error_message": str(exc),
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=error_body(ErrorCode.INTERNAL_ERROR, "Invalid request body or server error."),
    )
