"""Structured API errors.

Handlers raise :class:`APIError` with an :class:`ErrorCode`; the exception
handlers registered by :func:`register_exception_handlers` turn it, request
validation failures, unknown routes and unexpected exceptions into an
:class:`~app.schemas.common.ErrorResponse` body.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorCode(enum.StrEnum):
    """Machine-readable error codes returned in the ``code`` field."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"

    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"


@dataclass(frozen=True)
class ErrorDefinition:
    status_code: int
    message: str


ERROR_DEFINITIONS: dict[ErrorCode, ErrorDefinition] = {
    # 4xx
    ErrorCode.VALIDATION_ERROR: ErrorDefinition(400, "Request validation failed"),
    ErrorCode.INVALID_PARAMETER: ErrorDefinition(400, "Invalid parameter value"),
    ErrorCode.MISSING_PARAMETER: ErrorDefinition(400, "Missing required parameter"),
    ErrorCode.INVALID_REQUEST: ErrorDefinition(400, "Invalid request format"),
    ErrorCode.UNAUTHORIZED: ErrorDefinition(401, "Authentication required"),
    ErrorCode.FORBIDDEN: ErrorDefinition(403, "Access denied"),
    ErrorCode.NOT_FOUND: ErrorDefinition(404, "Resource not found"),
    ErrorCode.METHOD_NOT_ALLOWED: ErrorDefinition(405, "Method not allowed"),
    ErrorCode.CONFLICT: ErrorDefinition(409, "Resource conflict"),
    ErrorCode.PAYLOAD_TOO_LARGE: ErrorDefinition(413, "Request body too large"),
    ErrorCode.TOO_MANY_REQUESTS: ErrorDefinition(429, "Too many requests"),
    # 5xx
    ErrorCode.INTERNAL_ERROR: ErrorDefinition(500, "Internal server error"),
    ErrorCode.NOT_IMPLEMENTED: ErrorDefinition(501, "Not implemented"),
    ErrorCode.SERVICE_UNAVAILABLE: ErrorDefinition(503, "Service temporarily unavailable"),
    # Authentication
    ErrorCode.INVALID_CREDENTIALS: ErrorDefinition(401, "Invalid credentials"),
    ErrorCode.ACCOUNT_DISABLED: ErrorDefinition(403, "Account is disabled"),
}

# Starlette HTTPException status -> code, for errors raised by the framework itself
_STATUS_TO_CODE: dict[int, ErrorCode] = {
    400: ErrorCode.INVALID_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
    429: ErrorCode.TOO_MANY_REQUESTS,
}


class APIError(Exception):
    """An error that maps directly onto an HTTP error response."""

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        definition = ERROR_DEFINITIONS[code]
        self.code = code
        self.status_code = definition.status_code
        self.message = message or definition.message
        self.details = details
        self.headers = headers
        super().__init__(self.message)


def build_error_response(
    request: Request,
    code: ErrorCode,
    message: str | None = None,
    *,
    details: dict[str, Any] | None = None,
    validation: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
    status_code: int | None = None,
) -> JSONResponse:
    definition = ERROR_DEFINITIONS[code]
    body = ErrorResponse(
        code=code.value,
        message=message or definition.message,
        path=request.url.path,
        request_id=getattr(request.state, "request_id", None),
        details=details,
        validation=validation,
    )
    return JSONResponse(
        status_code=status_code or definition.status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _validation_messages(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name (last element of ``loc``)."""
    messages: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = loc[-1].lower() if loc else "request"
        msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        messages.setdefault(field, []).append(msg)
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def _api_error_handler(request: Request, exc: APIError):
        return build_error_response(
            request, exc.code, exc.message, details=exc.details, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        return build_error_response(
            request, ErrorCode.VALIDATION_ERROR, validation=_validation_messages(exc)
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Framework details ("Not Found", "There was an error parsing the body")
        # are replaced by our wording; the status code is kept.
        code = _STATUS_TO_CODE.get(exc.status_code)
        if code is None:
            code = ErrorCode.INVALID_REQUEST if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR
        return build_error_response(
            request,
            code,
            headers=getattr(exc, "headers", None),
            status_code=exc.status_code,
        )

    # SlowAPIMiddleware calls this without awaiting it, so it must stay sync.
    @app.exception_handler(RateLimitExceeded)
    def _rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning("Rate limit exceeded path=%s limit=%s", request.url.path, exc.detail)
        return build_error_response(
            request, ErrorCode.TOO_MANY_REQUESTS, details={"limit": exc.detail}
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        # Let cancellation propagate; swallowing it breaks graceful shutdown
        if isinstance(exc, asyncio.CancelledError):
            raise exc
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return build_error_response(request, ErrorCode.INTERNAL_ERROR)
