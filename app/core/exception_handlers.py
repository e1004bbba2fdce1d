"""Global exception handlers for consistent error responses.

Every error leaves the API in the same envelope::

    {"error": {"code": ..., "message": ..., "request_id": ..., "details": ...}}

Status mapping:
- ValidationAppError, malformed request bodies -> 400
- RateLimitAppError -> 429
- LLMAppError -> 500
- anything else -> generic 500 (safety net, nothing leaked)
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import AppError, LLMAppError, RateLimitAppError
from app.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, LLMAppError):
        return 500
    return 400


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content={"error": content}, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Translate a domain error into its HTTP status and JSON envelope.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code; quota errors also carry
        their rate-limit headers.
    """
    status_code = _status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
        },
    )

    headers = exc.headers if isinstance(exc, RateLimitAppError) else None
    return _error_response(
        status_code,
        exc.code,
        exc.message,
        details=dict(exc.details) if exc.details else None,
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject bodies that are not JSON or lack a usable ``message`` string."""
    fields = sorted({".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()})
    logger.info(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "fields": fields,
        },
    )
    return _error_response(
        400,
        "invalid_message_format",
        "Invalid message format",
        details={"context": {"fields": fields}},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure for debugging while returning a generic message, so
    stack traces and upstream internals never reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return _error_response(
        500,
        "internal_server_error",
        "An unexpected error occurred. Please try again later.",
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with a FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
