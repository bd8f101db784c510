"""Global exception handlers for consistent error responses.

Every failure leaves the service as ``{"error": "<message>"}``:
- AppError subclasses → status from ``status_for_error`` (400, 404, 429, 500)
- Malformed request bodies → 400 with the validation message
- Unexpected Exception → generic 500 (safety net, nothing leaked)
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from restaurant_api.core.errors import (
    INTERNAL_ERROR_MESSAGE,
    VALIDATION_MESSAGE,
    AppError,
    NotFoundAppError,
    RateLimitAppError,
    StoreAppError,
)
from restaurant_api.core.logging import get_request_id

logger = logging.getLogger(__name__)


def status_for_error(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, StoreAppError):
        return 500
    return 400


def error_response(
    request: Request,
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the error body, keeping quota headers recorded by the rate limiter."""
    merged = dict(getattr(request.state, "rate_limit_headers", None) or {})
    merged.update(headers or {})
    return JSONResponse(status_code=status_code, content={"error": message}, headers=merged or None)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    Store failures carry a fixed message; the underlying cause was already
    logged by the store adapter and is never echoed back.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code and ``{"error": message}``.
    """
    status_code = status_for_error(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    message = INTERNAL_ERROR_MESSAGE if status_code >= 500 else exc.message
    return error_response(request, status_code, message, exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Translate framework-level body errors (e.g. malformed JSON) to a 400."""
    logger.warning(
        "request_validation_failed",
        extra={
            "error_count": len(exc.errors()),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )
    return error_response(request, 400, VALIDATION_MESSAGE)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the exception type and message server-side; the client only ever
    receives the generic message.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with status 500 and the generic message.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return error_response(request, 500, INTERNAL_ERROR_MESSAGE)


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance.

    Example:
        >>> from fastapi import FastAPI
        >>> from restaurant_api.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
