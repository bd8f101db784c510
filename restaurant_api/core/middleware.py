"""HTTP middleware for request correlation and access logging.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from restaurant_api.core.config import settings
from restaurant_api.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


def _access_fields(request: Request, duration_ms: float) -> dict[str, object]:
    fields: dict[str, object] = {
        "method": request.method,
        "path": request.url.path,
        "duration_ms": round(duration_ms, 2),
    }
    quota = getattr(request.state, "rate_limit_headers", None)
    if quota:
        fields["rate_limit_remaining"] = int(quota["X-RateLimit-Remaining"])
    return fields


async def request_id_middleware(request: Request, call_next) -> Response:
    """Attach a correlation id and timing header, and log one access line.

    The incoming ``X-Request-ID`` header (name configurable through
    ``LOG_REQUEST_ID_HEADER``) is reused when present, otherwise a UUID4 is
    generated. The id lives in contextvars for the duration of the request so
    log records emitted by handlers and the store adapter carry it.

    Every request ends with a ``request.completed`` record (method, path,
    status, duration and, when the limiter admitted it, the remaining quota).
    Exceptions escaping the handler stack are logged as ``request.failed``
    and re-raised for the catch-all handler.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with ``X-Request-ID`` and
            ``X-Request-Duration-ms`` headers added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception as exc:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.error(
            "request.failed",
            extra={**_access_fields(request, duration_ms), "error_type": type(exc).__name__},
        )
        raise
    else:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "request.completed",
            extra={**_access_fields(request, duration_ms), "status_code": response.status_code},
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
