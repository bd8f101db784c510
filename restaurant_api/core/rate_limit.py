"""Rate limiting dependency applied to every route.

The dependency is registered application-wide in ``create_app`` so it runs
before any handler. Requests are keyed by client IP; the budget lives behind
``AbstractRateLimiter`` so the in-memory backend can be swapped out.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request, Response

from restaurant_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from restaurant_api.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from restaurant_api.core.config import settings
from restaurant_api.core.errors import RATE_LIMIT_MESSAGE, RateLimitAppError

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemorySlidingWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )
        _limiter_config = config

    return _limiter


def client_identity(request: Request) -> str:
    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the limiter key so client addresses stay out of the logs."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }
    if result.retry_after_seconds is not None:
        headers["Retry-After"] = str(result.retry_after_seconds)
    return headers


async def enforce_rate_limit(request: Request, response: Response) -> None:
    """FastAPI dependency enforcing the per-client request quota.

    Consumes one unit from the caller's budget. Admitted requests get the
    quota headers on their response; exhausted callers get a
    ``RateLimitAppError`` (translated to 429) and the handler never runs.

    Args:
        request: FastAPI request.
        response: Sub-response whose headers are merged into the final response.

    Raises:
        RateLimitAppError: When the quota for the current window is exhausted.
    """

    if not settings.app.rate_limit_enabled:
        return

    limiter = get_rate_limiter()
    key = client_identity(request)
    result = limiter.consume(key)
    headers = rate_limit_headers(result) if settings.app.rate_limit_include_headers else {}

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_limiter_key(key),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        response.headers.update(headers)
        # Error handlers build fresh responses; they pick the quota up from here
        request.state.rate_limit_headers = headers
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "limit": result.limit,
            "remaining": result.remaining,
            "window_s": settings.app.rate_limit_window_seconds,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message=RATE_LIMIT_MESSAGE,
        details={
            "limit": result.limit,
            "remaining": result.remaining,
            "reset_at": result.reset_at,
            "retry_after": result.retry_after_seconds or 0,
        },
        headers=headers or None,
    )
