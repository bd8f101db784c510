"""Application-level exception types.

Services and adapters raise these domain errors instead of building HTTP
responses; ``exception_handlers`` translates each type into a status code and
a ``{"error": message}`` body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict

VALIDATION_MESSAGE = "name, cuisine, and numeric rating are required"
NOT_FOUND_MESSAGE = "Restaurant not found"
INTERNAL_ERROR_MESSAGE = "An internal server error occurred"
RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


class ErrorDetails(TypedDict, total=False):
    """Structured error context kept for logs; never serialized to clients."""

    field: str
    restaurant_id: str
    operation: str
    error_type: str
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message returned to the caller.
        details: Optional structured details for debugging/observability.
        headers: Optional headers to attach to the error response.
    """

    code: str
    message: str
    details: ErrorDetails | None = None
    headers: dict[str, str] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input fails validation."""


class NotFoundAppError(AppError):
    """Raised when no restaurant matches the requested id."""


class StoreAppError(AppError):
    """Raised when querying the relational store fails."""


class RateLimitAppError(AppError):
    """Raised when a client exhausts its request quota."""
