"""Application-level exception types.

Domain errors raised by the normalizer, rate limiter glue and store, so the
HTTP layer can map each class to one status code and one response shape.
Duplicate signups are not errors; see DuplicateDetected in the store adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for server-side logs."""

    field: str
    declared_type: str
    operation: str
    error_type: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when the submitted contact or type is missing or invalid."""


class RateLimitAppError(AppError):
    """Raised when a client exceeds its signup budget for the window."""


class StoreAppError(AppError):
    """Raised when the datastore fails for a reason other than a duplicate."""
