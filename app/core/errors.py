"""Application-level exception types.

Domain errors raised by services, adapters and dependencies. The exception
handlers translate each class into an HTTP status and a single JSON error
envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    reason: str
    max_value: int
    actual_value: int
    http_status: int
    remaining: int
    retry_after: int
    model: str
    provider: str
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
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class LLMAppError(AppError):
    """Raised when the upstream chat provider fails."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client has used up its request quota for the window.

    Attributes:
        headers: Response headers describing the quota (Retry-After, X-RateLimit-*).
    """

    headers: dict[str, str] | None = None
