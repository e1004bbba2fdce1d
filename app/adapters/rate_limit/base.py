"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the in-process store can later be swapped for a shared one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Decision for a single request.

    Attributes:
        allowed: Whether the request is admitted.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the identifier's window expires.
        retry_after_seconds: Suggested wait in seconds when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, identifier: str, now: float | None = None) -> RateLimitResult:
        """Decide whether to admit a request from ``identifier``.

        Args:
            identifier: Client key (e.g. IP address, or "unknown").
            now: UNIX time in seconds; implementations read their clock when omitted.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError
