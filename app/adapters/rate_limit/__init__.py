"""Rate limiting adapters.

The chat endpoint starts with an in-process limiter; a shared store (e.g.
Redis) can later implement the same interface without touching the API layer.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter, RateRecord

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
    "RateRecord",
]
