"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Strategy:
- Fixed-window limit per client IP (10 requests per hour by default).
- The client IP comes from the X-Forwarded-For header set by the hosting
  proxy, then Client-IP, else the shared "unknown" bucket. These headers are
  not authenticated, so the limit guards against accidental abuse only.
- The limiter instance lives on ``app.state`` so each app (and each test)
  owns its own counters.
"""

from __future__ import annotations

import logging

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.core.config import AppSettings, settings
from app.core.errors import RateLimitAppError
from app.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_IDENTIFIER = "unknown"


def build_rate_limiter(app_settings: AppSettings | None = None) -> AbstractRateLimiter:
    """Create the limiter described by the application settings."""

    cfg = app_settings or settings.app
    return InMemoryFixedWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
        sweep_threshold=cfg.rate_limit_sweep_threshold,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return request.app.state.rate_limiter


def resolve_client_identifier(request: Request) -> str:
    """Pick the identifier used to partition rate-limit state.

    Args:
        request: FastAPI request.

    Returns:
        The first X-Forwarded-For hop, else the Client-IP header, else "unknown".
    """

    forwarded_for = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded_for.split(",")[0].strip()
    if first_hop:
        return first_hop

    client_ip = request.headers.get("client-ip", "").strip()
    if client_ip:
        return client_ip

    return UNKNOWN_IDENTIFIER


def _quota_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "Retry-After": str(result.retry_after_seconds or 0),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }


async def enforce_rate_limit(request: Request) -> RateLimitResult | None:
    """FastAPI dependency enforcing the per-client quota.

    Consumes one request from the caller's quota before the route body runs.

    Args:
        request: FastAPI request.

    Returns:
        The limiter decision, or None when rate limiting is disabled.

    Raises:
        RateLimitAppError: 429 when the caller's window is exhausted.
    """

    if not settings.app.rate_limit_enabled:
        return None

    limiter = get_rate_limiter(request)
    identifier = resolve_client_identifier(request)
    client_hash = hash_identifier(identifier)

    result = limiter.check(identifier)
    if result.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "client_hash": client_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return result

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": client_hash,
            "limit": result.limit,
            "retry_after_s": retry_after,
        },
    )

    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message="Rate limit exceeded. Please try again later.",
        details={"remaining": 0, "retry_after": retry_after},
        headers=_quota_headers(result) if settings.app.rate_limit_include_headers else None,
    )
