"""In-memory fixed-window rate limiter.

Each identifier gets its own window, opened by its first admitted request
and lasting ``window_seconds``. Once the window has expired the next request
starts a fresh one with a count of 1.

Notes:
- Per-process only: every worker or function instance keeps its own counts,
  so the limit is a soft, best-effort cap.
- A client can spend a full quota just before its window expires and another
  right after, i.e. up to twice the nominal rate over a short span.
- Thread-safe: the lookup and the write happen under one lock.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class RateRecord:
    count: int
    window_reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window counter keyed by client identifier.

    Expired records are replaced on the identifier's next request. When the
    number of tracked identifiers grows past ``sweep_threshold``, expired
    records are purged as part of a check. After each sweep the trigger moves
    to twice the number of surviving records, never below the threshold. A
    purged record was already expired, so purging never changes a decision.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
        sweep_threshold: int | None = 10_000,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum admitted requests per identifier per window.
            window_seconds: Window length in seconds.
            clock: Time source returning UNIX time in seconds.
            sweep_threshold: Record count that triggers a purge of expired
                records, or None to never purge.

        Raises:
            ValueError: If limit, window_seconds or sweep_threshold are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if sweep_threshold is not None and sweep_threshold < 1:
            raise ValueError("sweep_threshold must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._next_sweep_at = sweep_threshold
        self._sweep_count = 0
        self._lock = threading.RLock()
        self._records: dict[str, RateRecord] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get_record(self, identifier: str) -> RateRecord | None:
        """Return a copy of the stored record for ``identifier``, if any."""
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                return None
            return RateRecord(count=record.count, window_reset_at=record.window_reset_at)

    def check(self, identifier: str, now: float | None = None) -> RateLimitResult:
        """Admit or reject one request from ``identifier``.

        Any string, including the empty string, is a valid identifier.

        Args:
            identifier: Client key.
            now: UNIX time in seconds; the injected clock is used when omitted.

        Returns:
            RateLimitResult with the decision and the remaining quota.
        """
        if now is None:
            now = self._clock()

        with self._lock:
            if self._next_sweep_at is not None and len(self._records) > self._next_sweep_at:
                self._sweep_locked(now)

            record = self._records.get(identifier)

            if record is None or now > record.window_reset_at:
                record = RateRecord(count=1, window_reset_at=now + self._window_seconds)
                self._records[identifier] = record
                return self._allowed(record)

            if record.count >= self._limit:
                return self._blocked(record, now)

            record.count += 1
            return self._allowed(record)

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every record whose window has expired.

        Returns:
            Number of records removed.
        """
        if now is None:
            now = self._clock()
        with self._lock:
            return self._purge_expired_locked(now)

    @property
    def sweep_count(self) -> int:
        """Number of threshold-triggered sweeps run so far."""
        return self._sweep_count

    def _sweep_locked(self, now: float) -> None:
        # Trigger at twice the surviving live set.
        self._purge_expired_locked(now)
        self._sweep_count += 1
        self._next_sweep_at = max(self._sweep_threshold, 2 * len(self._records))

    def _purge_expired_locked(self, now: float) -> int:
        expired = [key for key, rec in self._records.items() if now > rec.window_reset_at]
        for key in expired:
            del self._records[key]
        return len(expired)

    def _allowed(self, record: RateRecord) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=self._limit,
            remaining=self._limit - record.count,
            reset_at=int(math.ceil(record.window_reset_at)),
        )

    def _blocked(self, record: RateRecord, now: float) -> RateLimitResult:
        retry_after = max(0, int(math.ceil(record.window_reset_at - now)))
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=int(math.ceil(record.window_reset_at)),
            retry_after_seconds=retry_after,
        )
