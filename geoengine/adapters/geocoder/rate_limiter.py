"""Minimum-interval request pacing shared by every geocoder call."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RateLimiterState:
    min_interval_ms: int
    last_request_at: float | None = None  # time.monotonic() seconds
    last_request_wall: float | None = None  # time.time(), for reporting only
    request_count: int = 0


class RateLimiter:
    """Serialises outgoing requests so they start at least `min_interval_ms` apart.

    Callers wait rather than fail. The lock makes the read-wait-write of
    `last_request_at` atomic across concurrent tasks; waiters are admitted
    in the order they reached the lock (best-effort FIFO, not a scheduling
    guarantee). If a caller is cancelled during its wait, `last_request_at`
    still moves to the moment that wait began, so the slot is not handed back.
    """

    def __init__(self, min_interval_ms: int):
        if min_interval_ms < 0:
            raise ValueError("min_interval_ms must be non-negative")
        self._state = RateLimiterState(min_interval_ms=min_interval_ms)
        self._lock = asyncio.Lock()

    @property
    def state(self) -> RateLimiterState:
        return self._state

    @property
    def min_interval(self) -> float:
        return self._state.min_interval_ms / 1000.0

    async def acquire(self) -> int:
        """Wait for the next free slot and claim it. Returns the request number."""
        async with self._lock:
            started = time.monotonic()
            last = self._state.last_request_at
            if last is not None:
                wait = self.min_interval - (started - last)
                if wait > 0:
                    logger.debug("Rate limiting: waiting %.0fms before next request", wait * 1000)
                    try:
                        await asyncio.sleep(wait)
                    except asyncio.CancelledError:
                        self._state.last_request_at = started
                        self._state.last_request_wall = time.time()
                        raise

            self._state.last_request_at = time.monotonic()
            self._state.last_request_wall = time.time()
            self._state.request_count += 1
            logger.debug("Geocoder request #%d", self._state.request_count)
            return self._state.request_count
