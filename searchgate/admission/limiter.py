"""Sliding-window admission control for the expensive search lookup."""

from __future__ import annotations

import math
import time
import logging
import collections
from typing import Any, Generic, TypeVar
from collections.abc import Callable, Awaitable

from .results import Idle, Limited, Admitted, Rejected, ErrorState, AdmissionResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

TimeFn = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RateLimiter(Generic[T]):
    """Admit at most ``max_requests`` lookups per trailing ``window_ms``.

    Timestamps are pruned only by ``invoke``. The prune, the length check and
    the append all happen before the wrapped lookup is awaited, so overlapping
    calls each see the window as it stood when they started.
    """

    def __init__(
        self,
        max_requests: int,
        window_ms: int,
        lookup: Callable[..., Awaitable[T]],
        *,
        now_fn: TimeFn | None = None,
        refund_on_failure: bool = False,
    ) -> None:
        if int(max_requests) <= 0:
            raise ValueError("max_requests must be a positive integer")
        if int(window_ms) <= 0:
            raise ValueError("window_ms must be a positive integer")
        self._max_requests = int(max_requests)
        self._window_ms = int(window_ms)
        self._lookup = lookup
        self._now = now_fn or monotonic_ms
        self._refund_on_failure = bool(refund_on_failure)
        self._timestamps: collections.deque[float] = collections.deque()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def in_window(self) -> int:
        """Number of retained timestamps (not pruned)."""
        return len(self._timestamps)

    def _prune(self, now: float) -> None:
        timestamps = self._timestamps
        while timestamps and now - timestamps[0] >= self._window_ms:
            timestamps.popleft()

    def _try_admit(self) -> float | None:
        now = self._now()
        self._prune(now)
        if len(self._timestamps) >= self._max_requests:
            return None
        self._timestamps.append(now)
        return now

    async def invoke(self, *args: Any, **kwargs: Any) -> AdmissionResult[T]:
        stamp = self._try_admit()
        if stamp is None:
            logger.debug("admission rejected: %s calls within %sms", len(self._timestamps), self._window_ms)
            return Rejected()

        logger.debug("admission granted (%s/%s in window)", len(self._timestamps), self._max_requests)
        try:
            value = await self._lookup(*args, **kwargs)
        except Exception:
            if self._refund_on_failure:
                self._refund(stamp)
            raise
        return Admitted(value)

    def _refund(self, stamp: float) -> None:
        try:
            self._timestamps.remove(stamp)
        except ValueError:
            # Already pruned by a later admission.
            return
        logger.debug("refunded admission after failed lookup")

    def error_state(self) -> ErrorState:
        """Derive the current error state without pruning."""
        if not self._timestamps:
            return Idle()

        elapsed = self._now() - self._timestamps[0]
        if elapsed >= self._window_ms:
            return Idle()

        if len(self._timestamps) >= self._max_requests:
            remaining = math.ceil((self._window_ms - elapsed) / 1000)
            return Limited(remaining_seconds=max(1, int(remaining)))
        return Idle()


__all__ = ["RateLimiter", "TimeFn", "monotonic_ms"]
