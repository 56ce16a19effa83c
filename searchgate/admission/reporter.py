"""Fixed-cadence sampling of a limiter's derived error state."""

from __future__ import annotations

import asyncio
import inspect
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from .limiter import RateLimiter
from .results import Idle, Limited, ErrorState

logger = logging.getLogger(__name__)

ChangeFn = Callable[[ErrorState], Any]


def describe(state: ErrorState) -> str | None:
    if isinstance(state, Limited):
        return f"Rate exceeded, please wait {state.remaining_seconds} seconds."
    return None


class ErrorStateReporter:
    """Poll ``limiter.error_state()`` and report changes.

    The limiter itself never runs a background loop; whoever owns the
    reporter decides when the ticker runs.
    """

    def __init__(
        self,
        limiter: RateLimiter[Any],
        *,
        interval_s: float = 1.0,
        on_change: ChangeFn | None = None,
    ) -> None:
        if float(interval_s) <= 0:
            raise ValueError("interval_s must be > 0")
        self._limiter = limiter
        self._interval_s = float(interval_s)
        self._on_change = on_change
        self._last: ErrorState = Idle()
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def last(self) -> ErrorState:
        return self._last

    def sample(self) -> ErrorState:
        return self._limiter.error_state()

    async def tick(self) -> ErrorState:
        state = self.sample()
        if state != self._last:
            self._last = state
            if self._on_change is not None:
                result = self._on_change(state)
                if inspect.isawaitable(result):
                    await result
        return state

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._poll_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _poll_loop(self) -> None:
        while not self._stop_event.is_set():
            await asyncio.sleep(self._interval_s)
            if self._stop_event.is_set():
                break
            try:
                await self.tick()
            except Exception:
                logger.debug("error state report failed", exc_info=True)


__all__ = ["ErrorStateReporter", "describe"]
