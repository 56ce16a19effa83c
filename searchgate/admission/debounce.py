"""Debounced dispatch of the cheap autocomplete lookup."""

from __future__ import annotations

import asyncio
import inspect
import logging
import contextlib
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from collections.abc import Callable, Awaitable

logger = logging.getLogger(__name__)

R = TypeVar("R")

PublishFn = Callable[[Any], Any]
ErrorFn = Callable[[Exception], Any]


@dataclass(slots=True)
class DebounceState:
    pending_timer: asyncio.Task | None = None
    last_delay: int = 0


async def _maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value


class DebouncedDispatcher(Generic[R]):
    """Run ``lookup`` once input has been quiet for ``delay_ms``.

    Every ``on_input`` cancels the trigger scheduled by the previous one, both
    while it is still sleeping and while its lookup is in flight, so only the
    latest query can publish. An empty query publishes ``baseline`` instead of
    calling the lookup, after the same delay.
    """

    def __init__(
        self,
        delay_ms: int,
        lookup: Callable[[str], Awaitable[R]],
        baseline: R,
        *,
        on_publish: PublishFn | None = None,
        on_error: ErrorFn | None = None,
    ) -> None:
        if int(delay_ms) < 0:
            raise ValueError("delay_ms must be >= 0")
        self._delay_ms = int(delay_ms)
        self._lookup = lookup
        self._baseline = baseline
        self._results: R = baseline
        self._on_publish = on_publish
        self._on_error = on_error
        self._state = DebounceState(last_delay=self._delay_ms)
        self._latest: asyncio.Task | None = None
        self._closed = False

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def state(self) -> DebounceState:
        return self._state

    def results(self) -> R:
        return self._results

    def on_input(self, query: str) -> None:
        if self._closed:
            raise RuntimeError("dispatcher is closed")
        self._cancel_pending()
        self._state.last_delay = self._delay_ms
        task = asyncio.get_running_loop().create_task(self._fire(query))
        self._state.pending_timer = task
        self._latest = task

    def _cancel_pending(self) -> None:
        pending = self._state.pending_timer
        self._state.pending_timer = None
        if pending is not None and not pending.done():
            pending.cancel()

    async def _fire(self, query: str) -> None:
        await asyncio.sleep(self._delay_ms / 1000.0)

        if query:
            try:
                results = await self._lookup(query)
            except Exception as exc:
                self._release(asyncio.current_task())
                await self._report(query, exc)
                return
        else:
            results = self._baseline

        # Past this point the trigger is no longer cancellable by new input.
        self._release(asyncio.current_task())
        self._results = results
        if self._on_publish is not None:
            await _maybe_await(self._on_publish(results))

    def _release(self, task: asyncio.Task | None) -> None:
        if self._state.pending_timer is task:
            self._state.pending_timer = None

    async def _report(self, query: str, exc: Exception) -> None:
        if self._on_error is None:
            logger.warning("autocomplete lookup failed for %r", query, exc_info=exc)
            return
        await _maybe_await(self._on_error(exc))

    async def drain(self) -> None:
        """Wait for the most recent trigger to settle."""
        task = self._latest
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def aclose(self) -> None:
        self._closed = True
        self._cancel_pending()
        task = self._latest
        self._latest = None
        if task is None:
            return
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def __aenter__(self) -> DebouncedDispatcher[R]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["DebounceState", "DebouncedDispatcher"]
