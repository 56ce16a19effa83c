"""Per-connection search session: rate-limited search and debounced suggestions."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from searchgate.state import EnvelopeState
from searchgate.errors import InputTooShortError
from searchgate.lookup import Directory, LookupRecord
from searchgate.state.settings import LimitsSettings
from searchgate.admission import (
    Limited,
    Rejected,
    ErrorState,
    RateLimiter,
    DebouncedDispatcher,
    ErrorStateReporter,
    describe,
)
from searchgate.config.websocket import (
    WS_ERROR_RATE_LIMITED,
    WS_SERVER_REQUEST_ID,
    WS_ERROR_LOOKUP_FAILED,
    WS_ERROR_INPUT_TOO_SHORT,
)

from .errors import send_error, safe_send_envelope

logger = logging.getLogger(__name__)


def check_query_length(query: str, min_length: int) -> None:
    if len(query) < min_length:
        raise InputTooShortError(min_length=min_length, actual_length=len(query))


def records_payload(records: list[LookupRecord]) -> list[dict[str, Any]]:
    return [record.to_payload() for record in records]


def error_state_payload(state: ErrorState) -> dict[str, Any]:
    return {
        "state": state.kind,
        "remaining_seconds": state.remaining_seconds if isinstance(state, Limited) else 0,
        "message": describe(state),
    }


class SearchSession:
    """Wire one client's ``input`` and ``search`` messages to the directory.

    Searches go through a per-session sliding-window limiter and run as
    background tasks so typing keeps flowing while a search is in flight.
    Suggestions go through a debounced dispatcher.
    """

    def __init__(
        self,
        ws: WebSocket,
        state: EnvelopeState,
        *,
        directory: Directory,
        limits: LimitsSettings,
    ) -> None:
        self._ws = ws
        self._state = state
        self._min_query_length = limits.search_min_query_length
        self._limiter: RateLimiter[list[LookupRecord]] = RateLimiter(
            limits.search_max_requests,
            limits.search_window_ms,
            directory.search,
            refund_on_failure=limits.search_refund_on_failure,
        )
        self._dispatcher: DebouncedDispatcher[list[LookupRecord]] = DebouncedDispatcher(
            limits.autocomplete_delay_ms,
            directory.autocomplete,
            [],
            on_publish=self._send_suggestions,
            on_error=self._send_suggestion_error,
        )
        self._reporter = ErrorStateReporter(
            self._limiter,
            interval_s=limits.rate_limit_poll_interval_s,
            on_change=self._send_error_state,
        )
        self._input_query = ""
        self._input_request_id = WS_SERVER_REQUEST_ID
        self._searches: set[asyncio.Task] = set()

    @property
    def limiter(self) -> RateLimiter[list[LookupRecord]]:
        return self._limiter

    @property
    def dispatcher(self) -> DebouncedDispatcher[list[LookupRecord]]:
        return self._dispatcher

    def is_busy(self) -> bool:
        return bool(self._searches)

    def start(self) -> None:
        self._reporter.start()

    async def aclose(self) -> None:
        await self._reporter.stop()
        await self._dispatcher.aclose()
        if self._searches:
            # Admitted searches are never cancelled; let them finish.
            await asyncio.gather(*self._searches, return_exceptions=True)

    async def wait_searches(self) -> None:
        while self._searches:
            await asyncio.gather(*list(self._searches), return_exceptions=True)

    def on_input(self, query: str, request_id: str) -> None:
        self._input_query = query
        self._input_request_id = request_id
        self._dispatcher.on_input(query)

    async def on_search(self, query: str, request_id: str) -> None:
        try:
            check_query_length(query, self._min_query_length)
        except InputTooShortError as exc:
            await send_error(
                self._ws,
                session_id=self._state.session_id,
                request_id=request_id,
                error_code=WS_ERROR_INPUT_TOO_SHORT,
                message=str(exc),
                reason_code="input_too_short",
                details={"min_length": exc.min_length, "length": exc.actual_length},
            )
            return

        task = asyncio.create_task(self._run_search(query, request_id))
        self._searches.add(task)
        task.add_done_callback(self._searches.discard)

    async def _run_search(self, query: str, request_id: str) -> None:
        try:
            result = await self._limiter.invoke(query)
        except Exception as exc:
            logger.warning("search lookup failed session_id=%s", self._state.session_id, exc_info=True)
            await send_error(
                self._ws,
                session_id=self._state.session_id,
                request_id=request_id,
                error_code=WS_ERROR_LOOKUP_FAILED,
                message=f"search failed: {exc}",
                reason_code="lookup_failed",
            )
            return

        if isinstance(result, Rejected):
            await self._send_rejection(request_id)
            return

        await safe_send_envelope(
            self._ws,
            msg_type="search_results",
            session_id=self._state.session_id,
            request_id=request_id,
            payload={
                "query": query,
                "message": f'Search result for "{query}"',
                "results": records_payload(result.value),
            },
        )

    async def _send_rejection(self, request_id: str) -> None:
        state = self._limiter.error_state()
        retry_in = state.remaining_seconds if isinstance(state, Limited) else 1
        await send_error(
            self._ws,
            session_id=self._state.session_id,
            request_id=request_id,
            error_code=WS_ERROR_RATE_LIMITED,
            message=describe(Limited(remaining_seconds=retry_in)) or "",
            reason_code="search_rate_limited",
            details={
                "retry_in": retry_in,
                "limit": self._limiter.max_requests,
                "window_ms": self._limiter.window_ms,
            },
        )
        await self._reporter.tick()

    async def _send_suggestions(self, results: list[LookupRecord]) -> None:
        await safe_send_envelope(
            self._ws,
            msg_type="suggestions",
            session_id=self._state.session_id,
            request_id=self._input_request_id,
            payload={"query": self._input_query, "results": records_payload(results)},
        )

    async def _send_suggestion_error(self, exc: Exception) -> None:
        logger.warning("autocomplete lookup failed session_id=%s: %s", self._state.session_id, exc)
        await send_error(
            self._ws,
            session_id=self._state.session_id,
            request_id=self._input_request_id,
            error_code=WS_ERROR_LOOKUP_FAILED,
            message=f"autocomplete failed: {exc}",
            reason_code="autocomplete_failed",
        )

    async def _send_error_state(self, state: ErrorState) -> None:
        await safe_send_envelope(
            self._ws,
            msg_type="rate_limit_status",
            session_id=self._state.session_id,
            request_id=WS_SERVER_REQUEST_ID,
            payload=error_state_payload(state),
        )


__all__ = ["SearchSession", "check_query_length", "error_state_payload", "records_payload"]
