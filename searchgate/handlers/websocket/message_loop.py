"""WebSocket message loop and dispatch for the search endpoint (/ws)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any, Literal
from collections.abc import Callable, Awaitable

from fastapi import WebSocket, WebSocketDisconnect

from searchgate.state import EnvelopeState
from searchgate.config.websocket import (
    WS_ERROR_INVALID_MESSAGE,
    WS_ERROR_INVALID_PAYLOAD,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .session import SearchSession
from .lifecycle import WebSocketLifecycle
from .parser import get_query, parse_client_message
from .errors import send_error, safe_send_envelope

logger = logging.getLogger(__name__)

HandlerFn = Callable[[SearchSession, str, dict[str, Any]], Awaitable[None]]


async def _recv_text_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    try:
        message = await asyncio.wait_for(ws.receive_text(), timeout=lifecycle.watchdog_tick_s * 2)
        return message, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def _handle_control_message(
    ws: WebSocket,
    msg_type: str,
    *,
    session_id: str,
    request_id: str,
) -> Literal["none", "continue", "close"]:
    if msg_type == "ping":
        await safe_send_envelope(ws, msg_type="pong", session_id=session_id, request_id=request_id, payload={})
        return "continue"
    if msg_type == "pong":
        return "continue"
    if msg_type == "end":
        await safe_send_envelope(ws, msg_type="session_end", session_id=session_id, request_id=request_id, payload={})
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        return "close"
    return "none"


async def _parse_or_send_error(ws: WebSocket, raw: str, state: EnvelopeState) -> dict[str, Any] | None:
    try:
        return parse_client_message(raw)
    except ValueError as exc:
        await send_error(
            ws,
            session_id=state.session_id,
            request_id=state.request_id,
            error_code=WS_ERROR_INVALID_MESSAGE,
            message=str(exc),
            reason_code="invalid_message",
        )
        return None


async def _handle_input(session: SearchSession, request_id: str, payload: dict[str, Any]) -> None:
    session.on_input(get_query(payload), request_id)


async def _handle_search(session: SearchSession, request_id: str, payload: dict[str, Any]) -> None:
    await session.on_search(get_query(payload), request_id)


HANDLERS: dict[str, HandlerFn] = {
    "input": _handle_input,
    "search": _handle_search,
}


async def _dispatch(
    ws: WebSocket,
    session: SearchSession,
    msg_type: str,
    *,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> None:
    handler = HANDLERS.get(msg_type)
    if handler is None:
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            error_code=WS_ERROR_INVALID_MESSAGE,
            message=f"message type '{msg_type}' is not supported",
            reason_code="unknown_message_type",
        )
        return
    try:
        await handler(session, request_id, payload)
    except ValueError as exc:
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            error_code=WS_ERROR_INVALID_PAYLOAD,
            message=str(exc),
            reason_code="invalid_query",
        )


async def run_message_loop(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
    session: SearchSession,
    state: EnvelopeState,
) -> str | None:
    try:
        while True:
            raw, should_exit = await _recv_text_with_watchdog(ws, lifecycle)
            if should_exit:
                return state.session_id if state.session_id != "unknown" else None
            if raw is None:
                continue

            lifecycle.touch()

            msg = await _parse_or_send_error(ws, raw, state)
            if msg is None:
                continue

            msg_type = msg["type"]
            session_id = msg["session_id"]
            request_id = msg["request_id"]

            state.session_id = session_id
            state.request_id = request_id

            control = await _handle_control_message(ws, msg_type, session_id=session_id, request_id=request_id)
            if control == "close":
                return session_id
            if control == "continue":
                continue

            await _dispatch(
                ws,
                session,
                msg_type,
                session_id=session_id,
                request_id=request_id,
                payload=msg["payload"],
            )
    except WebSocketDisconnect:
        return state.session_id if state.session_id != "unknown" else None


__all__ = ["HANDLERS", "run_message_loop"]
