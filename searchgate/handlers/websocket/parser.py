"""Client message parsing/validation for the JSON envelope."""

from __future__ import annotations

from typing import Any

import orjson

from searchgate.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD, WS_KEY_REQUEST_ID, WS_KEY_SESSION_ID


def _require_text(msg: dict[str, Any], key: str) -> str:
    value = msg.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"message missing non-empty '{key}'")
    return value.strip()


def parse_client_message(raw: str) -> dict[str, Any]:
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    payload = msg.get(WS_KEY_PAYLOAD, {})
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValueError("message 'payload' must be an object")

    return {
        WS_KEY_TYPE: _require_text(msg, WS_KEY_TYPE),
        WS_KEY_SESSION_ID: _require_text(msg, WS_KEY_SESSION_ID),
        WS_KEY_REQUEST_ID: _require_text(msg, WS_KEY_REQUEST_ID),
        WS_KEY_PAYLOAD: payload,
    }


def get_query(payload: dict[str, Any]) -> str:
    """Return ``payload.query``; a missing query is the empty string."""
    query = payload.get("query", "")
    if query is None:
        return ""
    if not isinstance(query, str):
        raise ValueError("payload.query must be a string")
    return query


__all__ = ["get_query", "parse_client_message"]
