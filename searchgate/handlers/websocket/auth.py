"""WebSocket authentication helpers."""

from __future__ import annotations

import hmac

from fastapi import WebSocket


def get_api_key(ws: WebSocket) -> str:
    # Browsers cannot set headers on a WebSocket handshake, so the query param comes first.
    key = (ws.query_params.get("api_key") or "").strip()
    if key:
        return key
    return (ws.headers.get("x-api-key") or "").strip()


def validate_api_key(api_key: str, expected: str) -> bool:
    if not expected:
        # No key configured: locked down.
        return False
    return hmac.compare_digest(api_key.encode("utf-8"), expected.encode("utf-8"))


async def authenticate_websocket(ws: WebSocket, *, expected_api_key: str) -> bool:
    return validate_api_key(get_api_key(ws), expected_api_key)


__all__ = ["authenticate_websocket", "get_api_key", "validate_api_key"]
