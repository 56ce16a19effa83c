"""Configuration module exports (env names and defaults only)."""

from .websocket import WS_ENDPOINT_PATH

__all__ = [
    "WS_ENDPOINT_PATH",
]
