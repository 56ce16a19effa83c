"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    search_max_requests: int
    search_window_ms: int
    search_refund_on_failure: bool
    search_min_query_length: int
    autocomplete_delay_ms: int
    rate_limit_poll_interval_s: float


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class LookupSettings:
    latency_ms: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    limits: LimitsSettings
    websocket: WebSocketSettings
    lookup: LookupSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "LimitsSettings",
    "LookupSettings",
    "WebSocketSettings",
]
