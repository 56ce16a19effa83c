"""Environment parsing for runtime settings.

Env names and defaults live in `searchgate/config/*`; this module resolves
them at call time into the structured dataclasses in `searchgate/state`.
"""

from __future__ import annotations

import os

from searchgate.config.secrets import ENV_SEARCHGATE_API_KEY
from searchgate.config.lookup import ENV_LOOKUP_LATENCY_MS, DEFAULT_LOOKUP_LATENCY_MS
from searchgate.state.settings import (
    AppSettings,
    AuthSettings,
    LimitsSettings,
    LookupSettings,
    WebSocketSettings,
)
from searchgate.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)
from searchgate.config.limits import (
    ENV_SEARCH_WINDOW_MS,
    ENV_SEARCH_MAX_REQUESTS,
    DEFAULT_SEARCH_WINDOW_MS,
    ENV_AUTOCOMPLETE_DELAY_MS,
    DEFAULT_SEARCH_MAX_REQUESTS,
    ENV_SEARCH_MIN_QUERY_LENGTH,
    DEFAULT_AUTOCOMPLETE_DELAY_MS,
    ENV_SEARCH_REFUND_ON_FAILURE,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_RATE_LIMIT_POLL_INTERVAL_S,
    DEFAULT_SEARCH_MIN_QUERY_LENGTH,
    DEFAULT_SEARCH_REFUND_ON_FAILURE,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_RATE_LIMIT_POLL_INTERVAL_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _positive_int_env(name: str, default: int) -> int:
    value = _int_env(name, default)
    return value if value > 0 else default


def _load_limits() -> LimitsSettings:
    poll_interval_s = _float_env(ENV_RATE_LIMIT_POLL_INTERVAL_S, DEFAULT_RATE_LIMIT_POLL_INTERVAL_S)
    if poll_interval_s <= 0:
        poll_interval_s = DEFAULT_RATE_LIMIT_POLL_INTERVAL_S

    return LimitsSettings(
        max_concurrent_connections=_positive_int_env(
            ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS
        ),
        search_max_requests=_positive_int_env(ENV_SEARCH_MAX_REQUESTS, DEFAULT_SEARCH_MAX_REQUESTS),
        search_window_ms=_positive_int_env(ENV_SEARCH_WINDOW_MS, DEFAULT_SEARCH_WINDOW_MS),
        search_refund_on_failure=_bool_env(ENV_SEARCH_REFUND_ON_FAILURE, DEFAULT_SEARCH_REFUND_ON_FAILURE),
        search_min_query_length=max(0, _int_env(ENV_SEARCH_MIN_QUERY_LENGTH, DEFAULT_SEARCH_MIN_QUERY_LENGTH)),
        autocomplete_delay_ms=max(0, _int_env(ENV_AUTOCOMPLETE_DELAY_MS, DEFAULT_AUTOCOMPLETE_DELAY_MS)),
        rate_limit_poll_interval_s=poll_interval_s,
    )


def _load_websocket() -> WebSocketSettings:
    watchdog_tick_s = _float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)
    if watchdog_tick_s <= 0:
        watchdog_tick_s = DEFAULT_WS_WATCHDOG_TICK_S

    return WebSocketSettings(
        idle_timeout_s=max(0.0, _float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S)),
        watchdog_tick_s=watchdog_tick_s,
        max_connection_duration_s=max(
            0.0, _float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S)
        ),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        auth=AuthSettings(api_key=_str_env(ENV_SEARCHGATE_API_KEY, "")),
        limits=_load_limits(),
        websocket=_load_websocket(),
        lookup=LookupSettings(
            latency_ms=max(0, _int_env(ENV_LOOKUP_LATENCY_MS, DEFAULT_LOOKUP_LATENCY_MS)),
        ),
    )


__all__ = ["load_settings"]
