"""Admission control and rate limit configuration (env names and defaults)."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100

# Full search: at most SEARCH_MAX_REQUESTS per SEARCH_WINDOW_MS, per session.
ENV_SEARCH_MAX_REQUESTS = "SEARCH_MAX_REQUESTS"
DEFAULT_SEARCH_MAX_REQUESTS = 2

ENV_SEARCH_WINDOW_MS = "SEARCH_WINDOW_MS"
DEFAULT_SEARCH_WINDOW_MS = 15000

# Failed lookups count toward the window unless refunds are enabled.
ENV_SEARCH_REFUND_ON_FAILURE = "SEARCH_REFUND_ON_FAILURE"
DEFAULT_SEARCH_REFUND_ON_FAILURE = False

ENV_SEARCH_MIN_QUERY_LENGTH = "SEARCH_MIN_QUERY_LENGTH"
DEFAULT_SEARCH_MIN_QUERY_LENGTH = 3

ENV_AUTOCOMPLETE_DELAY_MS = "AUTOCOMPLETE_DELAY_MS"
DEFAULT_AUTOCOMPLETE_DELAY_MS = 250

ENV_RATE_LIMIT_POLL_INTERVAL_S = "RATE_LIMIT_POLL_INTERVAL_S"
DEFAULT_RATE_LIMIT_POLL_INTERVAL_S = 1.0

__all__ = [
    "DEFAULT_AUTOCOMPLETE_DELAY_MS",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_RATE_LIMIT_POLL_INTERVAL_S",
    "DEFAULT_SEARCH_MAX_REQUESTS",
    "DEFAULT_SEARCH_MIN_QUERY_LENGTH",
    "DEFAULT_SEARCH_REFUND_ON_FAILURE",
    "DEFAULT_SEARCH_WINDOW_MS",
    "ENV_AUTOCOMPLETE_DELAY_MS",
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_RATE_LIMIT_POLL_INTERVAL_S",
    "ENV_SEARCH_MAX_REQUESTS",
    "ENV_SEARCH_MIN_QUERY_LENGTH",
    "ENV_SEARCH_REFUND_ON_FAILURE",
    "ENV_SEARCH_WINDOW_MS",
]
