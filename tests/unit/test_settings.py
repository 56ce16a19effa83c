from __future__ import annotations

import pytest

from searchgate.runtime.settings import load_settings
from searchgate.runtime.dependencies import build_runtime_deps


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SEARCHGATE_API_KEY",
        "SEARCH_MAX_REQUESTS",
        "SEARCH_WINDOW_MS",
        "SEARCH_REFUND_ON_FAILURE",
        "SEARCH_MIN_QUERY_LENGTH",
        "AUTOCOMPLETE_DELAY_MS",
        "RATE_LIMIT_POLL_INTERVAL_S",
        "LOOKUP_LATENCY_MS",
        "MAX_CONCURRENT_CONNECTIONS",
        "WS_IDLE_TIMEOUT_S",
        "WS_WATCHDOG_TICK_S",
        "WS_MAX_CONNECTION_DURATION_S",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults() -> None:
    settings = load_settings()
    assert settings.auth.api_key == ""
    assert settings.limits.search_max_requests == 2
    assert settings.limits.search_window_ms == 15000
    assert settings.limits.search_refund_on_failure is False
    assert settings.limits.search_min_query_length == 3
    assert settings.limits.autocomplete_delay_ms == 250
    assert settings.limits.rate_limit_poll_interval_s == 1.0
    assert settings.lookup.latency_ms == 500
    assert settings.websocket.watchdog_tick_s == 5.0


def test_load_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCHGATE_API_KEY", " secret ")
    monkeypatch.setenv("SEARCH_MAX_REQUESTS", "5")
    monkeypatch.setenv("SEARCH_WINDOW_MS", "60000")
    monkeypatch.setenv("SEARCH_REFUND_ON_FAILURE", "yes")
    monkeypatch.setenv("AUTOCOMPLETE_DELAY_MS", "0")
    monkeypatch.setenv("LOOKUP_LATENCY_MS", "20")

    settings = load_settings()
    assert settings.auth.api_key == "secret"
    assert settings.limits.search_max_requests == 5
    assert settings.limits.search_window_ms == 60000
    assert settings.limits.search_refund_on_failure is True
    assert settings.limits.autocomplete_delay_ms == 0
    assert settings.lookup.latency_ms == 20


def test_load_settings_falls_back_on_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCH_MAX_REQUESTS", "0")
    monkeypatch.setenv("SEARCH_WINDOW_MS", "soon")
    monkeypatch.setenv("AUTOCOMPLETE_DELAY_MS", "-10")
    monkeypatch.setenv("RATE_LIMIT_POLL_INTERVAL_S", "-1")

    settings = load_settings()
    assert settings.limits.search_max_requests == 2
    assert settings.limits.search_window_ms == 15000
    assert settings.limits.autocomplete_delay_ms == 0
    assert settings.limits.rate_limit_poll_interval_s == 1.0


def test_build_runtime_deps_uses_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_CONCURRENT_CONNECTIONS", "3")
    deps = build_runtime_deps()
    assert deps.connections.max_connections == 3
    assert deps.connections.get_connection_count() == 0
