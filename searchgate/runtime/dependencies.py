"""Runtime dependency construction (query service + admission control)."""

from __future__ import annotations

import logging

from searchgate.state import RuntimeDeps
from searchgate.lookup import Directory
from searchgate.state.settings import AppSettings
from searchgate.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()
    if not settings.auth.api_key:
        logger.warning("SEARCHGATE_API_KEY is not set; all connections will be rejected")

    directory = Directory(latency_ms=settings.lookup.latency_ms)
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    logger.info(
        "search limit: %s per %sms, autocomplete delay: %sms",
        settings.limits.search_max_requests,
        settings.limits.search_window_ms,
        settings.limits.autocomplete_delay_ms,
    )
    return RuntimeDeps(
        connections=connections,
        directory=directory,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
