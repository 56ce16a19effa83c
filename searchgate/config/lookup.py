"""Query service configuration (env names and defaults)."""

from __future__ import annotations

# Simulated latency of the in-memory directory, applied to every lookup.
ENV_LOOKUP_LATENCY_MS = "LOOKUP_LATENCY_MS"
DEFAULT_LOOKUP_LATENCY_MS = 500

__all__ = ["DEFAULT_LOOKUP_LATENCY_MS", "ENV_LOOKUP_LATENCY_MS"]
