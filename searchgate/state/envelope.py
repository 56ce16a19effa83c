"""Per-connection envelope identifiers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class EnvelopeState:
    session_id: str = "unknown"
    request_id: str = "unknown"


__all__ = ["EnvelopeState"]
