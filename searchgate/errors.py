"""Shared error types for the searchgate server."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InputTooShortError(Exception):
    """Raised when a search query is shorter than the configured minimum."""

    min_length: int
    actual_length: int

    def __str__(self) -> str:
        return f"Query must be at least {self.min_length} characters long."


__all__ = ["InputTooShortError"]
