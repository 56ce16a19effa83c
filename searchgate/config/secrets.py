"""Secrets and authentication configuration."""

from __future__ import annotations

ENV_SEARCHGATE_API_KEY = "SEARCHGATE_API_KEY"

__all__ = ["ENV_SEARCHGATE_API_KEY"]
