"""Logging initialization."""

from __future__ import annotations

import os
import logging

from searchgate.config.logging import LOG_FORMAT, ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL


def configure_logging() -> None:
    level = (os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # Access logs duplicate the session open/close lines.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


__all__ = ["configure_logging"]
