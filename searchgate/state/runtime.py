"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from searchgate.lookup import Directory
    from searchgate.state.settings import AppSettings
    from searchgate.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    directory: Directory
    settings: AppSettings

    async def shutdown(self) -> None:
        active = self.connections.get_connection_count()
        if active:
            logger.info("runtime shutdown with %s active connections", active)


__all__ = ["RuntimeDeps"]
