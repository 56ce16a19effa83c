"""In-memory people directory used as the default query service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from .records import LookupRecord

logger = logging.getLogger(__name__)

DEFAULT_RECORDS: tuple[LookupRecord, ...] = (
    LookupRecord(id=1, name="Alice", description="Software Engineer"),
    LookupRecord(id=2, name="Alina", description="Software Engineer"),
    LookupRecord(id=3, name="Alixa", description="Software Engineer"),
    LookupRecord(id=4, name="Bob", description="Data Scientist"),
    LookupRecord(id=5, name="Charlie", description="Product Manager"),
    LookupRecord(id=6, name="Charlito", description="Product Manager"),
    LookupRecord(id=7, name="Diana", description="UX Designer"),
)


class Directory:
    """Case-insensitive name lookups with a simulated service latency."""

    def __init__(
        self,
        records: Iterable[LookupRecord] = DEFAULT_RECORDS,
        *,
        latency_ms: int = 0,
    ) -> None:
        self._records = tuple(records)
        self._latency_s = max(0, int(latency_ms)) / 1000.0

    async def _simulate_latency(self) -> None:
        if self._latency_s > 0:
            await asyncio.sleep(self._latency_s)

    async def search(self, query: str) -> list[LookupRecord]:
        """Full search: names containing ``query``."""
        await self._simulate_latency()
        needle = query.lower()
        results = [r for r in self._records if needle in r.name.lower()]
        logger.debug("search %r -> %s results", query, len(results))
        return results

    async def autocomplete(self, query: str) -> list[LookupRecord]:
        """Suggestions: names starting with ``query``."""
        await self._simulate_latency()
        needle = query.lower()
        return [r for r in self._records if r.name.lower().startswith(needle)]


__all__ = ["DEFAULT_RECORDS", "Directory"]
