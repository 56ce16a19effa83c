"""Directory lookup records (dataclasses only)."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass, asdict
from collections.abc import Callable, Awaitable


@dataclass(frozen=True, slots=True)
class LookupRecord:
    id: int
    name: str
    description: str

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


QueryFn = Callable[[str], Awaitable[list[LookupRecord]]]


__all__ = ["LookupRecord", "QueryFn"]
