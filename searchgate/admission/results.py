"""Admission results and derived rate-limit error states (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Admitted(Generic[T]):
    value: T
    kind: Literal["admitted"] = "admitted"


@dataclass(frozen=True, slots=True)
class Rejected:
    kind: Literal["rejected"] = "rejected"


@dataclass(frozen=True, slots=True)
class Idle:
    kind: Literal["none"] = "none"


@dataclass(frozen=True, slots=True)
class Limited:
    remaining_seconds: int
    kind: Literal["limited"] = "limited"


AdmissionResult = Union[Admitted[T], Rejected]
ErrorState = Union[Idle, Limited]


__all__ = ["AdmissionResult", "Admitted", "ErrorState", "Idle", "Limited", "Rejected"]
