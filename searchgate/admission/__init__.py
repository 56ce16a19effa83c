"""Admission control: sliding-window limiter, debounced dispatch, error polling."""

from .limiter import RateLimiter
from .debounce import DebounceState, DebouncedDispatcher
from .reporter import ErrorStateReporter, describe
from .results import Idle, Limited, Admitted, Rejected, ErrorState, AdmissionResult

__all__ = [
    "AdmissionResult",
    "Admitted",
    "DebounceState",
    "DebouncedDispatcher",
    "ErrorState",
    "ErrorStateReporter",
    "Idle",
    "Limited",
    "RateLimiter",
    "Rejected",
    "describe",
]
