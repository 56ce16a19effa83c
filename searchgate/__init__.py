"""searchgate: rate-limited search and debounced autocomplete over WebSocket."""

__version__ = "0.1.0"

__all__ = ["__version__"]
