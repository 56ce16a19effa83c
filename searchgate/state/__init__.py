from .runtime import RuntimeDeps
from .settings import AppSettings
from .envelope import EnvelopeState

__all__ = ["AppSettings", "EnvelopeState", "RuntimeDeps"]
