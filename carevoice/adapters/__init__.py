"""Output adapters for downstream systems."""

from carevoice.adapters.base import Adapter, DictAdapter, CallbackAdapter, ChatPayloadAdapter

__all__ = [
    "Adapter",
    "DictAdapter",
    "CallbackAdapter",
    "ChatPayloadAdapter",
]
