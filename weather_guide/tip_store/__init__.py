"""Tip board storage backends."""

from .base import TipStore
from .memory import InMemoryTipStore
from .redis import RedisTipStore

__all__ = [
    "TipStore",
    "InMemoryTipStore",
    "RedisTipStore",
]
