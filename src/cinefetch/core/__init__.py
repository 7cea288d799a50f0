"""Core building blocks: clock, storage, cache and the fetch orchestrator.

The orchestrator lives in ``cinefetch.core.orchestrator`` and is imported from
there (it depends on ``cinefetch.resilience``, which depends on this package).
"""

from .clock import Clock, SystemClock
from .storage import KeyValueStore, InMemoryStore, FileStore
from .cache import CacheEntry, MovieCache, DEFAULT_CACHE_KEY

__all__ = [
    "Clock",
    "SystemClock",
    "KeyValueStore",
    "InMemoryStore",
    "FileStore",
    "CacheEntry",
    "MovieCache",
    "DEFAULT_CACHE_KEY",
]
