"""Single-snapshot cache of the last good movies payload."""

from __future__ import annotations

import json
import math
from typing import Any, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from cinefetch.core.storage import KeyValueStore
from cinefetch.types.error_types import FormatError

DEFAULT_CACHE_KEY = "movies-cache"


class CacheEntry(BaseModel):
    """A stored payload and the time it was stored (epoch seconds)."""

    payload: List[Any] = Field(default_factory=list)
    stored_at: float

    def age(self, now: float) -> float:
        """Seconds since the entry was stored."""
        return now - self.stored_at

    def is_stale(self, now: float, ttl: float) -> bool:
        """True once the entry is older than ttl."""
        return self.age(now) > ttl


class MovieCache:
    """
    Stores one movies snapshot under a fixed key.

    The stored value is JSON ``{"data": [...], "timestamp": <seconds>}``.
    Anything that does not decode to that shape is treated as a miss.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_CACHE_KEY):
        self.store = store
        self.key = key

    def read(self) -> Optional[CacheEntry]:
        """Return the cached entry, or None if missing or malformed."""
        raw = self.store.get(self.key)
        if raw is None:
            return None

        try:
            decoded = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring corrupt cache entry '{self.key}': {e}")
            return None

        if not isinstance(decoded, dict):
            logger.warning(f"Ignoring cache entry '{self.key}': not an object")
            return None

        data = decoded.get("data")
        timestamp = decoded.get("timestamp")
        if not isinstance(data, list):
            logger.warning(f"Ignoring cache entry '{self.key}': data is not an array")
            return None
        stored_at = self._parse_timestamp(timestamp)
        if stored_at is None:
            logger.warning(f"Ignoring cache entry '{self.key}': bad timestamp")
            return None

        return CacheEntry(payload=data, stored_at=stored_at)

    @staticmethod
    def _parse_timestamp(value: Any) -> Optional[float]:
        # json.loads accepts NaN and Infinity; neither can ever go stale
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            stored_at = float(value)
        except OverflowError:
            return None
        if not math.isfinite(stored_at):
            return None
        return stored_at

    def write(self, payload: List[Any], now: float) -> CacheEntry:
        """Replace the cached snapshot.

        Raises:
            FormatError: If payload is not a list
        """
        if not isinstance(payload, list):
            raise FormatError(f"refusing to cache {type(payload).__name__}, expected array")

        entry = CacheEntry(payload=payload, stored_at=now)
        body = json.dumps({"data": payload, "timestamp": now}).encode("utf-8")
        self.store.set(self.key, body)
        logger.debug(f"Cached {len(payload)} movies under '{self.key}'")
        return entry

    def clear(self) -> bool:
        """Drop the snapshot."""
        return self.store.delete(self.key)
