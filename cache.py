# cache.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

log = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    timestamp: float
    ttl_seconds: float

    def expired(self, now: float) -> bool:
        return (now - self.timestamp) >= self.ttl_seconds


class TTLCache:
    """
    Small process-scoped cache with a TTL recorded on every entry.

    Pass an instance into the client that needs it (NRELClient, GeminiClient);
    tests build a fresh one with a fake clock.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        if entry.expired(self._clock()):
            log.info("Cache expired for %s", key)
            del self._entries[key]
            return default
        return entry.value

    def set(self, key: Hashable, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock(), ttl_seconds=ttl)

    def get_or_set(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        entry = self._entries.get(key)
        if entry is not None and not entry.expired(self._clock()):
            log.info("Cache hit for %s", key)
            return entry.value
        value = factory()
        self.set(key, value)
        return value

    def __contains__(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.expired(self._clock())

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for e in self._entries.values() if not e.expired(now))

    def clear(self) -> None:
        self._entries.clear()
