"""Thread-safe in-memory caches for provider lookups."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Generic, Optional, TypeVar

from cachetools import Cache, LRUCache, TTLCache

from ..models.domain import CacheEntry

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ResolutionCache(Generic[T]):
    """Keyed cache of resolved provider results guarded by a single lock.

    With ``ttl_seconds=None`` entries live for the process lifetime and only
    the LRU size cap evicts them; otherwise entries also expire after the TTL.
    """

    def __init__(
        self,
        name: str,
        max_entries: int = 10_000,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._store: Cache
        if ttl_seconds is None:
            self._store = LRUCache(maxsize=max_entries)
        else:
            self._store = TTLCache(maxsize=max_entries, ttl=ttl_seconds, timer=clock)

    def get(self, key: str) -> Optional[T]:
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry[T]]:
        with self._lock:
            entry = self._store.get(key)
        if entry is not None:
            logger.debug(f"{self.name} cache hit for '{key}'")
        return entry

    def put(self, key: str, value: T) -> CacheEntry[T]:
        entry = CacheEntry(key=key, value=value, inserted_at=self._clock())
        with self._lock:
            self._store[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
