"""In-memory cache for query results keyed by query parameters."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    fetched_at: float
    last_used: float


class QueryCache:
    """Serves fresh results from memory and refetches stale ones.

    Calls for the same key are serialized, so concurrent callers share a
    single request. When a refetch fails the previous data stays cached.
    Entries nobody has asked for within ``gc_time`` seconds are dropped.
    """

    DEFAULT_GC_SECONDS = 5 * 60

    def __init__(self, clock: Callable[[], float] = time.monotonic, gc_time: float = DEFAULT_GC_SECONDS):
        self.clock = clock
        self.gc_time = gc_time
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _is_fresh(self, entry: CacheEntry, stale_time: float) -> bool:
        return self.clock() - entry.fetched_at < stale_time

    def collect_garbage(self, keep: Optional[Hashable] = None) -> int:
        """
        Drop entries unused for longer than ``gc_time``.

        Args:
            keep: Key that is never dropped (the one being fetched)

        Returns:
            Number of entries dropped
        """
        now = self.clock()
        with self._locks_guard:
            expired = [
                key for key, entry in self._entries.items()
                if key != keep and now - entry.last_used >= self.gc_time
            ]
            for key in expired:
                self._entries.pop(key, None)
                lock = self._locks.get(key)
                if lock is not None and not lock.locked():
                    del self._locks[key]

        if expired:
            logger.debug(f"Dropped {len(expired)} unused cache entries")
        return len(expired)

    def fetch(self, key: Hashable, fn: Callable[[], Any], stale_time: float) -> Any:
        """
        Return cached data for ``key``, calling ``fn`` if it is missing or stale.

        Args:
            key: Hashable query key
            fn: Zero-argument function producing the data
            stale_time: Seconds after which an entry is refetched

        Raises:
            Whatever ``fn`` raises; the stale entry (if any) is left in place
        """
        self.collect_garbage(keep=key)

        with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is not None:
                entry.last_used = self.clock()
                if self._is_fresh(entry, stale_time):
                    logger.debug(f"Cache hit for {key!r}")
                    return entry.data

            logger.debug(f"Cache {'stale' if entry else 'miss'} for {key!r}, fetching")
            data = fn()
            now = self.clock()
            self._entries[key] = CacheEntry(data=data, fetched_at=now, last_used=now)
            return data

    def get_stale(self, key: Hashable) -> Optional[Any]:
        """Last successfully fetched data for ``key`` regardless of age."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def invalidate(self, key: Optional[Hashable] = None):
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
