"""
Strata Cache - Memory Store

In-process entry store backed by ``cachetools.TLRUCache``.
Thread-safe and suitable for single-process deployments.

The store only knows about time: each entry's time-to-use is its absolute
expiry (``math.inf`` for file-dependent entries). File invalidation and
input validation live in the provider.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from cachetools import TLRUCache

from ..retention import CacheEntry

logger = logging.getLogger(__name__)

EvictionHook = Callable[[CacheEntry], None]


def _entry_ttu(key: str, entry: CacheEntry, now: float) -> float:
    return entry.expires_at


class _EvictingTLRUCache(TLRUCache):
    """TLRUCache that reports size-driven evictions."""

    def __init__(self, maxsize: int, timer: Callable[[], float], on_evict: EvictionHook):
        super().__init__(maxsize=maxsize, ttu=_entry_ttu, timer=timer)
        self._on_evict = on_evict

    def popitem(self) -> tuple[str, CacheEntry]:
        key, entry = super().popitem()
        self._on_evict(entry)
        return key, entry


class MemoryStore:
    """
    Thread-safe key -> CacheEntry container.

    Features:
    - LRU eviction when max_size is reached
    - Per-entry absolute expiry, purged lazily by cachetools
    - Snapshot key enumeration for pattern removal
    - Eviction hook so owners can release resources tied to an entry
    """

    def __init__(
        self,
        max_size: int = 1024,
        timer: Callable[[], float] = time.monotonic,
        on_evict: EvictionHook | None = None,
    ):
        """
        Initialize the store.

        Args:
            max_size: Maximum number of entries (LRU eviction when exceeded)
            timer: Clock used to evaluate absolute expiry
            on_evict: Called with each entry evicted for lack of space
        """
        self.max_size = max_size
        self._timer = timer
        self._on_evict = on_evict
        self._evictions = 0

        self._lock = threading.RLock()
        self._cache = self._new_cache()

    def _new_cache(self) -> _EvictingTLRUCache:
        return _EvictingTLRUCache(self.max_size, self._timer, self._handle_eviction)

    def _handle_eviction(self, entry: CacheEntry) -> None:
        self._evictions += 1
        logger.debug("Evicted key from memory store: %s", entry.key, extra={"key": entry.key})
        if self._on_evict is not None:
            self._on_evict(entry)

    @property
    def evictions(self) -> int:
        return self._evictions

    def insert(self, key: str, entry: CacheEntry) -> None:
        """
        Install ``entry`` under ``key``, replacing any previous entry.

        An entry that is already expired on arrival is not stored, and the
        previous entry is dropped regardless.
        """
        with self._lock:
            self._delete(key)
            self._cache[key] = entry

    def lookup(self, key: str) -> CacheEntry | None:
        """Return the entry under ``key`` unless missing or past its expiry."""
        with self._lock:
            entry: CacheEntry | None = self._cache.get(key)
            return entry

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def remove(self, key: str) -> CacheEntry | None:
        """
        Physically delete ``key``.

        Returns the removed entry, or None if the key was missing or had
        already expired.
        """
        with self._lock:
            entry: CacheEntry | None = self._cache.get(key)
            self._delete(key)
            return entry

    def _delete(self, key: str) -> None:
        # del (unlike pop) also purges entries that are present but expired
        try:
            del self._cache[key]
        except KeyError:
            pass

    def keys(self) -> list[str]:
        """Point-in-time snapshot of every physically present key."""
        with self._lock:
            return list(self._cache)

    def clear(self) -> list[CacheEntry]:
        """Drop every entry and return those that were still within their expiry."""
        with self._lock:
            entries = [entry for entry in (self._cache.get(key) for key in list(self._cache)) if entry is not None]
            self._cache = self._new_cache()
            return entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "size": len(self._cache),
                "max_size": self.max_size,
                "evictions": self._evictions,
            }
