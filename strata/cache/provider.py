"""
Strata Cache - Memory Cache Provider

Validates every call, turns retention intent (minutes-to-live or a
dependency file) into a concrete policy and keeps entries in a MemoryStore.

Concurrency:
- The store is thread-safe on its own; the provider lock only makes
  "release old watch, then replace entry" appear atomic to callers.
- File invalidation arrives on the watcher thread. Reads also re-check the
  dependency file, so a changed file is never served even if the watcher
  has not polled yet.
- Pattern removal works on a key snapshot and is not isolated from
  concurrent writers.
"""

import asyncio
import functools
import logging
import os
import re
import threading
import time
from collections import Counter
from collections.abc import Callable, Iterator
from typing import Any

from ..config.schemas import CacheConfig
from ..errors import CacheClosedError, DependencyFileNotFoundError, InvalidArgumentError, TypeMismatchError
from .backends.memory import MemoryStore
from .interface import CacheInterface, FilePath, KeyPattern
from .lookup import Found, LookupResult, NotFound, TypeMismatch, check_type, validate_expected_type, zero_value
from .retention import AbsoluteExpiry, CacheEntry, FileDependency, FileSignature, file_signature, is_meaningful
from .watcher import FileWatcher, WatchHandle

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60

# Largest TTL accepted (unsigned 32-bit minutes, roughly 8000 years)
MAX_TTL_MINUTES = 2**32 - 1


def _validate_key(key: Any, argument: str = "key") -> None:
    if not isinstance(key, str) or not key:
        raise InvalidArgumentError(argument, "must be a non-empty string", {"received": repr(key)})


def _validate_value(value: Any) -> None:
    if value is None:
        raise InvalidArgumentError("value", "must not be None")
    if isinstance(value, Iterator):
        raise InvalidArgumentError(
            "value",
            "must not be a one-shot iterator; materialize it into a list or tuple first",
            {"received": type(value).__name__},
        )


def _validate_ttl(ttl_minutes: Any) -> int:
    if (
        isinstance(ttl_minutes, bool)
        or not isinstance(ttl_minutes, int)
        or not 0 <= ttl_minutes <= MAX_TTL_MINUTES
    ):
        raise InvalidArgumentError(
            "ttl_minutes",
            f"must be an integer between 0 and {MAX_TTL_MINUTES}",
            {"received": repr(ttl_minutes)},
        )
    return ttl_minutes


def _compile_pattern(pattern: Any) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        if not pattern.pattern:
            raise InvalidArgumentError("pattern", "must be a non-empty regular expression")
        return pattern
    _validate_key(pattern, "pattern")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidArgumentError("pattern", f"invalid regular expression: {e}", {"pattern": pattern}) from e


def _resolve_dependency(dependency_file: Any) -> tuple[str, FileSignature]:
    if not isinstance(dependency_file, (str, os.PathLike)):
        raise InvalidArgumentError("dependency_file", "must be a path", {"received": repr(dependency_file)})
    path = os.fspath(dependency_file)
    if not path:
        raise InvalidArgumentError("dependency_file", "must be a non-empty path")
    path = os.path.abspath(path)
    signature = file_signature(path)
    if signature is None:
        raise DependencyFileNotFoundError(path)
    return path, signature


class MemoryCacheProvider(CacheInterface):
    """
    Process-local cache with absolute expiry and file-dependency invalidation.

    Instances are explicitly owned: create one and hand it to whatever needs
    caching. Nothing in this package keeps a process-wide default instance.

    Example:
        with MemoryCacheProvider(max_size=500) as cache:
            cache.set("user:1", user, ttl_minutes=10)
            cache.set_file_dependency("settings", settings, "settings.toml")
            user = cache.get("user:1", User)
            cache.remove_by_pattern(r"^user:")
    """

    def __init__(
        self,
        max_size: int = 1024,
        default_ttl_minutes: int = 60,
        watch_poll_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        watcher: FileWatcher | None = None,
    ):
        """
        Initialize the provider.

        Args:
            max_size: Maximum number of entries before LRU eviction
            default_ttl_minutes: TTL used when set() gets no ttl_minutes
            watch_poll_interval: Seconds between dependency-file checks
            clock: Monotonic clock used for absolute expiry
            watcher: File watcher to use; one is created (and owned) if omitted
        """
        self.max_size = max_size
        self.default_ttl_minutes = _validate_ttl(default_ttl_minutes)

        self._clock = clock
        self._store = MemoryStore(max_size=max_size, timer=clock, on_evict=self._on_evict)
        self._owns_watcher = watcher is None
        self._watcher = watcher or FileWatcher(poll_interval=watch_poll_interval)
        self._watches: dict[str, WatchHandle] = {}

        self._lock = threading.RLock()
        self._closed = False

        self._stats: Counter[str] = Counter()
        self._stats_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: CacheConfig, **kwargs: Any) -> "MemoryCacheProvider":
        """Build a provider from a CacheConfig section."""
        return cls(
            max_size=config.max_size,
            default_ttl_minutes=config.default_ttl_minutes,
            watch_poll_interval=config.watch_poll_interval_seconds,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _count(self, name: str) -> None:
        with self._stats_lock:
            self._stats[name] += 1

    def _ensure_open(self, operation: str) -> None:
        if self._closed:
            raise CacheClosedError(operation)

    def _release_watch(self, key: str) -> None:
        handle = self._watches.pop(key, None)
        if handle is not None:
            self._watcher.unwatch(handle)

    def _on_evict(self, entry: CacheEntry) -> None:
        # Runs inside MemoryStore.insert, which is only called with self._lock held
        with self._lock:
            self._release_watch(entry.key)

    def _on_dependency_changed(self, key: str, entry: CacheEntry, path: str) -> None:
        if self._drop_if_current(key, entry):
            logger.debug(
                "Invalidated '%s' after dependency change",
                key,
                extra={"key": key, "path": path},
            )

    def _drop_if_current(self, key: str, entry: CacheEntry) -> bool:
        """Remove ``entry`` unless it has already been replaced or removed."""
        with self._lock:
            if self._store.lookup(key) is not entry:
                return False
            self._store.remove(key)
            self._release_watch(key)
        self._count("invalidations")
        return True

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._store.lookup(key)
        if entry is None:
            return None
        if entry.is_live(self._clock()):
            return entry
        if isinstance(entry.retention, FileDependency):
            self._drop_if_current(key, entry)
        return None

    def _lookup(self, key: str, expected_type: Any) -> LookupResult:
        entry = self._live_entry(key)
        if entry is None:
            self._count("misses")
            logger.debug("Cache miss: %s", key, extra={"key": key})
            return NotFound()
        if not check_type(entry.value, expected_type):
            self._count("type_mismatches")
            return TypeMismatch(expected=expected_type, actual=type(entry.value))
        self._count("hits")
        return Found(entry.value)

    @staticmethod
    def _unwrap(key: str, expected_type: Any, result: LookupResult) -> Any:
        if isinstance(result, Found):
            return result.value
        if isinstance(result, TypeMismatch):
            raise TypeMismatchError(key, result.expected, result.actual)
        return zero_value(expected_type)

    def _resolve_ttl(self, ttl_minutes: Any) -> int:
        if ttl_minutes is None:
            return self.default_ttl_minutes
        return _validate_ttl(ttl_minutes)

    def _skip(self, key: str) -> None:
        self._count("skipped_sets")
        logger.debug("Skipped caching empty value for '%s'", key, extra={"key": key})

    def _set(self, key: str, value: Any, ttl_minutes: int) -> None:
        if not is_meaningful(value):
            self._skip(key)
            return

        now = self._clock()
        entry = CacheEntry(key=key, value=value, retention=AbsoluteExpiry(now + ttl_minutes * SECONDS_PER_MINUTE))
        with self._lock:
            self._ensure_open("set")
            self._release_watch(key)
            self._store.insert(key, entry)
        if not entry.is_live(now):
            # Dead on arrival: the old entry is gone and nothing replaced it
            self._count("expired_sets")
            logger.debug("Dropped '%s': expired on arrival", key, extra={"key": key, "ttl_minutes": ttl_minutes})
            return
        self._count("sets")
        logger.debug("Cached '%s' for %d minute(s)", key, ttl_minutes, extra={"key": key, "ttl_minutes": ttl_minutes})

    def _set_file_dependency(self, key: str, value: Any, path: str, signature: FileSignature) -> None:
        if not is_meaningful(value):
            self._skip(key)
            return

        entry = CacheEntry(key=key, value=value, retention=FileDependency(path, signature))
        with self._lock:
            self._ensure_open("set")
            self._release_watch(key)
            self._store.insert(key, entry)
            self._watches[key] = self._watcher.watch(
                path,
                functools.partial(self._on_dependency_changed, key, entry),
                signature=signature,
            )
        self._count("sets")
        logger.debug("Cached '%s' until %s changes", key, path, extra={"key": key, "path": path})

    def _remove(self, key: str) -> None:
        with self._lock:
            self._release_watch(key)
            entry = self._store.remove(key)
        if entry is not None:
            self._count("deletes")
            logger.debug("Removed '%s'", key, extra={"key": key})

    def _remove_by_pattern(self, regex: re.Pattern[str]) -> int:
        matched = [key for key in self._store.keys() if regex.search(key)]
        now = self._clock()
        removed = 0
        for key in matched:
            with self._lock:
                self._release_watch(key)
                entry = self._store.remove(key)
            if entry is not None and entry.is_live(now):
                removed += 1
                self._count("deletes")

        logger.info(
            "Removed %d entries matching pattern %r",
            removed,
            regex.pattern,
            extra={"pattern": regex.pattern, "matched": len(matched), "removed": removed},
        )
        return removed

    def _clear(self) -> int:
        with self._lock:
            entries = self._store.clear()
            for key in list(self._watches):
                self._release_watch(key)
        now = self._clock()
        return sum(1 for entry in entries if entry.is_live(now))

    # ------------------------------------------------------------------
    # Synchronous API
    # ------------------------------------------------------------------

    def get(self, key: str, expected_type: Any = object) -> Any:
        """Retrieve a value; the zero value of ``expected_type`` when missing."""
        return self._unwrap(key, expected_type, self.lookup(key, expected_type))

    def lookup(self, key: str, expected_type: Any = object) -> LookupResult:
        """Retrieve a value as Found / NotFound / TypeMismatch."""
        self._ensure_open("get")
        _validate_key(key)
        validate_expected_type(expected_type)
        return self._lookup(key, expected_type)

    def is_set(self, key: str) -> bool:
        """Check whether a live entry exists."""
        self._ensure_open("is_set")
        _validate_key(key)
        return self._live_entry(key) is not None

    def set(self, key: str, value: Any, ttl_minutes: int | None = None) -> None:
        """Store a value that expires ``ttl_minutes`` from now."""
        self._ensure_open("set")
        _validate_key(key)
        _validate_value(value)
        self._set(key, value, self._resolve_ttl(ttl_minutes))

    def set_file_dependency(self, key: str, value: Any, dependency_file: FilePath) -> None:
        """Store a value that lives until ``dependency_file`` changes."""
        self._ensure_open("set")
        _validate_key(key)
        _validate_value(value)
        path, signature = _resolve_dependency(dependency_file)
        self._set_file_dependency(key, value, path, signature)

    def remove(self, key: str) -> None:
        """Delete a key (no error if it is missing)."""
        self._ensure_open("remove")
        _validate_key(key)
        self._remove(key)

    def remove_by_pattern(self, pattern: KeyPattern) -> int:
        """Delete every key the regular expression matches (``re.search``)."""
        self._ensure_open("remove_by_pattern")
        return self._remove_by_pattern(_compile_pattern(pattern))

    def clear(self) -> int:
        """Remove all entries and release every file watch."""
        self._ensure_open("clear")
        count = self._clear()
        logger.info("Cleared %d entries from memory cache", count, extra={"removed": count})
        return count

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._stats_lock:
            stats = dict(self._stats)
        hits = stats.get("hits", 0)
        misses = stats.get("misses", 0)
        total_requests = hits + misses
        hit_rate = (hits / total_requests * 100) if total_requests > 0 else 0.0

        with self._lock:
            watched_files = len(self._watches)

        return {
            "backend": "memory",
            **self._store.stats(),
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hit_rate, 2),
            "type_mismatches": stats.get("type_mismatches", 0),
            "sets": stats.get("sets", 0),
            "skipped_sets": stats.get("skipped_sets", 0),
            "expired_sets": stats.get("expired_sets", 0),
            "deletes": stats.get("deletes", 0),
            "invalidations": stats.get("invalidations", 0),
            "watched_files": watched_files,
        }

    def close(self) -> None:
        """Drop all entries and stop the file watcher. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            count = self._clear()

        # Outside the lock: the watcher thread may be waiting on it in a callback
        if self._owns_watcher:
            self._watcher.close()
        logger.info("Memory cache provider closed", extra={"discarded": count})

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Asynchronous API
    #
    # Arguments are validated before the first suspension point, so a bad
    # call never reaches the store; the store work runs in a worker thread.
    # ------------------------------------------------------------------

    async def get_async(self, key: str, expected_type: Any = object) -> Any:
        result = await self.lookup_async(key, expected_type)
        return self._unwrap(key, expected_type, result)

    async def lookup_async(self, key: str, expected_type: Any = object) -> LookupResult:
        self._ensure_open("get")
        _validate_key(key)
        validate_expected_type(expected_type)
        return await asyncio.to_thread(self._lookup, key, expected_type)

    async def is_set_async(self, key: str) -> bool:
        self._ensure_open("is_set")
        _validate_key(key)
        entry = await asyncio.to_thread(self._live_entry, key)
        return entry is not None

    async def set_async(self, key: str, value: Any, ttl_minutes: int | None = None) -> None:
        self._ensure_open("set")
        _validate_key(key)
        _validate_value(value)
        ttl = self._resolve_ttl(ttl_minutes)
        await asyncio.to_thread(self._set, key, value, ttl)

    async def set_file_dependency_async(self, key: str, value: Any, dependency_file: FilePath) -> None:
        self._ensure_open("set")
        _validate_key(key)
        _validate_value(value)
        path, signature = _resolve_dependency(dependency_file)
        await asyncio.to_thread(self._set_file_dependency, key, value, path, signature)

    async def remove_async(self, key: str) -> None:
        self._ensure_open("remove")
        _validate_key(key)
        await asyncio.to_thread(self._remove, key)

    async def remove_by_pattern_async(self, pattern: KeyPattern) -> int:
        self._ensure_open("remove_by_pattern")
        regex = _compile_pattern(pattern)
        return await asyncio.to_thread(self._remove_by_pattern, regex)
