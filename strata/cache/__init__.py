"""
Strata Cache - Cache Module

Provides a process-local cache with absolute expiry, file-dependency
invalidation and regex-based bulk removal.

Usage:
    from strata.cache import create_cache

    cache = create_cache()
    cache.set("key", "value", ttl_minutes=10)
    value = cache.get("key", str)
    await cache.remove_by_pattern_async(r"^ke")
"""

from .factory import create_cache
from .interface import CacheInterface
from .lookup import Found, LookupResult, NotFound, TypeMismatch
from .provider import MemoryCacheProvider
from .retention import AbsoluteExpiry, CacheEntry, FileDependency
from .watcher import FileWatcher, WatchHandle

__all__ = [
    # Factory
    "create_cache",
    # Interface and implementation
    "CacheInterface",
    "MemoryCacheProvider",
    # Lookup results
    "Found",
    "NotFound",
    "TypeMismatch",
    "LookupResult",
    # Retention
    "AbsoluteExpiry",
    "FileDependency",
    "CacheEntry",
    # File watching
    "FileWatcher",
    "WatchHandle",
]
