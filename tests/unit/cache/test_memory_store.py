"""
Strata Cache - Memory Store Tests

Tests the cachetools-backed entry store: expiry, LRU eviction,
eviction hook and key snapshots.
"""

import math
from pathlib import Path

import pytest

from strata.cache.backends.memory import MemoryStore
from strata.cache.retention import AbsoluteExpiry, CacheEntry, FileDependency, file_signature


def _ttl_entry(key: str, value: object, expires_at: float) -> CacheEntry:
    return CacheEntry(key=key, value=value, retention=AbsoluteExpiry(expires_at))


class TestMemoryStore:
    @pytest.fixture
    def store(self, clock) -> MemoryStore:
        return MemoryStore(max_size=3, timer=clock)

    def test_insert_and_lookup(self, store: MemoryStore) -> None:
        entry = _ttl_entry("a", 1, 2000.0)
        store.insert("a", entry)

        assert store.lookup("a") is entry
        assert store.contains("a") is True
        assert len(store) == 1

    def test_lookup_missing(self, store: MemoryStore) -> None:
        assert store.lookup("missing") is None
        assert store.contains("missing") is False

    def test_expired_entry_hidden(self, store: MemoryStore, clock) -> None:
        store.insert("a", _ttl_entry("a", 1, 1010.0))

        clock.advance(10)

        assert store.lookup("a") is None
        assert store.contains("a") is False

    def test_already_expired_entry_not_stored(self, store: MemoryStore, clock) -> None:
        store.insert("a", _ttl_entry("a", 1, 2000.0))
        store.insert("a", _ttl_entry("a", 2, clock()))

        assert store.lookup("a") is None
        assert len(store) == 0

    def test_replace(self, store: MemoryStore) -> None:
        store.insert("a", _ttl_entry("a", 1, 2000.0))
        replacement = _ttl_entry("a", 2, 3000.0)
        store.insert("a", replacement)

        assert store.lookup("a") is replacement
        assert len(store) == 1

    def test_remove(self, store: MemoryStore) -> None:
        entry = _ttl_entry("a", 1, 2000.0)
        store.insert("a", entry)

        assert store.remove("a") is entry
        assert store.remove("a") is None
        assert store.contains("a") is False

    def test_keys_snapshot(self, store: MemoryStore) -> None:
        for key in ("a", "b"):
            store.insert(key, _ttl_entry(key, key, 2000.0))

        keys = store.keys()
        store.insert("c", _ttl_entry("c", "c", 2000.0))

        assert sorted(keys) == ["a", "b"]

    def test_lru_eviction_calls_hook(self, clock) -> None:
        evicted: list[CacheEntry] = []
        store = MemoryStore(max_size=2, timer=clock, on_evict=evicted.append)

        for key in ("a", "b", "c"):
            store.insert(key, _ttl_entry(key, key, 2000.0))

        assert [entry.key for entry in evicted] == ["a"]
        assert store.evictions == 1
        assert store.stats() == {"size": 2, "max_size": 2, "evictions": 1}

    def test_file_dependency_entries_never_time_out(self, store: MemoryStore, clock, tmp_path: Path) -> None:
        path = tmp_path / "dep.txt"
        path.write_text("x")
        signature = file_signature(str(path))
        assert signature is not None
        entry = CacheEntry(key="f", value=1, retention=FileDependency(str(path), signature))

        store.insert("f", entry)
        clock.advance(10**9)

        assert entry.expires_at == math.inf
        assert store.lookup("f") is entry

    def test_clear_returns_unexpired_entries(self, store: MemoryStore, clock) -> None:
        store.insert("a", _ttl_entry("a", 1, 2000.0))
        store.insert("b", _ttl_entry("b", 2, 1005.0))
        clock.advance(10)

        cleared = store.clear()

        assert [entry.key for entry in cleared] == ["a"]
        assert len(store) == 0
        assert store.evictions == 0
