"""
Strata Cache - Cache Factory Integration Tests

Tests building providers from configuration and using them end to end.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from strata.cache import CacheInterface, MemoryCacheProvider, create_cache
from strata.config import CacheBackend, CacheConfig
from strata.errors import ConfigurationError


class TestCacheFactory:
    @pytest.fixture
    def created(self) -> Generator[list[CacheInterface], None, None]:
        """Collects providers so they are closed after each test."""
        caches: list[CacheInterface] = []
        yield caches
        for cache in caches:
            cache.close()

    def test_create_memory_cache_default(self, created: list[CacheInterface]) -> None:
        cache = create_cache()
        created.append(cache)

        assert isinstance(cache, CacheInterface)
        assert isinstance(cache, MemoryCacheProvider)

        cache.set("test_key", "test_value", ttl_minutes=1)
        assert cache.get("test_key") == "test_value"

    def test_create_memory_cache_explicit_config(self, created: list[CacheInterface]) -> None:
        config = CacheConfig(backend=CacheBackend.MEMORY, max_size=50, default_ttl_minutes=5)

        cache = create_cache(config)
        created.append(cache)

        assert isinstance(cache, MemoryCacheProvider)
        assert cache.max_size == 50
        assert cache.default_ttl_minutes == 5
        assert cache.get_stats()["max_size"] == 50

    def test_env_configuration(self, monkeypatch: pytest.MonkeyPatch, created: list[CacheInterface]) -> None:
        monkeypatch.setenv("CACHE_MAX_SIZE", "3")
        monkeypatch.setenv("CACHE_DEFAULT_TTL_MINUTES", "2")

        cache = create_cache()
        created.append(cache)

        assert cache.get_stats()["max_size"] == 3

    def test_each_call_returns_new_instance(self, created: list[CacheInterface]) -> None:
        first = create_cache(CacheConfig())
        second = create_cache(CacheConfig())
        created.extend([first, second])

        assert first is not second
        first.set("key", "value", ttl_minutes=1)
        assert second.is_set("key") is False

    def test_unknown_backend(self) -> None:
        config = CacheConfig.model_construct(backend="redis")

        with pytest.raises(ConfigurationError):
            create_cache(config)

    def test_provider_kwargs_forwarded(self, clock, created: list[CacheInterface]) -> None:
        cache = create_cache(CacheConfig(default_ttl_minutes=1), clock=clock)
        created.append(cache)

        cache.set("key", "value")
        clock.advance(60)

        assert cache.is_set("key") is False

    async def test_end_to_end_file_dependency(
        self, tmp_path: Path, created: list[CacheInterface], wait_until
    ) -> None:
        config = CacheConfig(watch_poll_interval_seconds=0.05)
        cache = create_cache(config)
        created.append(cache)

        dependency = tmp_path / "catalog.json"
        dependency.write_text('["a"]')

        await cache.set_file_dependency_async("catalog", ["a"], dependency)
        await cache.set_async("catalog:count", 1, 10)
        assert await cache.get_async("catalog", list) == ["a"]

        dependency.write_text('["a", "b"]')

        assert wait_until(lambda: cache.get_stats()["invalidations"] == 1)
        assert await cache.is_set_async("catalog") is False
        assert await cache.remove_by_pattern_async("^catalog") == 1
