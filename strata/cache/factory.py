"""
Strata Cache - Cache Factory

Builds cache providers from configuration.

Every call returns a new, independently owned provider. There is no
instance registry: a caller that wants one cache per process creates it
once at startup and passes it to whatever needs it.

Examples:
    from strata.cache.factory import create_cache

    # Uses env-configured settings
    cache = create_cache()

    # Or explicitly supply a CacheConfig (e.g., for tests)
    from strata.config import CacheConfig
    cache = create_cache(CacheConfig(max_size=100, default_ttl_minutes=5))
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import CacheBackend, CacheConfig, get_config
from ..errors import ConfigurationError
from .interface import CacheInterface
from .provider import MemoryCacheProvider

logger = logging.getLogger(__name__)


def _create_memory_cache(config: CacheConfig, **kwargs: Any) -> CacheInterface:
    """Internal helper to construct a memory cache provider."""
    return MemoryCacheProvider.from_config(config, **kwargs)


def create_cache(config: CacheConfig | None = None, **kwargs: Any) -> CacheInterface:
    """
    Create a cache provider based on configuration.

    Args:
        config: Cache configuration (uses loaded config if not provided)
        **kwargs: Extra provider arguments (``clock``, ``watcher``)

    Returns:
        Configured cache provider instance

    Raises:
        ConfigurationError: If the configured backend is unknown
    """
    if config is None:
        config = get_config().cache

    logger.info(
        "Creating cache provider with backend: %s",
        config.backend,
        extra={"backend": str(config.backend), "max_size": config.max_size},
    )

    if config.backend == CacheBackend.MEMORY:
        return _create_memory_cache(config, **kwargs)

    raise ConfigurationError(
        f"Unknown cache backend: {config.backend}",
        details={
            "backend": str(config.backend),
            "supported": [backend.value for backend in CacheBackend],
        },
    )
