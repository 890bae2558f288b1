"""
Cache Usage Example

Demonstrates how to use the Strata cache provider.

This example shows:
- Building a provider from environment configuration
- TTL entries and typed reads
- File-dependency invalidation
- Pattern removal
- The async API
"""

import asyncio
import logging
import tempfile
import time
from pathlib import Path

from strata.cache import create_cache
from strata.config import load_config
from strata.observability import configure_logging

logger = logging.getLogger("strata.examples")


def example_ttl_entries() -> None:
    """Example: TTL entries, typed reads and pattern removal."""
    logger.info("Example 1: TTL entries")

    with create_cache() as cache:
        cache.set("user:1", {"name": "alice"}, ttl_minutes=10)
        cache.set("user:2", {"name": "bob"}, ttl_minutes=10)
        cache.set("order:1", ["widget"], ttl_minutes=10)

        # Empty results are not cached
        cache.set("order:2", [], ttl_minutes=10)

        logger.info(f"user:1 -> {cache.get('user:1', dict)}")
        logger.info(f"order:2 cached: {cache.is_set('order:2')}")
        logger.info(f"missing counter -> {cache.get('counter', int)}")

        removed = cache.remove_by_pattern(r"^user:")
        logger.info(f"Removed {removed} user entries, stats: {cache.get_stats()}")


def example_file_dependency() -> None:
    """Example: entry invalidated when its source file changes."""
    logger.info("Example 2: File dependency")

    with tempfile.TemporaryDirectory() as tmp, create_cache() as cache:
        settings = Path(tmp) / "settings.json"
        settings.write_text('{"debug": false}')

        cache.set_file_dependency("settings", {"debug": False}, settings)
        logger.info(f"settings cached: {cache.is_set('settings')}")

        settings.write_text('{"debug": true, "changed": true}')
        time.sleep(0.1)
        logger.info(f"settings cached after edit: {cache.is_set('settings')}")


async def example_async() -> None:
    """Example: the async API mirrors the sync one."""
    logger.info("Example 3: Async API")

    async with create_cache() as cache:
        await cache.set_async("report", {"rows": 3}, 5)
        logger.info(f"report -> {await cache.get_async('report', dict)}")
        await cache.remove_async("report")
        logger.info(f"report cached after remove: {await cache.is_set_async('report')}")


def main() -> None:
    config = load_config()
    configure_logging(level=config.log_level, fmt=config.log_format)

    example_ttl_entries()
    example_file_dependency()
    asyncio.run(example_async())


if __name__ == "__main__":
    main()
