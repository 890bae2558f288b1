"""
Strata Cache - Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
import time
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from strata.cache.provider import MemoryCacheProvider

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _wait_until(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.02) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def clock() -> FakeClock:
    """Controllable clock for expiry tests."""
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> Generator[MemoryCacheProvider, None, None]:
    """Fresh provider on a fake clock, closed after the test."""
    provider = MemoryCacheProvider(
        max_size=100,
        default_ttl_minutes=60,
        watch_poll_interval=0.05,
        clock=clock,
    )
    yield provider
    provider.close()


@pytest.fixture
def dependency_file(tmp_path: Path) -> Path:
    """An existing file to use as a cache dependency."""
    path = tmp_path / "settings.json"
    path.write_text('{"version": 1}')
    return path


@pytest.fixture(autouse=True)
def reset_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make every test start without a cached configuration instance."""
    monkeypatch.setattr("strata.config.loader._config_instance", None)


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Polling helper for behaviour driven by the watcher thread."""
    return _wait_until
