"""
Strata Cache - Cache Interface

Defines the abstract interface that cache providers implement.

Every operation exists in a synchronous and an asynchronous form. The async
forms validate their arguments before suspending and otherwise behave
exactly like the sync forms: same results, same exceptions, same side
effects.
"""

import re
from abc import ABC, abstractmethod
from os import PathLike
from typing import Any

from .lookup import LookupResult

KeyPattern = str | re.Pattern[str]
FilePath = str | PathLike[str]


class CacheInterface(ABC):
    """
    Abstract base class for cache providers.

    Missing keys are a normal outcome, not an error: ``get`` returns the zero
    value of the requested type and ``is_set`` returns False. Only malformed
    calls (``InvalidArgumentError``), missing dependency files
    (``DependencyFileNotFoundError``) and wrongly typed reads
    (``TypeMismatchError``) raise.
    """

    @abstractmethod
    def get(self, key: str, expected_type: Any = object) -> Any:
        """
        Retrieve a value from the cache.

        Args:
            key: Cache key
            expected_type: Type the cached value must be an instance of

        Returns:
            Cached value if live, otherwise the zero value of ``expected_type``
            (``0`` for int, ``""`` for str, ``None`` for arbitrary classes)

        Raises:
            InvalidArgumentError: If key is empty or ``expected_type`` has no
                ``isinstance`` form (``Literal[...]``, string annotations)
            TypeMismatchError: If the live value is not an ``expected_type``
        """

    @abstractmethod
    def lookup(self, key: str, expected_type: Any = object) -> LookupResult:
        """
        Retrieve a value as a tagged result instead of raising.

        Returns:
            Found(value), NotFound() or TypeMismatch(expected, actual)
        """

    @abstractmethod
    def is_set(self, key: str) -> bool:
        """
        Check whether a live entry exists.

        Returns:
            True if the key is present and neither expired nor invalidated
        """

    @abstractmethod
    def set(self, key: str, value: Any, ttl_minutes: int | None = None) -> None:
        """
        Store a value with an absolute expiry.

        ``None`` and one-shot iterators are rejected. Empty collections are
        silently not stored.

        Args:
            key: Cache key
            value: Value to cache
            ttl_minutes: Minutes until expiry, at most ``2**32 - 1``
                (None = configured default, 0 = already expired)
        """

    @abstractmethod
    def set_file_dependency(self, key: str, value: Any, dependency_file: FilePath) -> None:
        """
        Store a value that lives until ``dependency_file`` changes.

        Raises:
            DependencyFileNotFoundError: If the file does not exist at call time
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Removing a missing key is not an error."""

    @abstractmethod
    def remove_by_pattern(self, pattern: KeyPattern) -> int:
        """
        Delete every key matching a regular expression.

        Returns:
            Number of live entries removed
        """

    @abstractmethod
    def clear(self) -> int:
        """
        Remove all entries.

        Returns:
            Number of live entries removed
        """

    @abstractmethod
    def get_stats(self) -> dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics (hits, misses, size, etc.)
        """

    @abstractmethod
    def close(self) -> None:
        """
        Close the provider and release resources.

        Should be called during graceful shutdown.
        """

    @abstractmethod
    async def get_async(self, key: str, expected_type: Any = object) -> Any:
        """Async form of ``get``."""

    @abstractmethod
    async def lookup_async(self, key: str, expected_type: Any = object) -> LookupResult:
        """Async form of ``lookup``."""

    @abstractmethod
    async def is_set_async(self, key: str) -> bool:
        """Async form of ``is_set``."""

    @abstractmethod
    async def set_async(self, key: str, value: Any, ttl_minutes: int | None = None) -> None:
        """Async form of ``set``."""

    @abstractmethod
    async def set_file_dependency_async(self, key: str, value: Any, dependency_file: FilePath) -> None:
        """Async form of ``set_file_dependency``."""

    @abstractmethod
    async def remove_async(self, key: str) -> None:
        """Async form of ``remove``."""

    @abstractmethod
    async def remove_by_pattern_async(self, pattern: KeyPattern) -> int:
        """Async form of ``remove_by_pattern``."""

    async def clear_async(self) -> int:
        """Async form of ``clear``."""
        return self.clear()

    async def close_async(self) -> None:
        """Async form of ``close``."""
        self.close()

    def __enter__(self) -> "CacheInterface":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> "CacheInterface":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close_async()
