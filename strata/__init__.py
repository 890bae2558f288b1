"""
Strata Cache

Process-local key-value cache with TTL expiry, file-dependency
invalidation, pattern removal and matching sync/async APIs.
"""

from .cache import CacheInterface, MemoryCacheProvider, create_cache
from .errors import (
    CacheClosedError,
    CacheError,
    ConfigurationError,
    DependencyFileNotFoundError,
    ErrorCode,
    InvalidArgumentError,
    StrataError,
    TypeMismatchError,
)

__version__ = "0.1.0"

__all__ = [
    "CacheInterface",
    "MemoryCacheProvider",
    "create_cache",
    "ErrorCode",
    "StrataError",
    "CacheError",
    "ConfigurationError",
    "InvalidArgumentError",
    "DependencyFileNotFoundError",
    "TypeMismatchError",
    "CacheClosedError",
]
