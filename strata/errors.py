"""
Strata Cache - Core Error Types

Defines the exception hierarchy for the cache runtime.
All exceptions inherit from StrataError for consistent error handling.

Cache errors also inherit from the matching builtin exception so callers
can catch either the Strata type or the familiar Python one:
- InvalidArgumentError is a ValueError
- DependencyFileNotFoundError is a FileNotFoundError
- TypeMismatchError is a TypeError
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes carried by every StrataError.

    Used for structured logging and for callers that prefer to branch on a
    stable code instead of an exception class.
    """

    # Input validation errors
    INVALID_ARGUMENT = "INVALID_ARGUMENT"

    # Retention errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"

    # Lookup errors
    TYPE_MISMATCH = "TYPE_MISMATCH"

    # Lifecycle errors
    CACHE_CLOSED = "CACHE_CLOSED"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class StrataError(Exception):
    """Base exception for all Strata errors."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logs."""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(StrataError):
    """Raised when configuration is invalid or missing."""

    error_code = ErrorCode.CONFIGURATION_ERROR


class CacheError(StrataError):
    """Base exception for cache-related errors."""


class InvalidArgumentError(CacheError, ValueError):
    """Raised when a key, pattern, value or TTL is malformed."""

    error_code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, argument: str, reason: str, details: dict[str, Any] | None = None):
        message = f"Invalid argument '{argument}': {reason}"
        super().__init__(message, {"argument": argument, **(details or {})})
        self.argument = argument


class DependencyFileNotFoundError(CacheError, FileNotFoundError):
    """Raised when a file-dependency entry names a file that does not exist."""

    error_code = ErrorCode.FILE_NOT_FOUND

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        message = f"Dependency file not found: {path}"
        super().__init__(message, {"path": path, **(details or {})})
        self.path = path


class TypeMismatchError(CacheError, TypeError):
    """Raised when a cached value is not an instance of the requested type."""

    error_code = ErrorCode.TYPE_MISMATCH

    def __init__(self, key: str, expected: type, actual: type):
        message = f"Cached value for '{key}' is {actual.__name__}, expected {getattr(expected, '__name__', expected)}"
        super().__init__(
            message,
            {"key": key, "expected": getattr(expected, "__name__", str(expected)), "actual": actual.__name__},
        )
        self.key = key
        self.expected = expected
        self.actual = actual


class CacheClosedError(CacheError):
    """Raised when an operation is attempted on a closed cache."""

    error_code = ErrorCode.CACHE_CLOSED

    def __init__(self, operation: str):
        super().__init__(f"Cache is closed, cannot {operation}", {"operation": operation})
