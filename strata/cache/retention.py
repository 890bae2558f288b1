"""
Strata Cache - Retention Policies

A cache entry carries exactly one retention policy:
- AbsoluteExpiry: the entry dies at a fixed point on the provider's clock
- FileDependency: the entry dies when the watched file changes, disappears
  or becomes unreadable

File identity is captured as a FileSignature snapshot of ``os.stat``; any
difference between the recorded and the current signature counts as a change.
"""

import math
import os
from collections.abc import Sized
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, NamedTuple


class FileSignature(NamedTuple):
    """Snapshot of the stat fields that change when a file is rewritten."""

    mtime_ns: int
    size: int
    inode: int


def file_signature(path: str) -> FileSignature | None:
    """
    Return the current signature of ``path``.

    Returns None when the file is missing, is not a regular file or cannot be
    read by this process.
    """
    try:
        st = os.stat(path)
    except OSError:
        return None
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        return None
    return FileSignature(st.st_mtime_ns, st.st_size, st.st_ino)


def is_meaningful(value: Any) -> bool:
    """Whether a value is worth caching: not None and not an empty collection."""
    if value is None:
        return False
    if isinstance(value, Sized) and len(value) == 0:
        return False
    return True


@dataclass(frozen=True, slots=True)
class AbsoluteExpiry:
    """Entry is invalid at or after ``expires_at`` (provider clock seconds)."""

    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(frozen=True, slots=True)
class FileDependency:
    """Entry is invalid once ``path`` no longer matches ``signature``."""

    path: str
    signature: FileSignature

    def is_live(self) -> bool:
        return file_signature(self.path) == self.signature


Retention = AbsoluteExpiry | FileDependency


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A stored value with its retention policy."""

    key: str
    value: Any
    retention: Retention
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def is_live(self, now: float) -> bool:
        if isinstance(self.retention, AbsoluteExpiry):
            return self.retention.is_live(now)
        return self.retention.is_live()

    @property
    def expires_at(self) -> float:
        """Store time-to-use: file-dependent entries never expire by time."""
        if isinstance(self.retention, AbsoluteExpiry):
            return self.retention.expires_at
        return math.inf
