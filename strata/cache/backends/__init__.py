"""
Strata Cache - Store Backends

Exports available entry store implementations.
"""

from .memory import MemoryStore

__all__ = [
    "MemoryStore",
]
