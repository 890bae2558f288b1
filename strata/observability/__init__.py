"""
Strata Cache - Observability Module

Usage:
    from strata.observability import configure_logging

    configure_logging(level="DEBUG", fmt="text")
"""

from .logging import JSONFormatter, configure_logging

__all__ = [
    "JSONFormatter",
    "configure_logging",
]
