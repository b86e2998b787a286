"""
Hot cache module for URL shortener.
Implements Strategy Pattern for flexible cache backends.
"""

from .strategies import CacheStrategy, FifoSnapshotCache, NullCache
from .factory import CacheFactory, CacheBackend

__all__ = [
    "CacheStrategy",
    "FifoSnapshotCache",
    "NullCache",
    "CacheFactory",
    "CacheBackend",
]
