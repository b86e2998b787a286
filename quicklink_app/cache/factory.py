"""
Factory for creating hot cache instances.
"""

from enum import Enum
from typing import Optional

from .strategies import CacheStrategy, Clock, FifoSnapshotCache, NullCache


class CacheBackend(Enum):
    """Available cache backends"""
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Simple factory for creating cache instances.
    
    Returns a new instance per call; the application keeps the one it
    builds on app.state.
    """
    
    @classmethod
    def create(
        cls,
        backend: CacheBackend,
        capacity: int = 1000,
        clock: Optional[Clock] = None,
    ) -> CacheStrategy:
        """
        Create a cache instance.
        
        Args:
            backend: Type of cache backend (from enum)
            capacity: Maximum number of snapshots (memory backend)
            clock: Time source used for expiry checks
            
        Returns:
            Cache instance
        """
        if backend == CacheBackend.MEMORY:
            return FifoSnapshotCache(capacity=capacity, clock=clock)
        
        if backend == CacheBackend.NULL:
            return NullCache()
        
        raise ValueError(f"Unknown cache backend: {backend}")
