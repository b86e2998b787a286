"""
Hot cache strategies using Strategy Pattern.
Allows switching between the bounded FIFO snapshot cache and a no-op cache.

The cache is an accelerator in front of the record store, not a cache of
record: it only ever holds copies of records, and only the store writes to it.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Callable, Optional

from quicklink_app.models.url import UrlRecord

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheStrategy(ABC):
    """
    Abstract base class for hot cache strategies.
    
    Operations are synchronous: every backend is in-process and callers
    (the record store) already hold the store lock.
    """
    
    @abstractmethod
    def get(self, shortcode: str) -> Optional[UrlRecord]:
        """
        Get a snapshot from cache.
        
        Args:
            shortcode: Cache key
            
        Returns:
            Snapshot copy, or None on a miss or an expired entry
        """
        pass
    
    @abstractmethod
    def put(self, shortcode: str, record: UrlRecord) -> None:
        """
        Store a snapshot of the record under shortcode.
        
        Args:
            shortcode: Cache key
            record: Record to copy into the cache
        """
        pass
    
    @abstractmethod
    def delete(self, shortcode: str) -> bool:
        """
        Delete key from cache.
        
        Returns:
            True if deleted, False if key didn't exist
        """
        pass
    
    @abstractmethod
    def contains(self, shortcode: str) -> bool:
        """Check whether a key is present (expired or not)"""
        pass
    
    @abstractmethod
    def clear(self) -> None:
        """Clear all cache entries"""
        pass
    
    @abstractmethod
    def __len__(self) -> int:
        pass


class FifoSnapshotCache(CacheStrategy):
    """
    Bounded in-memory cache with FIFO eviction.
    
    - Holds copies, never live references
    - At capacity, the oldest-inserted key is evicted (reads don't
      refresh position, this is not LRU)
    - Each snapshot carries its own expires_at; expired entries are
      dropped lazily when read
    """
    
    def __init__(self, capacity: int = 1000, clock: Optional[Clock] = None):
        self.capacity = capacity
        self._clock = clock or utc_now
        self._cache: "OrderedDict[str, UrlRecord]" = OrderedDict()
    
    def get(self, shortcode: str) -> Optional[UrlRecord]:
        cached = self._cache.get(shortcode)
        if cached is None:
            return None
        
        if cached.is_expired(self._clock()):
            del self._cache[shortcode]
            return None
        
        return cached.model_copy()
    
    def put(self, shortcode: str, record: UrlRecord) -> None:
        """
        Insert or overwrite a snapshot.
        
        Overwriting an existing key keeps its original insertion position.
        """
        if shortcode not in self._cache and len(self._cache) >= self.capacity:
            self._cache.popitem(last=False)
        self._cache[shortcode] = record.model_copy()
    
    def delete(self, shortcode: str) -> bool:
        if shortcode in self._cache:
            del self._cache[shortcode]
            return True
        return False
    
    def contains(self, shortcode: str) -> bool:
        return shortcode in self._cache
    
    def clear(self) -> None:
        self._cache.clear()
    
    def __len__(self) -> int:
        return len(self._cache)


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.
    
    Used for:
    - Testing the store without the acceleration layer
    - Disabling the cache through configuration
    """
    
    def get(self, shortcode: str) -> Optional[UrlRecord]:
        """Always returns None (cache miss)"""
        return None
    
    def put(self, shortcode: str, record: UrlRecord) -> None:
        """Pretends to set but does nothing"""
        return None
    
    def delete(self, shortcode: str) -> bool:
        return False
    
    def contains(self, shortcode: str) -> bool:
        return False
    
    def clear(self) -> None:
        return None
    
    def __len__(self) -> int:
        return 0
