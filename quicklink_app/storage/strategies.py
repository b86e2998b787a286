"""
Record store strategies using Strategy Pattern.

The record store is the authoritative shortcode -> UrlRecord mapping. It owns
three keyed collections (records, click logs, hot cache) and exposes only the
operations below; callers never touch the maps directly.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime, timedelta
from typing import Deque, Dict, List, Optional, Set, Tuple

from quicklink_app.analytics.metadata import lookup_country
from quicklink_app.cache.strategies import CacheStrategy, Clock, NullCache, utc_now
from quicklink_app.exceptions import ConflictError, ValidationError
from quicklink_app.models.click import ClickEvent, ClickMetadata
from quicklink_app.models.url import UrlRecord
from quicklink_app.services.short_code_generator import ShortCodeGenerator

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Abstract base class for record stores.
    
    Expiry is evaluated against the store's clock; expires_at is fixed when
    the record is created.
    """
    
    @abstractmethod
    def create(
        self,
        shortcode: str,
        url: str,
        ttl_minutes: float,
        description: str = "",
    ) -> UrlRecord:
        """
        Store a new record expiring ttl_minutes after creation.
        
        Raises:
            ValidationError: If the shortcode is malformed
            ConflictError: If the shortcode is already present
        """
        pass
    
    @abstractmethod
    def exists(self, shortcode: str) -> bool:
        """True if the shortcode is taken (live, expired, or retired)"""
        pass
    
    @abstractmethod
    def get(self, shortcode: str) -> Optional[UrlRecord]:
        """
        Get a live record.
        
        Returns None for unknown or expired codes. Expired records are marked
        inactive here but only removed by sweep_expired().
        """
        pass
    
    @abstractmethod
    def record_click(self, shortcode: str, metadata: Optional[ClickMetadata] = None) -> bool:
        """
        Count a click and append it to the event log.
        
        Returns:
            False if the shortcode is unknown, True otherwise
        """
        pass
    
    @abstractmethod
    def sweep_expired(self) -> int:
        """
        Delete every expired record with its log and cache entry.
        
        Returns:
            Number of records removed
        """
        pass
    
    @abstractmethod
    def get_with_events(self, shortcode: str) -> Optional[Tuple[UrlRecord, List[ClickEvent]]]:
        """Record snapshot and its event log, ignoring expiry"""
        pass
    
    @abstractmethod
    def list_active(self) -> List[UrlRecord]:
        """Active, unexpired records, most recently created first"""
        pass
    
    @abstractmethod
    def now(self) -> datetime:
        """Current time on the store's clock"""
        pass
    
    @abstractmethod
    def get_stats(self) -> dict:
        pass


class InMemoryRecordStore(RecordStore):
    """
    In-memory record store.
    
    Pros:
    - Very fast (no I/O at all)
    - No external dependencies
    
    Cons:
    - Lost on restart
    - Not shared between processes
    
    Concurrency: one re-entrant lock guards records, event logs and the
    cache. Contention is low and every operation is a short in-memory
    computation, so a single coarse lock is enough.
    """
    
    def __init__(
        self,
        cache: Optional[CacheStrategy] = None,
        hot_threshold: int = 5,
        max_events: int = 100,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the store.
        
        Args:
            cache: Hot cache placed in front of the record map (optional)
            hot_threshold: Records are cached once click_count exceeds this
            max_events: Size of each record's click ring buffer
            clock: Time source (UTC), injectable for tests
        """
        self.cache = cache if cache is not None else NullCache()
        self.hot_threshold = hot_threshold
        self.max_events = max_events
        self._clock = clock or utc_now
        
        self._lock = threading.RLock()
        self._records: Dict[str, UrlRecord] = {}
        self._events: Dict[str, Deque[ClickEvent]] = {}
        # Swept codes stay taken for the rest of the process run
        self._retired: Set[str] = set()
        
        self._total_clicks = 0
        self._started_at = self._clock()
        self._last_sweep: Optional[datetime] = None
        
        logger.info("Memory store initialized")
    
    def create(
        self,
        shortcode: str,
        url: str,
        ttl_minutes: float,
        description: str = "",
    ) -> UrlRecord:
        if not ShortCodeGenerator.is_valid(shortcode):
            raise ValidationError(
                "Invalid shortcode",
                [{"field": "shortcode", "message": f"Malformed shortcode: {shortcode!r}", "type": "value_error"}],
            )
        
        with self._lock:
            if self.exists(shortcode):
                raise ConflictError(f"Shortcode '{shortcode}' is already taken")
            
            now = self._clock()
            record = UrlRecord(
                shortcode=shortcode,
                original_url=url,
                description=description or "",
                created_at=now,
                expires_at=now + timedelta(minutes=ttl_minutes),
            )
            self._records[shortcode] = record
            self._events[shortcode] = deque(maxlen=self.max_events)
        
        logger.info(f"Stored URL: {shortcode} -> {url}")
        return record.model_copy()
    
    def exists(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._records or shortcode in self._retired
    
    def get(self, shortcode: str) -> Optional[UrlRecord]:
        with self._lock:
            cached = self.cache.get(shortcode)
            if cached is not None:
                return cached
            
            record = self._records.get(shortcode)
            if record is None:
                return None
            
            if record.is_expired(self._clock()):
                record.is_active = False
                return None
            
            if record.click_count > self.hot_threshold:
                self.cache.put(shortcode, record)
            
            return record.model_copy()
    
    def record_click(self, shortcode: str, metadata: Optional[ClickMetadata] = None) -> bool:
        # Expiry is deliberately not re-checked: a click on an expired but
        # not yet swept record still counts.
        metadata = metadata or ClickMetadata()
        
        with self._lock:
            record = self._records.get(shortcode)
            if record is None:
                return False
            
            now = self._clock()
            record.click_count += 1
            record.last_accessed = now
            self._total_clicks += 1
            
            ip = metadata.ip or "unknown"
            self._events[shortcode].append(
                ClickEvent(
                    timestamp=now,
                    ip=ip,
                    user_agent=metadata.user_agent or "unknown",
                    referer=metadata.referer or "direct",
                    country=lookup_country(ip),
                    request_id=metadata.request_id,
                )
            )
            
            if self.cache.contains(shortcode):
                self.cache.put(shortcode, record)
            
            click_count = record.click_count
        
        logger.debug(f"Click recorded: {shortcode} (total: {click_count})")
        return True
    
    def sweep_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [
                shortcode
                for shortcode, record in self._records.items()
                if record.is_expired(now)
            ]
            
            for shortcode in expired:
                del self._records[shortcode]
                self._events.pop(shortcode, None)
                self.cache.delete(shortcode)
                self._retired.add(shortcode)
            
            self._last_sweep = now
        
        if expired:
            logger.info(f"Cleaned up {len(expired)} expired URLs")
        
        return len(expired)
    
    def get_with_events(self, shortcode: str) -> Optional[Tuple[UrlRecord, List[ClickEvent]]]:
        with self._lock:
            record = self._records.get(shortcode)
            if record is None:
                return None
            return record.model_copy(), list(self._events.get(shortcode, ()))
    
    def list_active(self) -> List[UrlRecord]:
        with self._lock:
            now = self._clock()
            active = [
                record.model_copy()
                for record in self._records.values()
                if record.is_active and not record.is_expired(now)
            ]
        
        active.sort(key=lambda record: record.created_at, reverse=True)
        return active
    
    def now(self) -> datetime:
        return self._clock()
    
    def get_stats(self) -> dict:
        with self._lock:
            now = self._clock()
            return {
                "total_urls": len(self._records),
                "active_urls": sum(
                    1 for record in self._records.values()
                    if record.is_active and not record.is_expired(now)
                ),
                "total_clicks": self._total_clicks,
                "cache_size": len(self.cache),
                "memory_usage": {
                    "urls": len(self._records),
                    "analytics": len(self._events),
                    "cache": len(self.cache),
                },
                "started_at": self._started_at,
                "last_sweep": self._last_sweep,
            }
