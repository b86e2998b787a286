"""
Record storage module.

Implements the Strategy Pattern for the authoritative shortcode store.
Only an in-memory backend exists: all state is process-lifetime.
"""

from .strategies import RecordStore, InMemoryRecordStore

__all__ = [
    "RecordStore",
    "InMemoryRecordStore",
]
