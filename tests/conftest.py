"""
Test configuration and fixtures for the QuickLink URL shortener.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from quicklink_app.cache.strategies import FifoSnapshotCache
from quicklink_app.config import Settings
from quicklink_app.storage.strategies import InMemoryRecordStore


class FakeClock:
    """Controllable UTC clock shared by store, cache and app under test"""
    
    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
    
    def __call__(self) -> datetime:
        return self.now
    
    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    """Isolated settings: no .env file, quiet logs, fixed base URL"""
    return Settings(_env_file=None, log_level="WARNING", base_url="http://testserver")


@pytest.fixture
def store(clock):
    """
    Fresh record store with a FIFO cache, both on the fake clock.
    """
    cache = FifoSnapshotCache(capacity=1000, clock=clock)
    return InMemoryRecordStore(cache=cache, hot_threshold=5, max_events=100, clock=clock)


@pytest.fixture
def app(settings, clock):
    return create_app(settings, clock=clock)


@pytest.fixture
def client(app):
    """
    Test client running the app lifespan (sweeper started and stopped).
    This is the main fixture that API tests will use.
    """
    with TestClient(app) as test_client:
        yield test_client
    
    app.dependency_overrides.clear()
