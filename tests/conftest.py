"""
Test configuration and fixtures for the URL shortener.
This centralizes all test setup, making individual tests clean.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import app
from shorturl_service.dependencies import get_store
from shorturl_service.services.short_code_strategies import UniformRandomShortCodeStrategy
from shorturl_service.services.shortcode_allocator import ShortcodeAllocator
from shorturl_service.services.url_service import URLService
from shorturl_service.store.strategies import InMemoryShortURLStore


class FakeClock:
    """Controllable clock; tests move time forward instead of sleeping"""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


@pytest.fixture(scope="function")
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def store(clock):
    """
    Create a fresh store for each test.
    This ensures tests are isolated and don't affect each other.
    """
    return InMemoryShortURLStore(shards=8, clock=clock)


@pytest.fixture(scope="function")
def allocator(store):
    return ShortcodeAllocator(store=store, strategy=UniformRandomShortCodeStrategy(length=6), max_attempts=10)


@pytest.fixture(scope="function")
def url_service(store, allocator):
    return URLService(store=store, allocator=allocator)


@pytest.fixture(scope="function")
def client(store):
    """
    Create a test client with the store dependency overridden.
    This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
