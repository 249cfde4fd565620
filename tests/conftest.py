# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock
from typing import Generator

from main import create_app
from core.cache import SimpleCache
from dependencies.auth import CurrentUser, get_current_user


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SimpleCache(clock=clock, default_ttl_seconds=300)


@pytest.fixture(scope="function")
def app(cache):
    """Create a test FastAPI application instance."""
    return create_app(cache=cache)


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def login_as(app):
    """Make every request run as the given CurrentUser."""
    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login


@pytest.fixture
def admin_user():
    return CurrentUser(id="admin-1", email="admin@example.com", role="admin", name="Admin")


@pytest.fixture
def seo_user():
    return CurrentUser(id="seo-1", email="seo@example.com", role="seo", name="SEO Editor")


@pytest.fixture
def custom_user():
    """Custom role with read-only blogs and nothing on seo."""
    return CurrentUser(
        id="custom-1",
        email="custom@example.com",
        role="custom",
        permissions={"dashboard": "read", "blogs": "read", "settings": "full"},
    )


def make_query(data=None, count=None):
    """
    A supabase-py style query builder: every chained call returns the
    same mock, `execute()` returns an object with `.data` / `.count`.
    """
    query = MagicMock()
    for method in ("select", "insert", "upsert", "update", "delete", "eq", "in_",
                   "ilike", "gte", "lte", "order", "range", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    return query


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client whose tables all share one query mock."""
    mock_client = MagicMock()
    mock_client.query = make_query()
    mock_client.table.return_value = mock_client.query
    return mock_client


@pytest.fixture
def query_factory():
    return make_query
