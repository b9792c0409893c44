"""Fixtures for API unit tests: in-memory audit store, user directory, cache and notifier; AsyncClient."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from medme_security.infrastructure.cache.response_cache import InMemoryResponseCache
from medme_security.main import app


@pytest.fixture
def api_cache():
    return InMemoryResponseCache(max_entries=50, default_ttl_seconds=60)


@pytest.fixture
def app_with_overrides(audit_repository, user_directory, notifier, api_cache):
    """App with the database-backed stores, cache and alert sink replaced by in-memory fakes."""
    from medme_security.api import dependencies

    app.dependency_overrides[dependencies.get_audit_repository] = lambda: audit_repository
    app.dependency_overrides[dependencies.get_user_directory] = lambda: user_directory
    app.dependency_overrides[dependencies.get_response_cache] = lambda: api_cache
    app.dependency_overrides[dependencies.get_alert_notifier] = lambda: notifier
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_headers():
    return {"X-Actor-ID": "user_admin_1", "X-Actor-Role": "admin"}


@pytest.fixture
def doctor_headers():
    return {"X-Actor-ID": "doc_7", "X-Actor-Role": "doctor"}


@pytest.fixture
def recent():
    """Timestamps relative to wall-clock now, for endpoints that use the real clock."""
    now = datetime.now(timezone.utc)
    return lambda **delta: now - timedelta(**delta)
