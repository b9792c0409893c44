"""Shared fixtures: in-memory audit store, user directory, cache, notifier, fixed clock."""

from unittest.mock import MagicMock

import pytest

from medme_security.application.audit_logger import AuditLogger
from medme_security.infrastructure.cache.response_cache import InMemoryResponseCache
from medme_security.security.rbac import Role
from medme_security.security.request_context import RequestContext
from tests.fakes import NOW, FakeAuditRepository, FakeUserDirectory, RecordingNotifier


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def audit_repository():
    return FakeAuditRepository()


@pytest.fixture
def user_directory():
    return FakeUserDirectory()


@pytest.fixture
def response_cache():
    return InMemoryResponseCache(max_entries=100, default_ttl_seconds=300)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def audit_logger(audit_repository, logger, clock):
    return AuditLogger(repository=audit_repository, logger=logger, clock=clock)


@pytest.fixture
def admin_context():
    return RequestContext(
        actor_id="user_admin_1",
        role=Role.ADMIN,
        ip_address="10.0.0.5",
        user_agent="pytest",
        endpoint="/security/alerts",
        method="POST",
        correlation_id="corr-1",
    )


@pytest.fixture
def browser_context():
    return RequestContext(
        ip_address="203.0.113.45",
        user_agent="Mozilla/5.0",
        endpoint="/security/csp-violation",
        method="POST",
        correlation_id="corr-2",
    )
