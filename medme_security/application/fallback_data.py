"""Demonstration data for admin feeds, substituted only by explicit policy and always flagged `sample`."""

from datetime import datetime, timedelta
from typing import List, TypeVar

from medme_security.domain.schemas.feeds import (
    Feed,
    FeedStatus,
    SecurityAlertView,
    SecurityEventView,
    SecurityMetricsView,
)

FeedT = TypeVar("FeedT", bound=Feed)


def sample_alerts(now: datetime) -> List[SecurityAlertView]:
    return [
        SecurityAlertView(
            id="sample-alert-1",
            title="Unusual Login Pattern Detected",
            description="Multiple login attempts from different geographic locations within a short time frame",
            severity="medium",
            category="authentication",
            timestamp=now - timedelta(hours=2),
        ),
        SecurityAlertView(
            id="sample-alert-2",
            title="High Volume Data Access",
            description="User accessed unusually high number of patient records in a short period",
            severity="high",
            category="data_breach",
            timestamp=now - timedelta(hours=4),
            state="acknowledged",
            acknowledged=True,
            acknowledged_at=now - timedelta(hours=3),
        ),
        SecurityAlertView(
            id="sample-alert-3",
            title="Failed Authorization Attempts",
            description="Multiple attempts to access admin-only resources by non-admin user",
            severity="high",
            category="authorization",
            timestamp=now - timedelta(hours=6),
        ),
    ]


def sample_events(now: datetime) -> List[SecurityEventView]:
    return [
        SecurityEventView(
            id="sample-event-1",
            type="login",
            severity="low",
            description="User login successful",
            user_id="user_123",
            user_name="Dr. Sarah Johnson",
            timestamp=now - timedelta(minutes=5),
            ip_address="192.168.1.100",
            resolved=True,
        ),
        SecurityEventView(
            id="sample-event-2",
            type="failed_login",
            severity="medium",
            description="Multiple failed login attempts",
            timestamp=now - timedelta(minutes=15),
            ip_address="203.0.113.45",
            resolved=False,
        ),
        SecurityEventView(
            id="sample-event-3",
            type="data_access",
            severity="low",
            description="Admin accessed patient records",
            user_id="admin_456",
            user_name="Admin User",
            timestamp=now - timedelta(minutes=30),
            resolved=True,
        ),
        SecurityEventView(
            id="sample-event-4",
            type="permission_change",
            severity="high",
            description="User role changed from patient to doctor",
            user_id="admin_456",
            user_name="Admin User",
            timestamp=now - timedelta(hours=1),
            resolved=True,
        ),
        SecurityEventView(
            id="sample-event-5",
            type="suspicious_activity",
            severity="critical",
            description="Unusual API access pattern detected",
            timestamp=now - timedelta(hours=2),
            ip_address="198.51.100.42",
            resolved=False,
        ),
    ]


def sample_metrics() -> SecurityMetricsView:
    return SecurityMetricsView(
        overall_score=87,
        authentication_health=92,
        data_protection=89,
        access_control=85,
        audit_compliance=91,
        threat_detection=83,
    )


def should_substitute(status: FeedStatus, *, on_empty: bool, on_unavailable: bool) -> bool:
    if status == FeedStatus.EMPTY:
        return on_empty
    if status == FeedStatus.UNAVAILABLE:
        return on_unavailable
    return False


def apply_sample_policy(
    feed: FeedT,
    samples: List,
    *,
    on_empty: bool,
    on_unavailable: bool,
) -> FeedT:
    """
    Return the feed unchanged, or a copy carrying sample items when the policy
    asks for it. status is never rewritten, so a caller can still tell
    "no data" from "store down".
    """
    if not should_substitute(feed.status, on_empty=on_empty, on_unavailable=on_unavailable):
        return feed
    return feed.model_copy(update={"items": list(samples), "sample": True})
