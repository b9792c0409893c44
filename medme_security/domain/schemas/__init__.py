"""Domain schemas. Request/response and validation."""

from medme_security.domain.schemas.feeds import (
    AlertActionRequest,
    AlertFeed,
    AuditLogEntry,
    AuditLogPage,
    AuditLogStats,
    EventFeed,
    FeedStatus,
    MetricsSnapshot,
    SecurityAlertView,
    SecurityEventView,
    SecurityMetricsView,
)
from medme_security.domain.schemas.reports import (
    CspViolation,
    CspViolationReport,
    ReportAction,
    ReportOutcome,
    SecurityAlertReport,
    SuspiciousActivityReport,
)

__all__ = [
    "AlertActionRequest",
    "AlertFeed",
    "AuditLogEntry",
    "AuditLogPage",
    "AuditLogStats",
    "CspViolation",
    "CspViolationReport",
    "EventFeed",
    "FeedStatus",
    "MetricsSnapshot",
    "ReportAction",
    "ReportOutcome",
    "SecurityAlertReport",
    "SecurityAlertView",
    "SecurityEventView",
    "SecurityMetricsView",
    "SuspiciousActivityReport",
]
