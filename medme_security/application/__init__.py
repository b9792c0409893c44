# Application layer: services that orchestrate domain and infrastructure.

from medme_security.application.alert_lifecycle import AlertLifecycleService
from medme_security.application.audit_logger import AuditLogger
from medme_security.application.audit_repository import (
    AuditCounts,
    AuditQuery,
    AuditRepository,
    UserCounts,
    UserDirectory,
)
from medme_security.application.exceptions import (
    AlertConflictError,
    AlertNotFoundError,
    ApplicationError,
    NotificationError,
    ReportNotRecordedError,
    StoreUnavailableError,
)
from medme_security.application.feed_service import SamplePolicy, SecurityFeedService
from medme_security.application.notifier import AlertNotification, AlertNotifier
from medme_security.application.report_service import SecurityReportService
from medme_security.application.response_cache import ResponseCache

__all__ = [
    "AlertConflictError",
    "AlertLifecycleService",
    "AlertNotFoundError",
    "AlertNotification",
    "AlertNotifier",
    "ApplicationError",
    "AuditCounts",
    "AuditLogger",
    "AuditQuery",
    "AuditRepository",
    "NotificationError",
    "ReportNotRecordedError",
    "ResponseCache",
    "SamplePolicy",
    "SecurityFeedService",
    "SecurityReportService",
    "StoreUnavailableError",
    "UserCounts",
    "UserDirectory",
]
