"""Domain models. Pure business entities."""

from medme_security.domain.models.alert import AlertState, transition_metadata
from medme_security.domain.models.audit import (
    ALERT_SEVERITIES,
    AuditAction,
    AuditCategory,
    AuditRecord,
    AuditSeverity,
)

__all__ = [
    "ALERT_SEVERITIES",
    "AlertState",
    "AuditAction",
    "AuditCategory",
    "AuditRecord",
    "AuditSeverity",
    "transition_metadata",
]
