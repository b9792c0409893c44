"""Immutable audit record model and its closed vocabularies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class AuditAction(str, Enum):
    """What happened. Closed vocabulary; stored by value."""

    # Authentication
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_RESET = "password_reset"

    # Authorization / user management
    PERMISSION_DENIED = "permission_denied"
    ROLE_CHANGE = "role_change"
    USER_STATUS_CHANGE = "user_status_change"

    # Data access
    DATA_ACCESS = "data_access"

    # Security reporting
    SECURITY_ALERT = "security_alert"
    CSP_VIOLATION = "csp_violation"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    SECURITY_INCIDENT = "security_incident"
    SECURITY_VIOLATION = "security_violation"
    SECURITY_LOGIN_FAILED = "security_login_failed"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"

    # Alert lifecycle
    SECURITY_ALERT_ACKNOWLEDGED = "security_alert_acknowledged"
    SECURITY_ALERT_RESOLVED = "security_alert_resolved"

    # System
    SYSTEM_ERROR = "system_error"


class AuditCategory(str, Enum):
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    DATA_ACCESS = "DATA_ACCESS"
    SECURITY = "SECURITY"
    USER_MANAGEMENT = "USER_MANAGEMENT"
    APPOINTMENT = "APPOINTMENT"
    PAYMENT = "PAYMENT"
    VIDEO_CONSULTATION = "VIDEO_CONSULTATION"
    ADMIN = "ADMIN"
    SYSTEM = "SYSTEM"


class AuditSeverity(str, Enum):
    """Four ordered levels. Compare with `rank`, not by string value."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, other: "AuditSeverity") -> bool:
        return self.rank >= other.rank


_SEVERITY_RANK = {
    AuditSeverity.LOW: 0,
    AuditSeverity.MEDIUM: 1,
    AuditSeverity.HIGH: 2,
    AuditSeverity.CRITICAL: 3,
}

def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Severities surfaced as admin alerts and pushed to the outbound sink.
ALERT_SEVERITIES = frozenset({AuditSeverity.HIGH, AuditSeverity.CRITICAL})


@dataclass(frozen=True)
class AuditRecord:
    """
    Append-only fact describing one occurrence.
    action, category, severity and timestamp are fixed at creation; only
    metadata may be replaced later (acknowledgement / resolution), and every
    replacement bumps version.
    """

    record_id: str
    action: AuditAction
    category: AuditCategory
    severity: AuditSeverity
    description: str
    timestamp_utc: datetime
    actor_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    version: int = 1

    @property
    def is_alert(self) -> bool:
        return self.severity in ALERT_SEVERITIES

    def with_metadata(self, metadata: Dict[str, Any]) -> "AuditRecord":
        """Copy with replaced metadata and the next version. Core fields are carried over."""
        return AuditRecord(
            record_id=self.record_id,
            action=self.action,
            category=self.category,
            severity=self.severity,
            description=self.description,
            timestamp_utc=self.timestamp_utc,
            actor_id=self.actor_id,
            metadata=dict(metadata),
            version=self.version + 1,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging and API output."""
        return {
            "id": self.record_id,
            "action": self.action.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "actor_id": self.actor_id,
            "timestamp": self.timestamp_utc.isoformat(),
            "metadata": self.metadata,
            "version": self.version,
        }
