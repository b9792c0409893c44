"""Projection of audit records into the admin-facing alert and event shapes."""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from medme_security.domain.models.alert import (
    ACKNOWLEDGED_AT,
    ACKNOWLEDGED_BY,
    RESOLVED_AT,
    AlertState,
)
from medme_security.domain.models.audit import AuditAction, AuditCategory, AuditRecord, as_utc
from medme_security.domain.schemas.feeds import SecurityAlertView, SecurityEventView

# Audit categories surfaced in the security event feed.
EVENT_CATEGORIES = frozenset(
    {
        AuditCategory.AUTHENTICATION,
        AuditCategory.AUTHORIZATION,
        AuditCategory.SECURITY,
        AuditCategory.DATA_ACCESS,
    }
)

ALERT_CATEGORY_TITLES: Dict[AuditCategory, Tuple[str, str]] = {
    AuditCategory.AUTHENTICATION: ("authentication", "Authentication Security Alert"),
    AuditCategory.AUTHORIZATION: ("authorization", "Authorization Security Alert"),
    AuditCategory.DATA_ACCESS: ("data_breach", "Data Access Security Alert"),
}
DEFAULT_ALERT_CATEGORY_TITLE = ("suspicious_activity", "Suspicious Activity Detected")

EVENT_TYPE_BY_ACTION: Dict[AuditAction, str] = {
    AuditAction.LOGIN_SUCCESS: "login",
    AuditAction.LOGIN_FAILED: "failed_login",
    AuditAction.SECURITY_LOGIN_FAILED: "failed_login",
    AuditAction.PERMISSION_DENIED: "permission_change",
    AuditAction.SECURITY_VIOLATION: "suspicious_activity",
    AuditAction.DATA_ACCESS: "data_access",
}

EVENT_TYPE_BY_CATEGORY: Dict[AuditCategory, str] = {
    AuditCategory.AUTHENTICATION: "login",
    AuditCategory.AUTHORIZATION: "permission_change",
    AuditCategory.DATA_ACCESS: "data_access",
    AuditCategory.SECURITY: "suspicious_activity",
}
DEFAULT_EVENT_TYPE = "data_access"

# Event types that need no follow-up once recorded.
SELF_RESOLVING_EVENT_TYPES = frozenset({"login", "data_access"})


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return as_utc(value)
    if not value:
        return None
    try:
        return as_utc(datetime.fromisoformat(str(value)))
    except ValueError:
        return None


def _text(value: Any) -> Optional[str]:
    """Metadata is free-form JSON; views only carry strings."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return None
    return str(value)


def _description(record: AuditRecord) -> str:
    return record.description or record.action.value


def to_alert_view(record: AuditRecord) -> SecurityAlertView:
    category, title = ALERT_CATEGORY_TITLES.get(record.category, DEFAULT_ALERT_CATEGORY_TITLE)
    metadata = record.metadata or {}
    state = AlertState.from_metadata(metadata)
    return SecurityAlertView(
        id=record.record_id,
        title=title,
        description=_description(record),
        severity=record.severity.value.lower(),
        category=category,
        timestamp=record.timestamp_utc,
        state=state,
        acknowledged=state != AlertState.OPEN,
        acknowledged_by=_text(metadata.get(ACKNOWLEDGED_BY)),
        acknowledged_at=_parse_timestamp(metadata.get(ACKNOWLEDGED_AT)),
        resolved=state == AlertState.RESOLVED,
        resolved_at=_parse_timestamp(metadata.get(RESOLVED_AT)),
        version=record.version,
    )


def event_type(record: AuditRecord) -> str:
    """Specific action first, then the record's category."""
    if record.action in EVENT_TYPE_BY_ACTION:
        return EVENT_TYPE_BY_ACTION[record.action]
    return EVENT_TYPE_BY_CATEGORY.get(record.category, DEFAULT_EVENT_TYPE)


def to_event_view(
    record: AuditRecord,
    user_names: Optional[Mapping[str, str]] = None,
) -> SecurityEventView:
    metadata = record.metadata or {}
    kind = event_type(record)
    user_names = user_names or {}
    return SecurityEventView(
        id=record.record_id,
        type=kind,
        severity=record.severity.value.lower(),
        description=_description(record),
        user_id=record.actor_id,
        user_name=user_names.get(record.actor_id) if record.actor_id else None,
        timestamp=record.timestamp_utc,
        ip_address=_text(metadata.get("ip_address")),
        user_agent=_text(metadata.get("user_agent")),
        resolved=(
            kind in SELF_RESOLVING_EVENT_TYPES
            or AlertState.from_metadata(metadata) == AlertState.RESOLVED
        ),
    )
