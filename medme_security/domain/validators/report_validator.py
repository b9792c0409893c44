"""Validators for inbound reports and audit queries. Pure functions, no infrastructure or DB access."""

from datetime import datetime
from typing import Optional

from medme_security.domain.exceptions import DomainValidationError
from medme_security.domain.models.audit import as_utc
from medme_security.domain.schemas.reports import (
    CspViolationReport,
    SecurityAlertReport,
    SuspiciousActivityReport,
)

AUDIT_QUERY_LIMIT_MIN = 1
AUDIT_QUERY_LIMIT_MAX = 1000


def _require_text(value: Optional[str], field: str) -> None:
    if not value or not value.strip():
        raise DomainValidationError(f"Missing required field: {field}")


def validate_alert_report(report: SecurityAlertReport) -> None:
    """type and message are required before any classification happens."""
    _require_text(report.type, "type")
    _require_text(report.message, "message")


def validate_csp_report(report: CspViolationReport) -> None:
    if report.violation is None:
        raise DomainValidationError("Invalid CSP violation report: violation object is required")


def validate_suspicious_activity_report(report: SuspiciousActivityReport) -> None:
    _require_text(report.type, "type")


def validate_audit_query_bounds(
    limit: int,
    skip: int,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> None:
    if not (AUDIT_QUERY_LIMIT_MIN <= limit <= AUDIT_QUERY_LIMIT_MAX):
        raise DomainValidationError(
            f"limit must be between {AUDIT_QUERY_LIMIT_MIN} and {AUDIT_QUERY_LIMIT_MAX}"
        )
    if skip < 0:
        raise DomainValidationError("skip must be non-negative")
    if start is not None and end is not None and as_utc(start) > as_utc(end):
        raise DomainValidationError("start must not be after end")
