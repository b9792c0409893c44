"""Domain validators. Pure validation functions."""

from medme_security.domain.validators.report_validator import (
    validate_alert_report,
    validate_audit_query_bounds,
    validate_csp_report,
    validate_suspicious_activity_report,
)

__all__ = [
    "validate_alert_report",
    "validate_audit_query_bounds",
    "validate_csp_report",
    "validate_suspicious_activity_report",
]
