"""Domain layer: audit records, alert lifecycle, classifiers, schemas, validators. Pure business logic only."""

from medme_security.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidAlertTransitionError,
)
from medme_security.domain.models import (
    AlertState,
    AuditAction,
    AuditCategory,
    AuditRecord,
    AuditSeverity,
)

__all__ = [
    "AlertState",
    "AuditAction",
    "AuditCategory",
    "AuditRecord",
    "AuditSeverity",
    "DomainError",
    "DomainValidationError",
    "InvalidAlertTransitionError",
]
