"""Rules-based classification of security reports: signatures, severity, suspicion."""

from medme_security.domain.classification.patterns import (
    detect_sql_injection,
    detect_xss,
    is_known_false_positive,
    match_signature,
)
from medme_security.domain.classification.severity import (
    CspClassification,
    classify_alert_type,
    classify_csp_violation,
    classify_suspicious_activity,
)
from medme_security.domain.classification.suspicion import requires_escalation, suspicion_score

__all__ = [
    "CspClassification",
    "classify_alert_type",
    "classify_csp_violation",
    "classify_suspicious_activity",
    "detect_sql_injection",
    "detect_xss",
    "is_known_false_positive",
    "match_signature",
    "requires_escalation",
    "suspicion_score",
]
