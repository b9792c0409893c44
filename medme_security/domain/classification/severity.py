"""Severity classification for inbound security reports. Total functions: every input maps to a level."""

from dataclasses import dataclass
from typing import Dict, Optional

from medme_security.domain.classification.patterns import FALSE_POSITIVE_SIGNATURES, Signature, first_match
from medme_security.domain.models.audit import AuditSeverity

# Alert-type tags sent by clients and internal monitors.
ALERT_TYPE_SEVERITY: Dict[str, AuditSeverity] = {
    "SECURITY_INIT_FAILURE": AuditSeverity.CRITICAL,
    "CRITICAL_VULNERABILITY": AuditSeverity.CRITICAL,
    "UNAUTHORIZED_ACCESS": AuditSeverity.HIGH,
    "SUSPICIOUS_ACTIVITY": AuditSeverity.HIGH,
    "CONFIGURATION_WARNING": AuditSeverity.MEDIUM,
    "PERFORMANCE_DEGRADATION": AuditSeverity.MEDIUM,
}

RAPID_CLICKING_HIGH_THRESHOLD = 50

# Checked in order; a directive containing the key inherits its severity.
_CSP_DIRECTIVE_SEVERITY = (
    ("script-src", AuditSeverity.HIGH),
    ("object-src", AuditSeverity.HIGH),
    ("img-src", AuditSeverity.MEDIUM),
    ("style-src", AuditSeverity.MEDIUM),
)


@dataclass(frozen=True)
class CspClassification:
    severity: AuditSeverity
    directive_severity: AuditSeverity
    false_positive: Optional[Signature] = None

    @property
    def is_false_positive(self) -> bool:
        return self.false_positive is not None


def classify_csp_directive(violated_directive: Optional[str]) -> AuditSeverity:
    directive = (violated_directive or "").lower()
    for key, severity in _CSP_DIRECTIVE_SEVERITY:
        if key in directive:
            return severity
    return AuditSeverity.LOW


def classify_csp_violation(
    violated_directive: Optional[str],
    blocked_uri: Optional[str],
) -> CspClassification:
    """Directive decides the level; a known false positive forces LOW."""
    directive_severity = classify_csp_directive(violated_directive)
    false_positive = first_match((blocked_uri, violated_directive), FALSE_POSITIVE_SIGNATURES)
    return CspClassification(
        severity=AuditSeverity.LOW if false_positive else directive_severity,
        directive_severity=directive_severity,
        false_positive=false_positive,
    )


def classify_alert_type(alert_type: Optional[str]) -> AuditSeverity:
    return ALERT_TYPE_SEVERITY.get((alert_type or "").strip().upper(), AuditSeverity.LOW)


def classify_suspicious_activity(activity_type: Optional[str], count: int = 0) -> AuditSeverity:
    tag = (activity_type or "").strip().upper()
    if tag == "AUTOMATED_BEHAVIOR":
        return AuditSeverity.HIGH
    if tag == "RAPID_CLICKING":
        return AuditSeverity.HIGH if count > RAPID_CLICKING_HIGH_THRESHOLD else AuditSeverity.MEDIUM
    if tag == "UNUSUAL_NAVIGATION":
        return AuditSeverity.MEDIUM
    return AuditSeverity.LOW
