"""Severity classifier: CSP directives, alert types, suspicious activity."""

import pytest

from medme_security.domain.classification.severity import (
    classify_alert_type,
    classify_csp_directive,
    classify_csp_violation,
    classify_suspicious_activity,
)
from medme_security.domain.models.audit import AuditSeverity


@pytest.mark.parametrize(
    "directive,expected",
    [
        ("script-src", AuditSeverity.HIGH),
        ("object-src", AuditSeverity.HIGH),
        ("img-src", AuditSeverity.MEDIUM),
        ("style-src", AuditSeverity.MEDIUM),
        ("script-src-elem", AuditSeverity.HIGH),
        ("font-src", AuditSeverity.LOW),
        ("frame-ancestors", AuditSeverity.LOW),
        ("", AuditSeverity.LOW),
        (None, AuditSeverity.LOW),
    ],
)
def test_directive_severity(directive, expected):
    assert classify_csp_directive(directive) == expected


def test_script_violation_from_real_origin_is_high():
    result = classify_csp_violation("script-src", "https://evil.example/x.js")
    assert result.severity == AuditSeverity.HIGH
    assert not result.is_false_positive


@pytest.mark.parametrize("directive", ["script-src", "object-src", "img-src", "style-src", "font-src"])
def test_false_positive_forces_low_for_every_directive(directive):
    result = classify_csp_violation(directive, "chrome-extension://abc/x.js")
    assert result.severity == AuditSeverity.LOW
    assert result.is_false_positive
    assert result.false_positive.name == "chrome_extension"


def test_false_positive_keeps_directive_severity_for_reference():
    result = classify_csp_violation("script-src", "moz-extension://abc/x.js")
    assert result.directive_severity == AuditSeverity.HIGH


@pytest.mark.parametrize(
    "alert_type,expected",
    [
        ("SECURITY_INIT_FAILURE", AuditSeverity.CRITICAL),
        ("CRITICAL_VULNERABILITY", AuditSeverity.CRITICAL),
        ("UNAUTHORIZED_ACCESS", AuditSeverity.HIGH),
        ("SUSPICIOUS_ACTIVITY", AuditSeverity.HIGH),
        ("CONFIGURATION_WARNING", AuditSeverity.MEDIUM),
        ("PERFORMANCE_DEGRADATION", AuditSeverity.MEDIUM),
        ("  unauthorized_access ", AuditSeverity.HIGH),
        ("SOMETHING_ELSE", AuditSeverity.LOW),
        (None, AuditSeverity.LOW),
    ],
)
def test_alert_type_severity(alert_type, expected):
    assert classify_alert_type(alert_type) == expected


@pytest.mark.parametrize(
    "activity,count,expected",
    [
        ("RAPID_CLICKING", 50, AuditSeverity.MEDIUM),
        ("RAPID_CLICKING", 51, AuditSeverity.HIGH),
        ("UNUSUAL_NAVIGATION", 0, AuditSeverity.MEDIUM),
        ("AUTOMATED_BEHAVIOR", 1, AuditSeverity.HIGH),
        ("COPY_PASTE", 3, AuditSeverity.LOW),
        (None, 0, AuditSeverity.LOW),
    ],
)
def test_suspicious_activity_severity(activity, count, expected):
    assert classify_suspicious_activity(activity, count) == expected


def test_severity_order():
    assert AuditSeverity.CRITICAL.at_least(AuditSeverity.HIGH)
    assert AuditSeverity.HIGH.at_least(AuditSeverity.HIGH)
    assert not AuditSeverity.MEDIUM.at_least(AuditSeverity.HIGH)
    assert sorted(AuditSeverity, key=lambda s: s.rank) == [
        AuditSeverity.LOW,
        AuditSeverity.MEDIUM,
        AuditSeverity.HIGH,
        AuditSeverity.CRITICAL,
    ]
