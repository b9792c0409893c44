"""Unit tests for SecurityReportService: classification, escalation, notification, store failure."""

import pytest

from medme_security.application.exceptions import ReportNotRecordedError
from medme_security.application.feed_service import ALERTS_CACHE_PREFIX
from medme_security.application.normalizer import to_alert_view
from medme_security.application.report_service import SecurityReportService
from medme_security.domain.exceptions import DomainValidationError
from medme_security.domain.models.alert import AlertState
from medme_security.domain.models.audit import AuditAction, AuditSeverity
from medme_security.domain.schemas.reports import (
    CspViolationReport,
    ReportAction,
    SecurityAlertReport,
    SuspiciousActivityReport,
)


@pytest.fixture
def service(audit_logger, notifier, logger, response_cache):
    return SecurityReportService(
        audit_logger=audit_logger,
        notifier=notifier,
        logger=logger,
        cache=response_cache,
    )


def _csp(blocked_uri: str, directive: str = "script-src", source_file: str | None = None) -> CspViolationReport:
    return CspViolationReport.model_validate(
        {
            "type": "csp-violation",
            "violation": {
                "blockedURI": blocked_uri,
                "violatedDirective": directive,
                "sourceFile": source_file,
            },
        }
    )


# ---------- CSP violations ----------


async def test_script_violation_is_high_and_logged(service, audit_repository, browser_context):
    outcome = await service.report_csp_violation(_csp("https://evil.example/x.js"), browser_context)

    assert outcome.severity == AuditSeverity.HIGH
    assert outcome.action == ReportAction.LOGGED
    assert outcome.incidents == []
    assert len(audit_repository.saved) == 1
    record = audit_repository.saved[0]
    assert record.action == AuditAction.CSP_VIOLATION
    assert record.record_id == outcome.record_id
    assert record.metadata["is_known_false_positive"] is False
    assert record.metadata["ip_address"] == "203.0.113.45"


async def test_extension_violation_is_low_and_ignored(service, audit_repository, notifier, browser_context):
    outcome = await service.report_csp_violation(_csp("chrome-extension://abc/x.js"), browser_context)

    assert outcome.severity == AuditSeverity.LOW
    assert outcome.action == ReportAction.IGNORED
    assert audit_repository.saved[0].metadata["is_known_false_positive"] is True
    assert audit_repository.saved[0].metadata["false_positive_signature"] == "chrome_extension"
    assert notifier.sent == []


async def test_xss_bearing_violation_adds_one_critical_incident(service, audit_repository, notifier):
    outcome = await service.report_csp_violation(_csp("javascript:alert(document.cookie)"))

    assert outcome.severity == AuditSeverity.HIGH
    assert outcome.incidents == ["XSS_ATTEMPT"]
    incidents = [r for r in audit_repository.saved if r.action == AuditAction.SECURITY_INCIDENT]
    assert len(incidents) == 1
    assert incidents[0].severity == AuditSeverity.CRITICAL
    assert incidents[0].metadata["incident_type"] == "XSS_ATTEMPT"
    assert {n.severity for n in notifier.sent} == {AuditSeverity.HIGH, AuditSeverity.CRITICAL}


async def test_xss_in_source_file_is_detected(service):
    outcome = await service.report_csp_violation(
        _csp("https://cdn.example/app.js", source_file="data:text/html,<script>x</script>")
    )
    assert "XSS_ATTEMPT" in outcome.incidents


async def test_sql_injection_violation_adds_high_incident(service, audit_repository):
    outcome = await service.report_csp_violation(_csp("https://evil.example/?q=union select password"))

    assert outcome.incidents == ["SQL_INJECTION_ATTEMPT"]
    incident = audit_repository.saved[-1]
    assert incident.severity == AuditSeverity.HIGH
    assert incident.metadata["detection_method"] == "CSP_VIOLATION_ANALYSIS"


async def test_medium_violation_skips_pattern_analysis(service, audit_repository):
    outcome = await service.report_csp_violation(_csp("javascript:alert(1)", directive="img-src"))

    assert outcome.severity == AuditSeverity.MEDIUM
    assert outcome.incidents == []
    assert len(audit_repository.saved) == 1


async def test_csp_report_without_violation_is_rejected(service, audit_repository):
    with pytest.raises(DomainValidationError):
        await service.report_csp_violation(CspViolationReport(type="csp-violation"))
    assert audit_repository.saved == []


# ---------- Generic alerts ----------


async def test_critical_alert_is_recorded_and_notified(service, audit_repository, notifier):
    report = SecurityAlertReport(
        type="CRITICAL_VULNERABILITY",
        message="Dependency with known RCE",
        metadata={"package": "left-pad", "api_key": "abc123"},
    )
    outcome = await service.report_alert(report)

    assert outcome.severity == AuditSeverity.CRITICAL
    assert outcome.action == ReportAction.LOGGED
    record = audit_repository.saved[0]
    assert record.action == AuditAction.SECURITY_ALERT
    assert record.metadata["alert_type"] == "CRITICAL_VULNERABILITY"
    assert record.metadata["client_metadata"] == {"package": "left-pad", "api_key": "[REDACTED]"}
    assert len(notifier.sent) == 1
    assert notifier.sent[0].title == "Security Alert: CRITICAL_VULNERABILITY"
    assert notifier.sent[0].description == "Dependency with known RCE"


async def test_low_alert_is_not_notified(service, notifier):
    outcome = await service.report_alert(SecurityAlertReport(type="NEW_DEVICE", message="hello"))
    assert outcome.severity == AuditSeverity.LOW
    assert notifier.sent == []


async def test_alert_missing_message_is_rejected(service, audit_repository):
    with pytest.raises(DomainValidationError):
        await service.report_alert(SecurityAlertReport(type="UNAUTHORIZED_ACCESS"))
    assert audit_repository.saved == []


async def test_notifier_failure_does_not_change_outcome(service, notifier, logger):
    notifier.fail = True
    outcome = await service.report_alert(SecurityAlertReport(type="UNAUTHORIZED_ACCESS", message="x"))

    assert outcome.success is True
    assert outcome.severity == AuditSeverity.HIGH
    assert outcome.record_id is not None
    logged_events = [c.args[0] for c in logger.error.call_args_list]
    assert "alert_notification_failed" in logged_events


async def test_reporter_metadata_cannot_override_recorded_fields(service, audit_repository, browser_context):
    report = SecurityAlertReport(
        type="UNAUTHORIZED_ACCESS",
        message="x",
        metadata={
            "acknowledged_at": "2020-01-01T00:00:00+00:00",
            "acknowledged_by": "attacker",
            "resolved_at": "2020-01-01T00:00:00+00:00",
            "ip_address": "6.6.6.6",
            "correlation_id": "forged",
            "alert_type": "CONFIGURATION_WARNING",
        },
    )
    await service.report_alert(report, browser_context)

    record = audit_repository.saved[0]
    assert AlertState.from_metadata(record.metadata) == AlertState.OPEN
    assert to_alert_view(record).acknowledged is False
    assert record.metadata["ip_address"] == "203.0.113.45"
    assert record.metadata["correlation_id"] == "corr-2"
    assert record.metadata["alert_type"] == "UNAUTHORIZED_ACCESS"
    assert record.metadata["client_metadata"]["ip_address"] == "6.6.6.6"


async def test_new_alert_drops_cached_alert_feeds(service, response_cache):
    await response_cache.set(f"{ALERTS_CACHE_PREFIX}:86400:20", "{}")

    await service.report_alert(SecurityAlertReport(type="NEW_DEVICE", message="low"))
    assert await response_cache.get(f"{ALERTS_CACHE_PREFIX}:86400:20") == "{}"

    await service.report_alert(SecurityAlertReport(type="UNAUTHORIZED_ACCESS", message="high"))
    assert await response_cache.get(f"{ALERTS_CACHE_PREFIX}:86400:20") is None


# ---------- Suspicious activity ----------


async def test_rapid_clicking_80_scores_60_and_logs(service, audit_repository):
    outcome = await service.report_suspicious_activity(SuspiciousActivityReport(type="RAPID_CLICKING", count=80))

    assert outcome.suspicion_score == 60
    assert outcome.action == ReportAction.LOG
    assert outcome.severity == AuditSeverity.HIGH
    assert outcome.escalated is False
    assert len(audit_repository.saved) == 1
    assert audit_repository.saved[0].description == "Rapid clicking detected: 80 clicks in short period"


async def test_activity_metadata_kept_apart_from_counted_fields(service, audit_repository):
    await service.report_suspicious_activity(
        SuspiciousActivityReport(type="RAPID_CLICKING", count=80, metadata={"activity_type": "NONE", "count": 1})
    )
    record = audit_repository.saved[0]
    assert record.metadata["activity_type"] == "RAPID_CLICKING"
    assert record.metadata["count"] == 80
    assert record.metadata["client_metadata"] == {"activity_type": "NONE", "count": 1}


async def test_automated_behavior_escalates_exactly_once(service, audit_repository):
    outcome = await service.report_suspicious_activity(
        SuspiciousActivityReport(type="AUTOMATED_BEHAVIOR", count=1)
    )

    assert outcome.suspicion_score == 80
    assert outcome.action == ReportAction.MONITOR
    assert outcome.escalated is True
    assert [r.action for r in audit_repository.saved] == [
        AuditAction.SUSPICIOUS_ACTIVITY,
        AuditAction.SECURITY_INCIDENT,
    ]
    escalation = audit_repository.saved[1]
    assert escalation.severity == AuditSeverity.HIGH
    assert escalation.metadata["recommended_action"] == "MONITOR_CLOSELY"
    assert escalation.metadata["suspicious_score"] == 80


async def test_unknown_activity_type_is_low_and_not_escalated(service, audit_repository):
    outcome = await service.report_suspicious_activity(SuspiciousActivityReport(type="TAB_SWITCHING", count=-4))
    assert outcome.suspicion_score == 20
    assert outcome.severity == AuditSeverity.LOW
    assert len(audit_repository.saved) == 1


# ---------- Store failure ----------


async def test_store_failure_raises_with_classification(service, audit_repository, notifier):
    audit_repository.available = False
    with pytest.raises(ReportNotRecordedError) as exc_info:
        await service.report_csp_violation(_csp("https://evil.example/x.js"))

    outcome = exc_info.value.outcome
    assert outcome is not None
    assert outcome.success is False
    assert outcome.severity == AuditSeverity.HIGH
    assert outcome.record_id is None
    assert notifier.sent == []
