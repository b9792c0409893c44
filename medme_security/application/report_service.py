"""Inbound security report handling: validate, classify, score, record, escalate, notify."""

import logging
from typing import Any, Dict, List, Optional

from medme_security.application.audit_logger import AuditLogger
from medme_security.application.exceptions import NotificationError, ReportNotRecordedError, StoreUnavailableError
from medme_security.application.feed_service import ALERTS_CACHE_PREFIX
from medme_security.application.notifier import AlertNotification, AlertNotifier
from medme_security.application.response_cache import ResponseCache
from medme_security.domain.classification import (
    classify_alert_type,
    classify_csp_violation,
    classify_suspicious_activity,
    detect_sql_injection,
    detect_xss,
    requires_escalation,
    suspicion_score,
)
from medme_security.domain.models.audit import AuditAction, AuditCategory, AuditRecord, AuditSeverity
from medme_security.domain.schemas.reports import (
    CspViolation,
    CspViolationReport,
    ReportAction,
    ReportOutcome,
    SecurityAlertReport,
    SuspiciousActivityReport,
)
from medme_security.domain.validators import (
    validate_alert_report,
    validate_csp_report,
    validate_suspicious_activity_report,
)
from medme_security.security.request_context import SYSTEM_CONTEXT, RequestContext

INCIDENT_XSS = "XSS_ATTEMPT"
INCIDENT_SQL_INJECTION = "SQL_INJECTION_ATTEMPT"
INCIDENT_SUSPICION = "HIGH_SUSPICION_SCORE"
DETECTION_CSP_ANALYSIS = "CSP_VIOLATION_ANALYSIS"
RECOMMENDED_MONITOR = "MONITOR_CLOSELY"

# Reporter-supplied metadata is stored under this key and never merged into the record's own fields.
CLIENT_METADATA_KEY = "client_metadata"


def _suspicious_description(activity_type: str, count: int) -> str:
    tag = activity_type.strip().upper()
    if tag == "RAPID_CLICKING":
        return f"Rapid clicking detected: {count} clicks in short period"
    if tag == "UNUSUAL_NAVIGATION":
        return "Unusual navigation pattern detected"
    if tag == "AUTOMATED_BEHAVIOR":
        return "Automated/bot-like behavior detected"
    return f"Suspicious activity: {activity_type}"


def _violation_metadata(report: CspViolationReport, violation: CspViolation) -> Dict[str, Any]:
    return {
        "violation_type": report.type,
        "blocked_uri": violation.blocked_uri,
        "violated_directive": violation.violated_directive,
        "original_policy": violation.original_policy,
        "source_file": violation.source_file,
        "line_number": violation.line_number,
        "column_number": violation.column_number,
        "report_timestamp": report.timestamp,
    }


class SecurityReportService:
    """
    Entry points for the three inbound report kinds. No HTTP, no FastAPI.
    Audit writes are the primary path: a failed write raises ReportNotRecordedError
    carrying the computed outcome. Notification is secondary: failures are logged only.
    """

    def __init__(
        self,
        audit_logger: AuditLogger,
        notifier: AlertNotifier,
        logger: logging.Logger,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        self._audit = audit_logger
        self._notifier = notifier
        self._logger = logger
        self._cache = cache

    async def report_alert(
        self,
        report: SecurityAlertReport,
        context: RequestContext = SYSTEM_CONTEXT,
    ) -> ReportOutcome:
        validate_alert_report(report)
        alert_type = report.type.strip()
        severity = classify_alert_type(alert_type)
        outcome = ReportOutcome(
            message="Security alert processed",
            severity=severity,
            action=ReportAction.LOGGED,
        )

        metadata: Dict[str, Any] = {
            "alert_type": alert_type,
            "original_message": report.message,
            "alert_timestamp": report.timestamp,
        }
        if report.metadata:
            metadata[CLIENT_METADATA_KEY] = dict(report.metadata)
        record = await self._write(
            outcome,
            action=AuditAction.SECURITY_ALERT,
            severity=severity,
            description=f"Security alert: {alert_type} - {report.message}",
            context=context,
            metadata=metadata,
        )
        outcome.record_id = record.record_id
        await self._notify(record, title=f"Security Alert: {alert_type}", description=report.message)
        self._log_outcome("security_alert", outcome)
        return outcome

    async def report_csp_violation(
        self,
        report: CspViolationReport,
        context: RequestContext = SYSTEM_CONTEXT,
    ) -> ReportOutcome:
        validate_csp_report(report)
        violation = report.violation
        classification = classify_csp_violation(violation.violated_directive, violation.blocked_uri)
        outcome = ReportOutcome(
            message="CSP violation reported",
            severity=classification.severity,
            action=ReportAction.IGNORED if classification.is_false_positive else ReportAction.LOGGED,
        )

        metadata = _violation_metadata(report, violation)
        metadata["is_known_false_positive"] = classification.is_false_positive
        if classification.false_positive is not None:
            metadata["false_positive_signature"] = classification.false_positive.name
        record = await self._write(
            outcome,
            action=AuditAction.CSP_VIOLATION,
            severity=classification.severity,
            description=f"CSP violation: {violation.violated_directive} blocked {violation.blocked_uri}",
            context=context,
            metadata=metadata,
        )
        outcome.record_id = record.record_id
        await self._notify(record, title="CSP Violation")

        if classification.severity == AuditSeverity.HIGH and not classification.is_false_positive:
            await self._analyze_violation(outcome, violation, context)

        self._log_outcome("csp_violation", outcome)
        return outcome

    async def report_suspicious_activity(
        self,
        report: SuspiciousActivityReport,
        context: RequestContext = SYSTEM_CONTEXT,
    ) -> ReportOutcome:
        validate_suspicious_activity_report(report)
        activity_type = report.type.strip()
        severity = classify_suspicious_activity(activity_type, report.count)
        score = suspicion_score(activity_type, report.count)
        escalated = requires_escalation(score)
        outcome = ReportOutcome(
            message="Suspicious activity reported",
            severity=severity,
            action=ReportAction.MONITOR if escalated else ReportAction.LOG,
            suspicion_score=score,
            escalated=escalated,
        )

        metadata: Dict[str, Any] = {
            "activity_type": activity_type,
            "count": report.count,
            "report_timestamp": report.timestamp,
        }
        if report.metadata:
            metadata[CLIENT_METADATA_KEY] = dict(report.metadata)
        record = await self._write(
            outcome,
            action=AuditAction.SUSPICIOUS_ACTIVITY,
            severity=severity,
            description=_suspicious_description(activity_type, report.count),
            context=context,
            metadata=metadata,
        )
        outcome.record_id = record.record_id
        await self._notify(record, title=f"Suspicious Activity: {activity_type}")

        if escalated:
            incident = await self._write(
                outcome,
                action=AuditAction.SECURITY_INCIDENT,
                severity=classify_alert_type("SUSPICIOUS_ACTIVITY"),
                description=f"High suspicious activity score: {score}",
                context=context,
                metadata={
                    "incident_type": INCIDENT_SUSPICION,
                    "suspicious_score": score,
                    "activity_type": activity_type,
                    "source_record_id": record.record_id,
                    "recommended_action": RECOMMENDED_MONITOR,
                },
            )
            outcome.incidents.append(INCIDENT_SUSPICION)
            await self._notify(incident, title="High Suspicious Activity Score")

        self._log_outcome("suspicious_activity", outcome)
        return outcome

    async def _analyze_violation(
        self,
        outcome: ReportOutcome,
        violation: CspViolation,
        context: RequestContext,
    ) -> None:
        """Attack signatures on a HIGH, non-noise violation each add one incident record."""
        xss = detect_xss(violation.blocked_uri, violation.source_file)
        if xss is not None:
            incident = await self._write(
                outcome,
                action=AuditAction.SECURITY_INCIDENT,
                severity=AuditSeverity.CRITICAL,
                description="Potential XSS attempt detected via CSP violation",
                context=context,
                metadata={
                    "incident_type": INCIDENT_XSS,
                    "signature": xss.name,
                    "blocked_uri": violation.blocked_uri,
                    "violated_directive": violation.violated_directive,
                    "source_file": violation.source_file,
                    "detection_method": DETECTION_CSP_ANALYSIS,
                },
            )
            outcome.incidents.append(INCIDENT_XSS)
            await self._notify(incident, title="Potential XSS Attempt")

        injection = detect_sql_injection(violation.blocked_uri)
        if injection is not None:
            incident = await self._write(
                outcome,
                action=AuditAction.SECURITY_INCIDENT,
                severity=AuditSeverity.HIGH,
                description="Potential SQL injection attempt detected via CSP violation",
                context=context,
                metadata={
                    "incident_type": INCIDENT_SQL_INJECTION,
                    "signature": injection.name,
                    "blocked_uri": violation.blocked_uri,
                    "detection_method": DETECTION_CSP_ANALYSIS,
                },
            )
            outcome.incidents.append(INCIDENT_SQL_INJECTION)
            await self._notify(incident, title="Potential SQL Injection Attempt")

    async def _write(
        self,
        outcome: ReportOutcome,
        *,
        action: AuditAction,
        severity: AuditSeverity,
        description: str,
        context: RequestContext,
        metadata: Dict[str, Any],
    ) -> AuditRecord:
        try:
            record = await self._audit.record(
                action=action,
                category=AuditCategory.SECURITY,
                severity=severity,
                description=description,
                context=context,
                metadata=metadata,
            )
        except StoreUnavailableError as e:
            self._logger.error(
                "report_not_recorded",
                extra={
                    "action": action.value,
                    "severity": severity.value,
                    "error": e.message,
                },
            )
            outcome.success = False
            raise ReportNotRecordedError(
                f"Report classified as {outcome.severity.value} but could not be recorded",
                outcome=outcome,
            ) from e
        if record.is_alert and self._cache is not None:
            # A new alert must show up in the next alert-feed read.
            await self._cache.invalidate_prefix(ALERTS_CACHE_PREFIX)
        return record

    async def _notify(
        self,
        record: AuditRecord,
        *,
        title: str,
        description: Optional[str] = None,
    ) -> None:
        if not record.is_alert:
            return
        notification = AlertNotification(
            title=title,
            description=description or record.description,
            severity=record.severity,
            record_id=record.record_id,
            metadata=dict(record.metadata),
        )
        try:
            await self._notifier.notify(notification)
        except NotificationError as e:
            self._logger.error(
                "alert_notification_failed",
                extra={"record_id": record.record_id, "error": e.message},
            )
            # Do not re-raise: notification failure does not fail the report.
        except Exception as e:
            self._logger.exception(
                "alert_notification_failed",
                extra={"record_id": record.record_id, "error": str(e)},
            )

    def _log_outcome(self, kind: str, outcome: ReportOutcome) -> None:
        incidents: List[str] = list(outcome.incidents)
        self._logger.info(
            "report_classified",
            extra={
                "report_kind": kind,
                "record_id": outcome.record_id,
                "severity": outcome.severity.value,
                "action": outcome.action.value,
                "suspicion_score": outcome.suspicion_score,
                "incidents": incidents,
            },
        )
