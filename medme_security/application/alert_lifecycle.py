"""Acknowledge / resolve for admin alerts. Compare-and-swap on record version; audit trail. No FastAPI."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from medme_security.application.audit_logger import AuditLogger
from medme_security.application.audit_repository import AuditRepository
from medme_security.application.exceptions import AlertConflictError, AlertNotFoundError
from medme_security.application.feed_service import ALERTS_CACHE_PREFIX
from medme_security.application.normalizer import to_alert_view
from medme_security.application.response_cache import ResponseCache
from medme_security.domain.models.alert import AlertState, transition_metadata
from medme_security.domain.models.audit import AuditAction, AuditCategory, AuditSeverity
from medme_security.domain.schemas.feeds import SecurityAlertView
from medme_security.security.rbac import Capability, RBACService
from medme_security.security.request_context import RequestContext

_AUDIT_ACTIONS = {
    AlertState.ACKNOWLEDGED: (AuditAction.SECURITY_ALERT_ACKNOWLEDGED, "acknowledged"),
    AlertState.RESOLVED: (AuditAction.SECURITY_ALERT_RESOLVED, "resolved"),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AlertLifecycleService:
    """
    OPEN -> ACKNOWLEDGED -> RESOLVED, with OPEN -> RESOLVED allowed.
    Enforces SECURITY_ALERT_MANAGE. A lost race or a stale expected_version raises
    AlertConflictError; nothing is retried. Repeating a satisfied transition is a no-op.
    """

    def __init__(
        self,
        repository: AuditRepository,
        audit_logger: AuditLogger,
        cache: ResponseCache,
        rbac: RBACService,
        logger: logging.Logger,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._repo = repository
        self._audit = audit_logger
        self._cache = cache
        self._rbac = rbac
        self._logger = logger
        self._clock = clock or _utcnow

    async def acknowledge(
        self,
        alert_id: str,
        context: RequestContext,
        expected_version: Optional[int] = None,
    ) -> SecurityAlertView:
        return await self._transition(alert_id, AlertState.ACKNOWLEDGED, context, expected_version)

    async def resolve(
        self,
        alert_id: str,
        context: RequestContext,
        expected_version: Optional[int] = None,
    ) -> SecurityAlertView:
        """Resolving an open alert acknowledges it in the same write."""
        return await self._transition(alert_id, AlertState.RESOLVED, context, expected_version)

    async def _transition(
        self,
        alert_id: str,
        target: AlertState,
        context: RequestContext,
        expected_version: Optional[int],
    ) -> SecurityAlertView:
        self._rbac.check_capability(context.actor_id, context.role, Capability.SECURITY_ALERT_MANAGE)
        record = await self._repo.get(alert_id)
        if record is None or not record.is_alert:
            raise AlertNotFoundError(f"Security alert not found: {alert_id}")
        if expected_version is not None and expected_version != record.version:
            raise AlertConflictError(
                f"Security alert {alert_id} is at version {record.version}, expected {expected_version}"
            )

        updated_metadata = transition_metadata(
            record.metadata,
            target,
            actor_id=context.actor_id,
            at=self._clock(),
        )
        if updated_metadata is None:
            self._logger.info(
                "alert_transition_noop",
                extra={"alert_id": alert_id, "target_state": target.value, "version": record.version},
            )
            return to_alert_view(record)

        updated = await self._repo.update_metadata(alert_id, record.version, updated_metadata)
        if updated is None:
            self._logger.warning(
                "alert_transition_conflict",
                extra={"alert_id": alert_id, "target_state": target.value, "version": record.version},
            )
            raise AlertConflictError(f"Security alert {alert_id} was modified concurrently")

        dropped = await self._cache.invalidate_prefix(ALERTS_CACHE_PREFIX)
        self._logger.info(
            "alert_transitioned",
            extra={
                "alert_id": alert_id,
                "target_state": target.value,
                "version": updated.version,
                "cache_entries_dropped": dropped,
            },
        )

        action, verb = _AUDIT_ACTIONS[target]
        await self._audit.record_best_effort(
            action=action,
            category=AuditCategory.SECURITY,
            severity=AuditSeverity.LOW,
            description=f"Security alert {verb}: {alert_id}",
            context=context,
            metadata={
                "alert_id": alert_id,
                "original_severity": record.severity.value,
                "original_action": record.action.value,
            },
        )
        return to_alert_view(updated)
