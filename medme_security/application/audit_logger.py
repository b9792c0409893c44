"""Immutable audit recording for security-relevant occurrences. No FastAPI."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from medme_security.application.audit_repository import AuditRepository
from medme_security.application.exceptions import StoreUnavailableError
from medme_security.domain.models.audit import (
    AuditAction,
    AuditCategory,
    AuditRecord,
    AuditSeverity,
)
from medme_security.security.request_context import SYSTEM_CONTEXT, RequestContext

REDACTED = "[REDACTED]"
SENSITIVE_KEY_FRAGMENTS = ("password", "token", "secret", "key")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def sanitize_metadata(value: Any) -> Any:
    """Redact values under sensitive keys, recursing into nested mappings and lists."""
    if isinstance(value, Mapping):
        return {
            k: REDACTED if _is_sensitive(str(k)) else sanitize_metadata(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [sanitize_metadata(v) for v in value]
    return value


class AuditLogger:
    """
    Writes immutable audit records via repository.
    Each record carries who, what, when (UTC), request context and sanitised metadata.
    """

    def __init__(
        self,
        repository: AuditRepository,
        logger: logging.Logger,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._repository = repository
        self._logger = logger
        self._clock = clock or _utcnow

    async def record(
        self,
        *,
        action: AuditAction,
        category: AuditCategory,
        severity: AuditSeverity,
        description: str,
        context: RequestContext = SYSTEM_CONTEXT,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> AuditRecord:
        """Build and persist one record. Raises StoreUnavailableError if the write fails."""
        merged: Dict[str, Any] = sanitize_metadata(dict(metadata or {}))
        # Request context is written last; callers cannot override who or where.
        merged.update(context.audit_metadata())
        record = AuditRecord(
            record_id=str(uuid.uuid4()),
            action=action,
            category=category,
            severity=severity,
            description=description,
            timestamp_utc=self._clock(),
            actor_id=context.actor_id,
            metadata=merged,
        )
        await self._repository.save(record)
        self._logger.info(
            "audit_recorded",
            extra={
                "record_id": record.record_id,
                "action": action.value,
                "category": category.value,
                "severity": severity.value,
            },
        )
        return record

    async def record_best_effort(self, **kwargs: Any) -> Optional[AuditRecord]:
        """Same as record(), but a store failure is logged and None returned."""
        try:
            return await self.record(**kwargs)
        except StoreUnavailableError as e:
            action = kwargs.get("action")
            self._logger.error(
                "audit_record_failed",
                extra={
                    "action": action.value if isinstance(action, AuditAction) else action,
                    "error": e.message,
                },
            )
            return None
