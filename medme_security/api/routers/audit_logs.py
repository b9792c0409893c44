"""Audit-log query for administrators: GET /admin/audit-logs, GET /admin/audit-logs/options."""

from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from medme_security.api.dependencies import get_feed_service, require_capability
from medme_security.application.audit_repository import AuditQuery
from medme_security.application.feed_service import SecurityFeedService, audit_log_options
from medme_security.domain.models.audit import AuditAction, AuditCategory, AuditSeverity
from medme_security.domain.schemas.feeds import AuditLogPage
from medme_security.security.rbac import Capability
from medme_security.security.request_context import RequestContext

router = APIRouter()

AuditReader = Annotated[RequestContext, Depends(require_capability(Capability.AUDIT_LOG_READ))]


@router.get("/audit-logs", response_model=AuditLogPage)
async def query_audit_logs(
    _: AuditReader,
    service: Annotated[SecurityFeedService, Depends(get_feed_service)],
    actor_id: Optional[str] = None,
    action: Optional[AuditAction] = None,
    category: Optional[AuditCategory] = None,
    severity: Optional[AuditSeverity] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: int = 100,
    skip: int = 0,
):
    """Filtered page, newest first. limit must be 1-1000 and skip non-negative."""
    query = AuditQuery(
        actor_id=actor_id,
        actions=frozenset({action}) if action else frozenset(),
        categories=frozenset({category}) if category else frozenset(),
        severities=frozenset({severity}) if severity else frozenset(),
        since=start,
        until=end,
        limit=limit,
        skip=skip,
    )
    return await service.query_audit_logs(query)


@router.get("/audit-logs/options")
async def get_audit_log_options(_: AuditReader):
    return audit_log_options()
