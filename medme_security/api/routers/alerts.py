"""Alert lifecycle: POST /security/alerts/{alert_id}/acknowledge and /resolve."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from medme_security.api.dependencies import get_alert_lifecycle_service, require_capability
from medme_security.application.alert_lifecycle import AlertLifecycleService
from medme_security.domain.schemas.feeds import AlertActionRequest, SecurityAlertView
from medme_security.security.rbac import Capability
from medme_security.security.request_context import RequestContext

router = APIRouter()

AlertManager = Annotated[RequestContext, Depends(require_capability(Capability.SECURITY_ALERT_MANAGE))]


def _expected_version(body: Optional[AlertActionRequest]) -> Optional[int]:
    return body.expected_version if body is not None else None


@router.post("/alerts/{alert_id}/acknowledge", response_model=SecurityAlertView)
async def acknowledge_alert(
    alert_id: str,
    context: AlertManager,
    service: Annotated[AlertLifecycleService, Depends(get_alert_lifecycle_service)],
    body: Optional[AlertActionRequest] = None,
):
    """Idempotent: acknowledging an acknowledged or resolved alert changes nothing."""
    return await service.acknowledge(alert_id, context, _expected_version(body))


@router.post("/alerts/{alert_id}/resolve", response_model=SecurityAlertView)
async def resolve_alert(
    alert_id: str,
    context: AlertManager,
    service: Annotated[AlertLifecycleService, Depends(get_alert_lifecycle_service)],
    body: Optional[AlertActionRequest] = None,
):
    """Resolving an open alert also acknowledges it."""
    return await service.resolve(alert_id, context, _expected_version(body))
