"""Inbound security reports: POST /security/alert, /security/csp-violation, /security/suspicious-activity."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from medme_security.api.dependencies import get_report_service, get_request_context
from medme_security.application.exceptions import ReportNotRecordedError
from medme_security.application.report_service import SecurityReportService
from medme_security.domain.schemas.reports import (
    CspViolationReport,
    ReportOutcome,
    SecurityAlertReport,
    SuspiciousActivityReport,
)
from medme_security.security.request_context import RequestContext

router = APIRouter()


def _not_recorded(e: ReportNotRecordedError) -> JSONResponse:
    """503 that still carries the classification computed before the write failed."""
    content = {"detail": e.message}
    if e.outcome is not None:
        content["outcome"] = e.outcome.model_dump(mode="json")
    return JSONResponse(status_code=503, content=content)


@router.post("/alert", response_model=ReportOutcome)
async def report_security_alert(
    body: SecurityAlertReport,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[SecurityReportService, Depends(get_report_service)],
):
    """Generic security alert. Severity from the alert-type table; HIGH/CRITICAL are pushed to the sink."""
    try:
        return await service.report_alert(body, context)
    except ReportNotRecordedError as e:
        return _not_recorded(e)


@router.post("/csp-violation", response_model=ReportOutcome)
async def report_csp_violation(
    body: CspViolationReport,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[SecurityReportService, Depends(get_report_service)],
):
    try:
        return await service.report_csp_violation(body, context)
    except ReportNotRecordedError as e:
        return _not_recorded(e)


@router.post("/suspicious-activity", response_model=ReportOutcome)
async def report_suspicious_activity(
    body: SuspiciousActivityReport,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[SecurityReportService, Depends(get_report_service)],
):
    try:
        return await service.report_suspicious_activity(body, context)
    except ReportNotRecordedError as e:
        return _not_recorded(e)
