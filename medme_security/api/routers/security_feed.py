"""Admin security feeds: GET /security/events, /security/alerts, /security/metrics."""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from medme_security.api.dependencies import get_feed_service, require_capability
from medme_security.application.feed_service import SecurityFeedService
from medme_security.domain.schemas.feeds import AlertFeed, EventFeed, MetricsSnapshot
from medme_security.security.rbac import Capability
from medme_security.security.request_context import RequestContext

router = APIRouter()

FeedReader = Annotated[RequestContext, Depends(require_capability(Capability.SECURITY_FEED_READ))]


@router.get("/events", response_model=EventFeed)
async def list_security_events(
    _: FeedReader,
    service: Annotated[SecurityFeedService, Depends(get_feed_service)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 50,
    since_hours: Annotated[Optional[int], Query(ge=1)] = None,
):
    since = datetime.now(timezone.utc) - timedelta(hours=since_hours) if since_hours else None
    return await service.list_events(limit=limit, since=since)


@router.get("/alerts", response_model=AlertFeed)
async def list_security_alerts(
    _: FeedReader,
    service: Annotated[SecurityFeedService, Depends(get_feed_service)],
):
    """HIGH / CRITICAL records from the alert window, newest first."""
    return await service.list_alerts()


@router.get("/metrics", response_model=MetricsSnapshot)
async def get_security_metrics(
    _: FeedReader,
    service: Annotated[SecurityFeedService, Depends(get_feed_service)],
):
    return await service.get_metrics()
