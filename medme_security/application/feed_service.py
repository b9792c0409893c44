"""Admin security feeds: events, alerts, metrics and raw audit-log queries. Read path only."""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from medme_security.application.audit_repository import AuditQuery, AuditRepository, UserDirectory
from medme_security.application.exceptions import StoreUnavailableError
from medme_security.application.fallback_data import (
    apply_sample_policy,
    sample_alerts,
    sample_events,
    sample_metrics,
    should_substitute,
)
from medme_security.application.normalizer import EVENT_CATEGORIES, to_alert_view, to_event_view
from medme_security.application.response_cache import ResponseCache
from medme_security.domain.models.audit import (
    ALERT_SEVERITIES,
    AuditAction,
    AuditCategory,
    AuditRecord,
    AuditSeverity,
)
from medme_security.domain.schemas.feeds import (
    AlertFeed,
    AuditLogEntry,
    AuditLogPage,
    AuditLogStats,
    EventFeed,
    FeedStatus,
    MetricsSnapshot,
    SecurityMetricsView,
)
from medme_security.domain.validators import validate_audit_query_bounds

ALERTS_CACHE_PREFIX = "security:alerts"
METRICS_CACHE_KEY = "security:metrics"

AUDIT_BASELINE_PER_DAY = 100
DATA_PROTECTION_BASELINE = 89
ACCESS_CONTROL_NO_USERS = 85
THREAT_DETECTION_FLOOR = 50
THREAT_POINTS_PER_EVENT = 2

_ROLE_WEIGHTS = {"admins": 0.1, "doctors": 0.3, "patients": 0.6}
_OVERALL_WEIGHTS = {
    "authentication_health": 0.25,
    "data_protection": 0.25,
    "access_control": 0.2,
    "audit_compliance": 0.15,
    "threat_detection": 0.15,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _round(value: float) -> int:
    """Round half up, matching the dashboard's published figures."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SamplePolicy:
    """When a feed may carry demonstration data instead of real records."""

    on_empty: bool = False
    on_unavailable: bool = True


def audit_log_options() -> Dict[str, List[str]]:
    """Filter vocabularies for the audit-log query screen."""
    return {
        "actions": [a.value for a in AuditAction],
        "categories": [c.value for c in AuditCategory],
        "severities": [s.value for s in AuditSeverity],
    }


def _stats(records: List[AuditRecord]) -> AuditLogStats:
    return AuditLogStats(
        total=len(records),
        categories=dict(Counter(r.category.value for r in records)),
        severities=dict(Counter(r.severity.value for r in records)),
        actions=dict(Counter(r.action.value for r in records)),
    )


class SecurityFeedService:
    """
    Read-side orchestration for the admin security screens. No HTTP, no FastAPI.
    Store failures never propagate: each read reports live, empty or unavailable,
    and sample data is substituted only as the SamplePolicy allows.
    Only live and empty results are cached.
    """

    def __init__(
        self,
        repository: AuditRepository,
        users: UserDirectory,
        cache: ResponseCache,
        logger: logging.Logger,
        *,
        sample_policy: SamplePolicy = SamplePolicy(),
        alert_window_hours: int = 24,
        alert_feed_limit: int = 20,
        alert_cache_ttl_seconds: int = 30,
        metrics_cache_ttl_seconds: int = 60,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._repository = repository
        self._users = users
        self._cache = cache
        self._logger = logger
        self._policy = sample_policy
        self._alert_window = timedelta(hours=alert_window_hours)
        self._alert_limit = alert_feed_limit
        self._alert_ttl = alert_cache_ttl_seconds
        self._metrics_ttl = metrics_cache_ttl_seconds
        self._clock = clock or _utcnow

    async def list_events(self, limit: int = 50, since: Optional[datetime] = None) -> EventFeed:
        now = self._clock()
        query = AuditQuery(categories=EVENT_CATEGORIES, since=since, limit=limit)
        try:
            records = await self._repository.find(query)
        except StoreUnavailableError as e:
            self._log_unavailable("security_events", e)
            feed = EventFeed(status=FeedStatus.UNAVAILABLE)
        else:
            names = await self._display_names(records)
            feed = EventFeed(
                status=FeedStatus.LIVE if records else FeedStatus.EMPTY,
                items=[to_event_view(r, names) for r in records],
            )
        return apply_sample_policy(
            feed,
            sample_events(now),
            on_empty=self._policy.on_empty,
            on_unavailable=self._policy.on_unavailable,
        )

    async def list_alerts(self) -> AlertFeed:
        now = self._clock()
        cache_key = f"{ALERTS_CACHE_PREFIX}:{int(self._alert_window.total_seconds())}:{self._alert_limit}"
        cached = await self._cache.get(cache_key)
        if cached:
            feed = AlertFeed.model_validate_json(cached)
        else:
            feed = await self._load_alerts(now)
            if feed.status != FeedStatus.UNAVAILABLE:
                await self._cache.set(cache_key, feed.model_dump_json(), ttl_seconds=self._alert_ttl)
        return apply_sample_policy(
            feed,
            sample_alerts(now),
            on_empty=self._policy.on_empty,
            on_unavailable=self._policy.on_unavailable,
        )

    async def get_metrics(self) -> MetricsSnapshot:
        cached = await self._cache.get(METRICS_CACHE_KEY)
        if cached:
            snapshot = MetricsSnapshot.model_validate_json(cached)
        else:
            snapshot = await self._compute_metrics(self._clock())
            if snapshot.status != FeedStatus.UNAVAILABLE:
                await self._cache.set(
                    METRICS_CACHE_KEY,
                    snapshot.model_dump_json(),
                    ttl_seconds=self._metrics_ttl,
                )
        if should_substitute(
            snapshot.status,
            on_empty=self._policy.on_empty,
            on_unavailable=self._policy.on_unavailable,
        ):
            snapshot = snapshot.model_copy(update={"metrics": sample_metrics(), "sample": True})
        return snapshot

    async def query_audit_logs(self, query: AuditQuery) -> AuditLogPage:
        """Raw audit-log page for administrators. Raises DomainValidationError on bad bounds."""
        validate_audit_query_bounds(query.limit, query.skip, query.since, query.until)
        try:
            records = await self._repository.find(query)
        except StoreUnavailableError as e:
            self._log_unavailable("audit_logs", e)
            return AuditLogPage(status=FeedStatus.UNAVAILABLE, limit=query.limit, skip=query.skip)
        return AuditLogPage(
            status=FeedStatus.LIVE if records else FeedStatus.EMPTY,
            logs=[AuditLogEntry.model_validate(r.to_dict()) for r in records],
            stats=_stats(records),
            limit=query.limit,
            skip=query.skip,
        )

    async def _load_alerts(self, now: datetime) -> AlertFeed:
        query = AuditQuery(
            severities=ALERT_SEVERITIES,
            since=now - self._alert_window,
            limit=self._alert_limit,
        )
        try:
            records = await self._repository.find(query)
        except StoreUnavailableError as e:
            self._log_unavailable("security_alerts", e)
            return AlertFeed(status=FeedStatus.UNAVAILABLE)
        return AlertFeed(
            status=FeedStatus.LIVE if records else FeedStatus.EMPTY,
            items=[to_alert_view(r) for r in records],
        )

    async def _compute_metrics(self, now: datetime) -> MetricsSnapshot:
        try:
            users = await self._users.counts()
            recent = await self._repository.count(AuditQuery(since=now - timedelta(hours=24)))
        except StoreUnavailableError as e:
            self._log_unavailable("security_metrics", e)
            return MetricsSnapshot(status=FeedStatus.UNAVAILABLE, generated_at=now)

        if users.total > 0:
            authentication_health = _round((users.active + users.verified) / (users.total * 2) * 100)
            weighted = sum(getattr(users, role) * w for role, w in _ROLE_WEIGHTS.items())
            access_control = _round(weighted / users.total * 100)
        else:
            authentication_health = 100
            access_control = ACCESS_CONTROL_NO_USERS

        audit_compliance = min(100, _round(recent.total / AUDIT_BASELINE_PER_DAY * 100))
        security_events = recent.categories.get(AuditCategory.SECURITY.value, 0)
        threat_detection = max(
            THREAT_DETECTION_FLOOR,
            100 - min(THREAT_DETECTION_FLOOR, security_events * THREAT_POINTS_PER_EVENT),
        )
        scores = {
            "authentication_health": authentication_health,
            "data_protection": DATA_PROTECTION_BASELINE,
            "access_control": access_control,
            "audit_compliance": audit_compliance,
            "threat_detection": threat_detection,
        }
        overall = _round(sum(scores[name] * w for name, w in _OVERALL_WEIGHTS.items()))
        empty = users.total == 0 and recent.total == 0
        return MetricsSnapshot(
            status=FeedStatus.EMPTY if empty else FeedStatus.LIVE,
            metrics=SecurityMetricsView(overall_score=overall, **scores),
            generated_at=now,
        )

    async def _display_names(self, records: List[AuditRecord]) -> Dict[str, str]:
        ids = {r.actor_id for r in records if r.actor_id}
        if not ids:
            return {}
        try:
            return await self._users.display_names(ids)
        except StoreUnavailableError as e:
            self._logger.warning(
                "user_lookup_failed",
                extra={"user_count": len(ids), "error": e.message},
            )
            return {}

    def _log_unavailable(self, feed: str, error: StoreUnavailableError) -> None:
        self._logger.error(
            "feed_store_unavailable",
            extra={"feed": feed, "error": error.message},
        )
