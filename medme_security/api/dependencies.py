"""FastAPI dependency injection: cache, notifier, services, request context, capability checks."""

import logging
from typing import Annotated, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from medme_security.application.alert_lifecycle import AlertLifecycleService
from medme_security.application.audit_logger import AuditLogger
from medme_security.application.feed_service import SamplePolicy, SecurityFeedService
from medme_security.application.notifier import AlertNotifier
from medme_security.application.report_service import SecurityReportService
from medme_security.application.response_cache import ResponseCache
from medme_security.config.settings import get_settings
from medme_security.infrastructure.alerting.null_notifier import NullAlertNotifier
from medme_security.infrastructure.alerting.rabbitmq_notifier import RabbitMQAlertNotifier
from medme_security.infrastructure.alerting.webhook_notifier import WebhookAlertNotifier
from medme_security.infrastructure.cache.redis_client import RedisClient
from medme_security.infrastructure.cache.response_cache import InMemoryResponseCache, RedisResponseCache
from medme_security.infrastructure.database.audit_repository_db import SqlAuditRepository
from medme_security.infrastructure.database.session import get_db, get_engine
from medme_security.infrastructure.database.user_directory_db import SqlUserDirectory
from medme_security.security.rbac import Capability, RBACService
from medme_security.security.request_context import RequestContext

_redis_client: RedisClient | None = None
_response_cache: ResponseCache | None = None
_notifier: AlertNotifier | None = None
_rbac = RBACService()


def get_redis_client() -> RedisClient:
    """Return singleton Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client


def get_response_cache() -> ResponseCache:
    """Return the process-wide response cache for the configured backend."""
    global _response_cache
    if _response_cache is None:
        settings = get_settings()
        if settings.cache_backend == "redis":
            _response_cache = RedisResponseCache(
                redis_client=get_redis_client(),
                logger=logging.getLogger("medme_security.cache"),
                default_ttl_seconds=settings.cache_default_ttl_seconds,
            )
        else:
            _response_cache = InMemoryResponseCache(
                max_entries=settings.cache_max_entries,
                default_ttl_seconds=settings.cache_default_ttl_seconds,
            )
    return _response_cache


def get_alert_notifier() -> AlertNotifier:
    """Return singleton outbound alert sink for the configured backend."""
    global _notifier
    if _notifier is None:
        settings = get_settings()
        logger = logging.getLogger("medme_security.alerting")
        if settings.alert_sink == "webhook" and settings.alert_webhook_url:
            _notifier = WebhookAlertNotifier(
                url=settings.alert_webhook_url,
                logger=logger,
                environment=settings.environment,
            )
        elif settings.alert_sink == "rabbitmq":
            _notifier = RabbitMQAlertNotifier(logger=logger)
        else:
            _notifier = NullAlertNotifier(logger=logger)
    return _notifier


async def close_resources() -> None:
    """Close process-wide connections. Called on application shutdown."""
    global _redis_client, _response_cache, _notifier
    if isinstance(_notifier, RabbitMQAlertNotifier):
        await _notifier.close()
    if _redis_client is not None:
        await _redis_client.close()
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
    _redis_client = None
    _response_cache = None
    _notifier = None


def get_rbac_service() -> RBACService:
    return _rbac


def get_request_context(request: Request) -> RequestContext:
    """RequestContext built by RequestContextMiddleware; empty context if the middleware did not run."""
    return getattr(request.state, "request_context", None) or RequestContext(
        endpoint=request.url.path,
        method=request.method,
        correlation_id=getattr(request.state, "correlation_id", None),
    )


def require_capability(capability: Capability) -> Callable[..., RequestContext]:
    """Route dependency: 401 without an actor, 403 without the capability."""

    def _check(
        context: Annotated[RequestContext, Depends(get_request_context)],
        rbac: Annotated[RBACService, Depends(get_rbac_service)],
    ) -> RequestContext:
        rbac.check_capability(context.actor_id, context.role, capability)
        return context

    return _check


async def get_audit_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> SqlAuditRepository:
    return SqlAuditRepository(session=db)


async def get_user_directory(db: Annotated[AsyncSession, Depends(get_db)]) -> SqlUserDirectory:
    return SqlUserDirectory(session=db)


async def get_audit_logger(
    repository: Annotated[SqlAuditRepository, Depends(get_audit_repository)],
) -> AuditLogger:
    return AuditLogger(repository=repository, logger=logging.getLogger("medme_security.audit"))


async def get_report_service(
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
    notifier: Annotated[AlertNotifier, Depends(get_alert_notifier)],
    cache: Annotated[ResponseCache, Depends(get_response_cache)],
) -> SecurityReportService:
    """Build SecurityReportService with injected audit logger, notifier, cache, logger."""
    return SecurityReportService(
        audit_logger=audit_logger,
        notifier=notifier,
        logger=logging.getLogger("medme_security.reports"),
        cache=cache,
    )


async def get_feed_service(
    repository: Annotated[SqlAuditRepository, Depends(get_audit_repository)],
    users: Annotated[SqlUserDirectory, Depends(get_user_directory)],
    cache: Annotated[ResponseCache, Depends(get_response_cache)],
) -> SecurityFeedService:
    settings = get_settings()
    return SecurityFeedService(
        repository=repository,
        users=users,
        cache=cache,
        logger=logging.getLogger("medme_security.feeds"),
        sample_policy=SamplePolicy(
            on_empty=settings.feed_sample_on_empty,
            on_unavailable=settings.feed_sample_on_unavailable,
        ),
        alert_window_hours=settings.alert_window_hours,
        alert_feed_limit=settings.alert_feed_limit,
        alert_cache_ttl_seconds=settings.alert_feed_cache_ttl_seconds,
        metrics_cache_ttl_seconds=settings.metrics_cache_ttl_seconds,
    )


async def get_alert_lifecycle_service(
    repository: Annotated[SqlAuditRepository, Depends(get_audit_repository)],
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
    cache: Annotated[ResponseCache, Depends(get_response_cache)],
    rbac: Annotated[RBACService, Depends(get_rbac_service)],
) -> AlertLifecycleService:
    return AlertLifecycleService(
        repository=repository,
        audit_logger=audit_logger,
        cache=cache,
        rbac=rbac,
        logger=logging.getLogger("medme_security.alerts"),
    )
