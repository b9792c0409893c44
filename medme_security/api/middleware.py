"""API middleware: correlation ID, request context, audit trigger."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from medme_security.core.context import actor_id_ctx, correlation_id_ctx
from medme_security.security.rbac import Role
from medme_security.security.request_context import RequestContext

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
ACTOR_HEADER = "X-Actor-ID"
ROLE_HEADER = "X-Actor-Role"
FORWARDED_FOR_HEADER = "X-Forwarded-For"
REAL_IP_HEADER = "X-Real-IP"


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get(FORWARDED_FOR_HEADER)
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get(REAL_IP_HEADER)
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return request.client.host if request.client else None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Build the RequestContext once from gateway identity headers and client info.
    Identity headers are trusted: the upstream gateway strips them from client traffic.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        actor_id = (request.headers.get(ACTOR_HEADER) or "").strip() or None
        context = RequestContext(
            actor_id=actor_id,
            role=Role.parse(request.headers.get(ROLE_HEADER)) if actor_id else None,
            ip_address=client_ip(request),
            user_agent=request.headers.get("user-agent"),
            endpoint=request.url.path,
            method=request.method,
            correlation_id=getattr(request.state, "correlation_id", None),
        )
        request.state.request_context = context
        actor_id_ctx.set(actor_id)
        return await call_next(request)


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """After response: log structured audit event (correlation_id, actor_id, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        context = getattr(request.state, "request_context", None)
        audit_event = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "actor_id": context.actor_id if context else None,
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info(json.dumps(audit_event))
        return response
