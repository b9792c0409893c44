# medme_security/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from medme_security.api.dependencies import close_resources
from medme_security.api.middleware import (
    AuditTriggerMiddleware,
    CorrelationIdMiddleware,
    RequestContextMiddleware,
)
from medme_security.api.routers import alerts, audit_logs, health, reports, security_feed
from medme_security.application.exceptions import (
    AlertConflictError,
    AlertNotFoundError,
    ApplicationError,
    StoreUnavailableError,
)
from medme_security.config.logging import configure_logging
from medme_security.config.settings import get_settings
from medme_security.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidAlertTransitionError,
)
from medme_security.security.exceptions import AuthenticationError, AuthorizationError

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_resources()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> RequestContext -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(InvalidAlertTransitionError)
async def invalid_transition_error_handler(request, exc: InvalidAlertTransitionError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"detail": exc.message})


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request, exc: AuthorizationError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(AlertNotFoundError)
async def alert_not_found_error_handler(request, exc: AlertNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(AlertConflictError)
async def alert_conflict_error_handler(request, exc: AlertConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_error_handler(request, exc: StoreUnavailableError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /security (reports, feeds, alert lifecycle), /admin
app.include_router(health.router)
app.include_router(reports.router, prefix="/security")
app.include_router(security_feed.router, prefix="/security")
app.include_router(alerts.router, prefix="/security")
app.include_router(audit_logs.router, prefix="/admin")
