"""
atlas_intake.api.app

FastAPI app factory for the Atlas intake service.

Responsibilities:
- Resolve the immutable `Policy` once and build the notification dispatcher.
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from atlas_intake import __version__
from atlas_intake.api import pages
from atlas_intake.api.routers.admin import router as admin_router
from atlas_intake.api.routers.dev_auth import router as dev_auth_router
from atlas_intake.api.routers.health import router as health_router
from atlas_intake.api.routers.public import router as public_router
from atlas_intake.db.init_db import init_db
from atlas_intake.db.session import create_engine, create_sessionmaker
from atlas_intake.errors import (
    AuthenticationError,
    AuthorizationError,
    PersistenceError,
    ValidationError,
)
from atlas_intake.notifications.dispatcher import NotificationDispatcher
from atlas_intake.observability.logging import configure_logging, get_logger
from atlas_intake.observability.middleware import RequestContextMiddleware
from atlas_intake.policy import resolve_policy
from atlas_intake.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    notification_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level, env=settings.env)

    # Fail fast on inconsistent configuration.
    policy = resolve_policy(settings)
    dispatcher = NotificationDispatcher(
        settings=policy.notifications,
        company_name=policy.company_name,
        transport=notification_transport,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            auth_mode=policy.auth.mode,
            notifications=dispatcher.describe(),
        )
        # Create the async DB engine and session factory once and stash them on app.state.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Atlas Intake",
        version=__version__,
        docs_url="/docs" if settings.env != "prod" else None,
        openapi_url="/openapi.json" if settings.env != "prod" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.policy = policy
    app.state.dispatcher = dispatcher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(AuthenticationError, _auth_error_handler)
    app.add_exception_handler(AuthorizationError, _auth_error_handler)
    app.add_exception_handler(PersistenceError, _persistence_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(public_router)
    app.include_router(admin_router)
    if settings.env != "prod":
        app.include_router(dev_auth_router)

    return app


async def _validation_error_handler(request: Request, exc: Exception) -> HTMLResponse:
    messages = exc.messages if isinstance(exc, ValidationError) else [str(exc)]
    return HTMLResponse(
        pages.error(title="Please correct the following errors", messages=messages),
        status_code=HTTP_400_BAD_REQUEST,
    )


async def _auth_error_handler(request: Request, exc: Exception) -> HTMLResponse:
    if isinstance(exc, AuthorizationError):
        return HTMLResponse(
            pages.error(title="Forbidden", messages=["You do not have access to this page."]),
            status_code=HTTP_403_FORBIDDEN,
        )
    return HTMLResponse(
        pages.error(title="Unauthorized", messages=["Sign in to access the admin panel."]),
        status_code=HTTP_401_UNAUTHORIZED,
    )


async def _persistence_error_handler(request: Request, exc: Exception) -> HTMLResponse:
    # Details are already logged with the request id; the client gets a generic message.
    log.error("request_failed", error=str(exc))
    return HTMLResponse(
        pages.error(title="Something went wrong", messages=["Database error occurred"]),
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; business logic stays
# in routers/services.
