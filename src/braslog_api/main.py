# src/braslog_api/main.py
# Copyright (c) Braslog.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and all routers.
    Provides an application factory (`create_app`) and a module-level eager app
    (`app`) for tooling and ASGI servers.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan initializes the database engine and disposes it on shutdown.
    • Observability:
        - Root JSON logging configured at import time.
        - Request-id, access-log and latency middleware installed for every request.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from braslog_api.adapters.routers.api_router import router as api_router
from braslog_api.config.settings import Settings, get_settings
from braslog_api.domain.exceptions.base import DomainError
from braslog_api.infrastructure.database.session import (
    dispose_engine,
    init_engine_and_sessionmaker,
)
from braslog_api.infrastructure.http.errors import (
    handle_domain_error,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from braslog_api.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)
from braslog_api.infrastructure.middleware.access_log import AccessLogMiddleware
from braslog_api.infrastructure.middleware.request_id import RequestIdMiddleware
from braslog_api.infrastructure.middleware.request_metrics import RequestLatencyMiddleware

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
configure_root_logging()
logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__v1_clients_client_id``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------
@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the database engine on startup and dispose it on shutdown."""
    settings = get_settings()
    init_engine_and_sessionmaker(settings)
    app.state.settings = settings
    logger.info("service_ready", extra={"env": settings.environment.value})
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("service_shutdown")


# -----------------------------------------------------------------------------
# Middleware & CORS
# -----------------------------------------------------------------------------
def _attach_middlewares(app: FastAPI) -> None:
    """Attach core middleware.

    Starlette runs the last-added middleware first, so RequestIdMiddleware is
    added last and wraps the access log and latency middleware.
    """
    app.add_middleware(RequestLatencyMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIdMiddleware)


def _attach_cors(app: FastAPI, settings: Settings) -> None:
    """Attach CORS middleware based on settings."""
    allow_origins = settings.cors_allow_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials="*" not in allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "ETag"],
    )


def _attach_exception_handlers(app: FastAPI) -> None:
    """Register structured error handlers (ErrorEnvelope everywhere)."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------
def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings: Settings = get_settings()
    service_name = settings.service_name or "braslog-api"
    service_version = settings.service_version or "0.1.0"

    app = FastAPI(
        title="Braslog API",
        version=service_version,
        description="Logistics KPI entry, monthly pivots and dashboard summaries.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )

    _attach_exception_handlers(app)
    _attach_middlewares(app)
    _attach_cors(app, settings)
    app.include_router(api_router)

    logger.info(
        "service_startup",
        extra={
            "service": service_name,
            "env": settings.environment.value,
            "version": service_version,
            "status": "starting",
        },
    )
    return app


# Eager app for ASGI servers and tooling.
app: FastAPI = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "braslog_api.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
        reload=True,
    )
