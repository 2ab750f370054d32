from __future__ import annotations

"""Application factory for the FastAPI app.

Builds the owned components (store, rate limiter, service), attaches them to
``app.state`` and wires middleware, handlers and routers. Tests pass their
own store/limiter to get an isolated application per test.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from waitlist_api.adapters.rate_limit.base import AbstractRateLimiter
from waitlist_api.adapters.store.base import AbstractWaitlistStore
from waitlist_api.adapters.store.sqlalchemy_store import SqlAlchemyWaitlistStore
from waitlist_api.api.routes import health_router, waitlist_router
from waitlist_api.core.config import Settings, settings as default_settings
from waitlist_api.core.exception_handlers import setup_exception_handlers
from waitlist_api.core.logging import configure_logging
from waitlist_api.core.middleware import (
    build_origin_guard,
    build_request_id_middleware,
    security_headers_middleware,
    unhandled_error_middleware,
)
from waitlist_api.core.rate_limit import build_rate_limiter
from waitlist_api.services.waitlist_service import WaitlistService

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    store: AbstractWaitlistStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; the process-wide settings by default.
        store: Waitlist store; a SQLAlchemy store on DATABASE_URL by default.
        rate_limiter: Limiter; an in-memory fixed-window limiter by default.
        configure_logs: Install the JSON root handler.

    Returns:
        Configured FastAPI app.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(cfg.log)

    if store is None:
        store = SqlAlchemyWaitlistStore.from_settings(cfg.database)
    if rate_limiter is None:
        rate_limiter = build_rate_limiter(cfg.app)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if cfg.database.create_tables:
            store.create_schema()
        logger.info(
            "app.started",
            extra={"environment": cfg.app.environment, "port": cfg.app.port},
        )
        try:
            yield
        finally:
            store.close()
            logger.info("app.stopped")

    app = FastAPI(
        title="Waitlist API",
        description=(
            "Collects waitlist signups (email or phone) from the marketing site, "
            "deduplicated and rate limited per client."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.store = store
    app.state.rate_limiter = rate_limiter
    app.state.waitlist_service = WaitlistService(
        store=store,
        rate_limiter=rate_limiter,
        rate_limit_enabled=cfg.app.rate_limit_enabled,
    )

    # Middleware: the last registered runs first
    app.middleware("http")(unhandled_error_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.app.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", cfg.log.request_id_header],
    )
    app.middleware("http")(build_origin_guard(cfg.app.cors_origins))
    if cfg.app.security_headers_enabled:
        app.middleware("http")(security_headers_middleware)
    app.middleware("http")(build_request_id_middleware(cfg.log.request_id_header))

    setup_exception_handlers(app)

    app.include_router(waitlist_router)
    app.include_router(health_router)

    return app
