from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import RequestResponseEndpoint

from src.taskflow.api.v1.router import api_router
from src.taskflow.core.config import get_settings
from src.taskflow.core.db import Database
from src.taskflow.core.exceptions import setup_exception_handlers
from src.taskflow.core.health import router as health_router
from src.taskflow.core.health import setup_metrics
from src.taskflow.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from src.taskflow.core.rate_limit import global_rate_limit_middleware, limiter
from src.taskflow.core.redis import close_redis
from src.taskflow.core.security_headers import SecurityHeadersMiddleware
from src.taskflow.core.shutdown import UNTRACKED_PATHS, request_tracker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, env=settings.app_env)

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database.from_settings(settings)
    await app.state.database.connect()

    yield

    grace_period = settings.shutdown_grace_period
    logger.info("Shutdown initiated", in_flight=request_tracker.in_flight_count)
    await request_tracker.start_shutdown()
    if not await request_tracker.wait_for_drain(timeout=grace_period):
        logger.warning(
            "Shutdown timeout, some requests may not have completed",
            grace_period=grace_period,
            in_flight=request_tracker.in_flight_count,
        )

    await close_redis()
    if owns_database:
        await app.state.database.dispose()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and token lifecycle"},
    {"name": "organizations", "description": "Organizations and their members"},
    {"name": "projects", "description": "Organization-scoped projects"},
    {"name": "health", "description": "Liveness and dependency checks"},
]


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application.

    Args:
        database: Pre-built database handle. When omitted, the lifespan
            creates one from settings and disposes it at shutdown.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant task management API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.limiter = limiter

    setup_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Organization-ID", "X-Request-ID"],
    )

    # Per-IP limit for every route; inside the logging context so rejections carry request_id
    app.middleware("http")(global_rate_limit_middleware)

    # Wraps the limiter so 429 responses get the headers too
    app.add_middleware(SecurityHeadersMiddleware)

    @app.middleware("http")
    async def logging_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Bind request_id to log context for all requests."""
        clear_request_context()
        bind_request_context(correlation_id.get())
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    @app.middleware("http")
    async def track_requests_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Track in-flight requests for graceful shutdown."""
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)
        async with request_tracker.track_request():
            return await call_next(request)

    # Added last so it is outermost and request_id exists for everything inside
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)
    app.include_router(health_router)
    setup_metrics(app)

    return app


app = create_app()
