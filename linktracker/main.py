"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from linktracker.api.dashboard import router as dashboard_router
from linktracker.api.redirect import router as redirect_router
from linktracker.api.router import router as api_router
from linktracker.core.config import Settings, get_settings
from linktracker.core.database import create_engine, create_session_factory, init_db
from linktracker.core.exceptions import InvalidLinkError, StorageError
from linktracker.core.middleware import (
    ApiCORSMiddleware,
    SecurityHeadersMiddleware,
    parent_domain_origin_regex,
)
from linktracker.core.observability import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    setup_observability,
)
from linktracker.core.rate_limit import limiter
from linktracker.core.redis import LinkCache
from linktracker.services import ClickRecorder, StaticAssetServer

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting Link Tracker", version=settings.app_version)
    if settings.auto_create_tables:
        await init_db(app.state.engine)
        logger.info("Database tables ensured")
    yield

    # Shutdown
    logger.info("Shutting down Link Tracker")
    await app.state.click_recorder.stop()
    await app.state.link_cache.close()
    await app.state.engine.dispose()
    logger.info("Database connections closed")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with the first problem found."""
    errors = exc.errors()
    if errors:
        error = errors[0]
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = f"{field}: {error.get('msg')}" if field else str(error.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


async def invalid_link_handler(request: Request, exc: InvalidLinkError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Hide store failures behind a generic 500."""
    logger.error("Storage failure", error=str(exc), cause=str(exc.__cause__))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its own engine, click writer and cache."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Short link redirects with click analytics",
        lifespan=lifespan,
    )

    # Per-application state shared with request handlers
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.click_recorder = ClickRecorder(session_factory, drain_timeout=settings.click_drain_timeout)
    app.state.link_cache = LinkCache.from_url(settings.redis_url, ttl=settings.link_cache_ttl)
    app.state.asset_server = StaticAssetServer(settings.static_dir)

    # Set up observability (logging, tracing, metrics, Sentry)
    setup_observability(app, settings)

    # Rate limiter state and exception handler
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidLinkError, invalid_link_handler)
    app.add_exception_handler(StorageError, storage_error_handler)

    # Middleware stack (first added = innermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=not settings.debug)

    # CORS for the admin API only, limited to the configured parent domain
    if settings.cors_parent_domain:
        app.add_middleware(
            ApiCORSMiddleware,
            path_prefix="/api",
            allow_origin_regex=parent_domain_origin_regex(settings.cors_parent_domain),
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["Authorization", "Content-Type"],
            expose_headers=["X-Request-ID"],
            max_age=settings.cors_max_age,
        )

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "click_writer": app.state.click_recorder.stats,
        }

    app.include_router(api_router)
    app.include_router(dashboard_router)

    # Catch-all slug route - must be last so every other route takes precedence
    app.include_router(redirect_router)

    return app


def run() -> None:
    """Run the service with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "linktracker.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
