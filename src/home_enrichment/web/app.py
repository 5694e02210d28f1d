"""FastAPI application factory with background cache maintenance."""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from home_enrichment.config import Settings
from home_enrichment.db import CacheStorage
from home_enrichment.enrichment import PropertyEnricher
from home_enrichment.logging import configure_logging, get_logger

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


async def _sweep_loop(storage: CacheStorage, interval_minutes: int) -> None:
    """Delete expired cache entries on a recurring schedule."""
    while True:
        await asyncio.sleep(interval_minutes * 60)
        removed = await storage.sweep_expired()
        logger.info("cache_sweep_scheduled_run", removed=removed)


def create_app(settings: Settings | None = None, *, run_sweeper: bool = True) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings. Loaded from env if not provided.
        run_sweeper: Whether to start the background cache sweeper.
    """
    if settings is None:
        settings = Settings()

    configure_logging(json_output=False)

    storage = CacheStorage(
        settings.database_path,
        profile_ttl=settings.profile_cache_ttl,
        weather_ttl=settings.weather_cache_ttl,
    )
    sweep_task: asyncio.Task[None] | None = None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        nonlocal sweep_task
        await storage.initialize()
        enricher = PropertyEnricher(settings, storage=storage)
        app.state.storage = storage
        app.state.settings = settings
        app.state.enricher = enricher

        if run_sweeper:
            sweep_task = asyncio.create_task(
                _sweep_loop(storage, settings.cache_sweep_interval_minutes)
            )
            logger.info(
                "web_server_started",
                sweep_interval=settings.cache_sweep_interval_minutes,
            )
        else:
            logger.info("web_server_started", sweeper="disabled")

        yield

        # Shutdown
        if sweep_task:
            sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweep_task
        await enricher.close()
        await storage.close()
        logger.info("web_server_stopped")

    app = FastAPI(title="Home Enrichment", lifespan=lifespan)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    # Register routes
    from home_enrichment.web.routes import router

    app.include_router(router)

    return app
