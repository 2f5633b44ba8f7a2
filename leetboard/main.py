import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from leetboard.api.routes.activity import router as activity_router
from leetboard.api.routes.health import router as health_router
from leetboard.api.routes.leaderboard import router as leaderboard_router
from leetboard.api.routes.profiles import router as profiles_router
from leetboard.core.middleware import UpstreamRateLimitMiddleware
from leetboard.core.observability import configure_logging
from leetboard.core.observability import init_sentry
from leetboard.db import create_tables
from leetboard.settings import Settings


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    create_tables()
    logger.info("Leaderboard service started")
    yield


def create_app() -> FastAPI:
    """Build the FastAPI application from current environment settings."""

    settings = Settings()
    configure_logging(settings)
    init_sentry(settings)

    app = FastAPI(title="LeetCode Leaderboard", lifespan=lifespan)
    app.add_middleware(
        UpstreamRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.include_router(health_router)
    app.include_router(profiles_router)
    app.include_router(leaderboard_router)
    app.include_router(activity_router)
    return app


app = create_app()
