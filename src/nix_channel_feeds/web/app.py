# ABOUTME: FastAPI application factory with feed service lifespan.
# ABOUTME: Main entry point for the on-demand channel feed endpoint.

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from nix_channel_feeds.config import Settings, get_settings
from nix_channel_feeds.service import ChannelFeedService
from nix_channel_feeds.web.routes import feeds, health

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context closing the shared HTTP client."""
    logger.info("app_startup", channels=len(app.state.settings.channels))
    yield
    logger.info("app_shutdown")
    await app.state.feed_service.aclose()


def create_app(
    settings: Settings | None = None,
    feed_service: ChannelFeedService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="nix-channel-feeds",
        description="RSS, Atom and JSON feeds of nixpkgs channel builds",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.feed_service = feed_service or ChannelFeedService(settings)

    app.include_router(health.router)
    app.include_router(feeds.router)

    return app
