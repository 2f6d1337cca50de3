# ABOUTME: FastAPI dependency injection for settings and the feed service.
# ABOUTME: Provides reusable dependencies for route handlers.

from typing import Annotated

from fastapi import Depends, Request

from nix_channel_feeds.config import Settings
from nix_channel_feeds.service import ChannelFeedService


def get_app_settings(request: Request) -> Settings:
    """Get settings from app state."""
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_feed_service(request: Request) -> ChannelFeedService:
    """Get the shared feed service from app state."""
    return request.app.state.feed_service


FeedService = Annotated[ChannelFeedService, Depends(get_feed_service)]
