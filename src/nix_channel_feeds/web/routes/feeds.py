# ABOUTME: On-demand feed route serving one channel in one format per request.
# ABOUTME: Maps fetch, parse and render errors onto 400/404/500 plain text responses.

import structlog
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from nix_channel_feeds.exceptions import (
    ChannelFeedError,
    SerializationError,
    UnknownChannelError,
    UnknownFormatError,
)
from nix_channel_feeds.feeds.serializers import serialize
from nix_channel_feeds.models import FeedFormat
from nix_channel_feeds.web.dependencies import AppSettings, FeedService

router = APIRouter()
log = structlog.get_logger()


@router.get("/", response_class=Response)
async def channel_feed(
    settings: AppSettings,
    feed_service: FeedService,
    channel: str = "",
    format: str = "",
):
    """Feed for ?channel=<name>&format=<rss|atom|json>."""
    log.info("feed_requested", channel=channel, format=format)

    try:
        fmt = FeedFormat.parse(format)
    except UnknownFormatError as e:
        return PlainTextResponse(str(e), status_code=404)

    if not feed_service.is_known_channel(channel):
        return PlainTextResponse(str(UnknownChannelError(channel)), status_code=404)

    try:
        feed = await feed_service.get_feed(channel)
    except ChannelFeedError as e:
        log.warning("feed_request_failed", channel=channel, error=str(e))
        return PlainTextResponse(str(e), status_code=400)

    try:
        body = serialize(feed, fmt)
    except SerializationError as e:
        log.error("feed_render_failed", channel=channel, format=fmt.value, error=str(e))
        return PlainTextResponse(str(e), status_code=500)

    return Response(
        content=body,
        media_type=fmt.content_type,
        headers={"Cache-Control": settings.cache_control},
    )
