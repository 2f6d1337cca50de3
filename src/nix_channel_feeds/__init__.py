# ABOUTME: Main package for nix-channel-feeds.
# ABOUTME: Exports settings, feed models and the shared channel feed pipeline.

from nix_channel_feeds.config import get_settings
from nix_channel_feeds.models import ChannelResult, Feed, FeedFormat, FeedItem, HistoryEntry
from nix_channel_feeds.service import ChannelFeedService

__all__ = [
    "get_settings",
    "ChannelFeedService",
    "ChannelResult",
    "Feed",
    "FeedFormat",
    "FeedItem",
    "HistoryEntry",
]
