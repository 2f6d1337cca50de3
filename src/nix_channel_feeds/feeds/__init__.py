# ABOUTME: Feed module: history-to-feed building and wire format rendering.
# ABOUTME: Exposes build_feed and the RSS/Atom/JSON serializers.

from nix_channel_feeds.feeds.builder import RETENTION_SECONDS, build_feed
from nix_channel_feeds.feeds.serializers import serialize, serialize_all, to_atom, to_json, to_rss

__all__ = [
    "RETENTION_SECONDS",
    "build_feed",
    "serialize",
    "serialize_all",
    "to_atom",
    "to_json",
    "to_rss",
]
