# ABOUTME: Shared fetch, parse and build pipeline used by the web endpoint and batch generator.
# ABOUTME: Memoises built feeds per channel for the advertised cache lifetime.

from datetime import datetime

import structlog
from cachetools import TTLCache

from nix_channel_feeds.config import Settings, get_settings
from nix_channel_feeds.feeds.builder import build_feed
from nix_channel_feeds.history.fetcher import HistoryFetcher
from nix_channel_feeds.history.parser import parse_history
from nix_channel_feeds.models import Feed

log = structlog.get_logger()


class ChannelFeedService:
    """Builds channel feeds from upstream history."""

    def __init__(
        self,
        settings: Settings | None = None,
        fetcher: HistoryFetcher | None = None,
        cache_ttl: int | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.fetcher = fetcher or HistoryFetcher(self.settings)
        ttl = self.settings.cache_ttl if cache_ttl is None else cache_ttl
        self._cache: TTLCache[str, Feed] | None = (
            TTLCache(maxsize=self.settings.cache_max_entries, ttl=ttl) if ttl > 0 else None
        )

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    async def __aenter__(self) -> "ChannelFeedService":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    def is_known_channel(self, channel: str) -> bool:
        return channel in self.settings.channels

    async def get_feed(self, channel: str, now: datetime | None = None) -> Feed:
        """Return the feed of a channel, from cache when still fresh.

        Raises:
            NetworkError: If the history could not be downloaded.
            HistoryFormatError: If the history contained no usable line.
        """
        cached = self._cache.get(channel) if self._cache is not None else None
        if cached is not None:
            log.debug("feed_cache_hit", channel=channel)
            return cached

        text = await self.fetcher.fetch(channel)
        entries = parse_history(text)
        feed = build_feed(channel, entries, now=now, settings=self.settings)
        log.info("feed_built", channel=channel, entries=len(entries), items=len(feed.items))

        if self.settings.dump_feeds:
            log.info("feed_dump", channel=channel, feed=feed.model_dump(mode="json"))

        if self._cache is not None:
            self._cache[channel] = feed
        return feed

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()
