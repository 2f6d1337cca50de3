# ABOUTME: Converts parsed channel history into the generic Feed model.
# ABOUTME: Applies the one-year retention window and newest-first ordering.

from collections.abc import Sequence
from datetime import UTC, datetime
from urllib.parse import urlencode

from nix_channel_feeds.config import Settings, get_settings
from nix_channel_feeds.models import Feed, FeedAuthor, FeedItem, HistoryEntry

RETENTION_SECONDS = 365 * 24 * 3600


def feed_id(channel: str, settings: Settings) -> str:
    """Stable identifier of a channel feed: its on-demand URL without a format."""
    return f"{settings.site_url.rstrip('/')}/?{urlencode({'channel': channel})}"


def build_feed(
    channel: str,
    entries: Sequence[HistoryEntry],
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Feed:
    """Build a feed for a channel from its history.

    Args:
        channel: Channel name used in titles.
        entries: History entries in file order.
        now: Reference time for the retention window. Defaults to the current UTC time.
        settings: Settings providing author, links and item content.

    Returns:
        Feed whose items are the entries of the last year, newest first.
    """
    settings = settings or get_settings()
    now = now or datetime.now(UTC)
    cutoff = int(now.timestamp()) - RETENTION_SECONDS

    author = FeedAuthor(name=settings.feed_author_name, email=settings.feed_author_email)

    items = [
        FeedItem(
            id=entry.commit,
            title=f"Build {channel} {entry.commit}",
            link=settings.commit_url_template.format(commit=entry.commit),
            created=datetime.fromtimestamp(entry.timestamp, tz=UTC),
            author=author,
            content=settings.item_content,
        )
        for entry in reversed(entries)
        if entry.timestamp >= cutoff
    ]
    items.sort(key=lambda item: item.created, reverse=True)

    return Feed(
        id=feed_id(channel, settings),
        title=f"Releases for nixpkgs channel {channel}",
        description=f"Feed of all nixpkgs builds for channel {channel}",
        link=settings.site_url,
        created=now,
        author=author,
        items=items,
    )
