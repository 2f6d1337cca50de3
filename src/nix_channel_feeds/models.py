# ABOUTME: Pydantic models for channel history and the generic feed representation.
# ABOUTME: Defines HistoryEntry, Feed, FeedItem, FeedFormat and batch ChannelResult schemas.

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from nix_channel_feeds.exceptions import UnknownFormatError


class FeedFormat(str, Enum):
    """Supported syndication wire formats."""

    RSS = "rss"
    ATOM = "atom"
    JSON = "json"

    @classmethod
    def parse(cls, value: str) -> "FeedFormat":
        """Look up a format by name, raising UnknownFormatError otherwise."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownFormatError(value) from None

    @property
    def content_type(self) -> str:
        return {
            FeedFormat.RSS: "application/rss+xml",
            FeedFormat.ATOM: "application/atom+xml",
            FeedFormat.JSON: "application/json",
        }[self]

    @property
    def filename(self) -> str:
        return f"feed.{self.value}"


class HistoryEntry(BaseModel):
    """One line of a channel history file."""

    commit: str
    timestamp: int  # seconds since epoch


class FeedAuthor(BaseModel):
    """Author identity attached to feeds and items."""

    name: str
    email: str


class FeedItem(BaseModel):
    """A single channel build in a feed."""

    id: str
    title: str
    link: str
    created: datetime
    author: FeedAuthor
    content: str


class Feed(BaseModel):
    """Format-independent feed, rendered by the serializers."""

    id: str  # per-channel URL, stable across formats
    title: str
    description: str
    link: str
    created: datetime
    author: FeedAuthor
    items: list[FeedItem] = Field(default_factory=list)


class ChannelResult(BaseModel):
    """Outcome of generating one channel in a batch run."""

    channel: str
    ok: bool = True
    error: str | None = None
    written: list[Path] = Field(default_factory=list)
