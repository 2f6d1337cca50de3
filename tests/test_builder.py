# ABOUTME: Tests for converting channel history into the generic feed model.
# ABOUTME: Verifies retention window, newest-first ordering and item/feed metadata.

from datetime import UTC, datetime, timedelta

from conftest import NOW, days_ago, ts

from nix_channel_feeds.config import Settings
from nix_channel_feeds.feeds.builder import RETENTION_SECONDS, build_feed
from nix_channel_feeds.models import HistoryEntry


class TestRetentionWindow:
    """Tests for the one-year cutoff."""

    def test_entry_older_than_a_year_is_excluded(self, mock_settings: Settings) -> None:
        entries = [HistoryEntry(commit="old", timestamp=days_ago(366))]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert feed.items == []

    def test_entry_within_a_year_is_included(self, mock_settings: Settings) -> None:
        entries = [HistoryEntry(commit="recent", timestamp=days_ago(300))]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert [item.id for item in feed.items] == ["recent"]

    def test_entry_exactly_at_cutoff_is_included(self, mock_settings: Settings) -> None:
        entries = [HistoryEntry(commit="edge", timestamp=ts(NOW) - RETENTION_SECONDS)]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert len(feed.items) == 1

    def test_retention_is_one_year_of_seconds(self) -> None:
        assert RETENTION_SECONDS == 365 * 24 * 3600


class TestOrdering:
    """Tests for item order."""

    def test_items_are_newest_first(self, mock_settings: Settings) -> None:
        """Items are sorted by time descending regardless of file order."""
        entries = [
            HistoryEntry(commit="t1", timestamp=days_ago(30)),
            HistoryEntry(commit="t3", timestamp=days_ago(1)),
            HistoryEntry(commit="t2", timestamp=days_ago(10)),
        ]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert [item.id for item in feed.items] == ["t3", "t2", "t1"]

    def test_chronological_file_is_reversed(self, mock_settings: Settings) -> None:
        entries = [
            HistoryEntry(commit="first", timestamp=days_ago(20)),
            HistoryEntry(commit="second", timestamp=days_ago(10)),
        ]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert feed.items[0].id == "second"
        assert feed.items[0].created > feed.items[1].created


class TestFeedContent:
    """Tests for feed and item fields."""

    def test_end_to_end_single_item(self, mock_settings: Settings) -> None:
        """Only the recent entry survives, with title, id and commit link."""
        entries = [
            HistoryEntry(commit="aaa111", timestamp=days_ago(10)),
            HistoryEntry(commit="bbb222", timestamp=days_ago(400)),
        ]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert len(feed.items) == 1
        item = feed.items[0]
        assert item.id == "aaa111"
        assert item.title == "Build nixos-unstable aaa111"
        assert item.link == "https://github.com/NixOS/nixpkgs/commit/aaa111"
        assert item.content == "placeholder"
        assert item.created == NOW - timedelta(days=10)

    def test_feed_metadata(self, mock_settings: Settings) -> None:
        feed = build_feed("nixos-22.11", [], now=NOW, settings=mock_settings)

        assert feed.title == "Releases for nixpkgs channel nixos-22.11"
        assert feed.description == "Feed of all nixpkgs builds for channel nixos-22.11"
        assert feed.id == "https://feeds.test/?channel=nixos-22.11"
        assert feed.link == "https://feeds.test"
        assert feed.created == NOW
        assert feed.author.name == "Test Bot"
        assert feed.author.email == "bot@example.com"

    def test_items_share_feed_author(self, mock_settings: Settings) -> None:
        entries = [HistoryEntry(commit="abc", timestamp=days_ago(1))]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert feed.items[0].author == feed.author

    def test_created_is_utc(self, mock_settings: Settings) -> None:
        entries = [HistoryEntry(commit="abc", timestamp=ts(NOW))]

        feed = build_feed("nixos-unstable", entries, now=NOW, settings=mock_settings)

        assert feed.items[0].created.utcoffset() == timedelta(0)
        assert feed.items[0].created == datetime.fromtimestamp(ts(NOW), tz=UTC)
