# ABOUTME: Pytest fixtures and configuration for nix-channel-feeds tests.
# ABOUTME: Provides test settings, fixed clocks, history text and mocked HTTP transports.

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import httpx
import pytest

from nix_channel_feeds.config import Settings
from nix_channel_feeds.history.fetcher import HistoryFetcher
from nix_channel_feeds.service import ChannelFeedService

NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=UTC)

TEST_CHANNELS = ["nixos-unstable", "nixos-22.11", "nixpkgs-unstable"]


def ts(dt: datetime) -> int:
    """Unix timestamp of a datetime."""
    return int(dt.timestamp())


def days_ago(days: int, now: datetime = NOW) -> int:
    """Unix timestamp of a moment some days before now."""
    return ts(now - timedelta(days=days))


def history_text(*lines: tuple[str, int]) -> str:
    """Build a history file body from (commit, timestamp) pairs."""
    return "".join(f"{commit} {timestamp}\n" for commit, timestamp in lines)


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Create settings for testing."""
    return Settings(
        channels=TEST_CHANNELS,
        history_url_template="https://history.test/{channel}/history",
        fetch_timeout=5,
        site_url="https://feeds.test",
        feed_author_name="Test Bot",
        feed_author_email="bot@example.com",
        item_content="placeholder",
        cache_ttl=3600,
        out_dir=tmp_path / "feeds",
        max_concurrency=2,
        log_level="DEBUG",
    )


@pytest.fixture
def histories() -> dict[str, str]:
    """Channel name to history body served by the mock upstream.

    Timestamps are relative to the real clock so that code paths which
    capture "now" themselves keep these entries inside the retention window.
    """
    now = datetime.now(UTC)
    return {
        "nixos-unstable": history_text(
            ("old000", days_ago(400, now)),
            ("aaa111", days_ago(10, now)),
            ("bbb222", days_ago(2, now)),
        ),
        "nixos-22.11": history_text(("ccc333", days_ago(5, now))),
        "nixpkgs-unstable": history_text(("ddd444", days_ago(1, now))),
    }


@pytest.fixture
def make_service(
    mock_settings: Settings, histories: dict[str, str]
) -> Callable[..., ChannelFeedService]:
    """Factory for a ChannelFeedService backed by a mocked upstream.

    Channels missing from `histories` answer 404. `requests` records every
    fetched path.
    """
    requests: list[str] = []

    def factory(
        settings: Settings | None = None,
        failing: set[str] | None = None,
        cache_ttl: int | None = None,
    ) -> ChannelFeedService:
        settings = settings or mock_settings
        failing = failing or set()

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request.url.path)
            channel = request.url.path.split("/")[1]
            if channel in failing:
                raise httpx.ConnectError("connection refused", request=request)
            if channel not in histories:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, text=histories[channel])

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        fetcher = HistoryFetcher(settings, client=client)
        return ChannelFeedService(settings, fetcher=fetcher, cache_ttl=cache_ttl)

    factory.requests = requests  # type: ignore[attr-defined]
    return factory
