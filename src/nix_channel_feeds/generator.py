# ABOUTME: Batch generator writing RSS, Atom and JSON feeds for every channel to a folder.
# ABOUTME: Fans out one task per channel, then renders a static index.html with Jinja2.

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import structlog
from jinja2 import Environment, PackageLoader

from nix_channel_feeds.config import Settings, get_settings
from nix_channel_feeds.feeds.serializers import serialize_all
from nix_channel_feeds.models import ChannelResult, FeedFormat
from nix_channel_feeds.service import ChannelFeedService

log = structlog.get_logger()

INDEX_TEMPLATE = "index.html"
INDEX_FILENAME = "index.html"


class FeedSiteGenerator:
    """Writes per-channel feed files and an index page under an output folder."""

    def __init__(
        self,
        settings: Settings | None = None,
        service: ChannelFeedService | None = None,
        out_dir: Path | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        # Batch runs always build fresh feeds
        self.service = service or ChannelFeedService(self.settings, cache_ttl=0)
        self.out_dir = (out_dir or self.settings.out_dir).resolve()
        self._jinja_env: Environment | None = None

    @property
    def jinja_env(self) -> Environment:
        """Lazy-initialized Jinja2 environment."""
        if self._jinja_env is None:
            self._jinja_env = Environment(
                loader=PackageLoader("nix_channel_feeds", "templates"),
                autoescape=True,
            )
        return self._jinja_env

    async def aclose(self) -> None:
        await self.service.aclose()

    async def __aenter__(self) -> "FeedSiteGenerator":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def generate_channel(self, channel: str) -> ChannelResult:
        """Build one channel's feed and write its three files.

        Errors are logged and captured in the returned result, never raised.
        """
        result = ChannelResult(channel=channel)
        folder = self.out_dir / channel

        try:
            folder.mkdir(parents=True, exist_ok=True)
            feed = await self.service.get_feed(channel)
            rendered, errors = serialize_all(feed)

            for fmt, document in rendered.items():
                path = folder / fmt.filename
                path.write_text(document, encoding="utf-8")
                result.written.append(path)

            if errors:
                result.ok = False
                result.error = "; ".join(str(e) for e in errors.values())

        except Exception as e:
            log.error("channel_failed", channel=channel, error=str(e))
            result.ok = False
            result.error = str(e)
            return result

        log.info("channel_written", channel=channel, files=len(result.written), ok=result.ok)
        return result

    async def generate_all(self, channels: list[str] | None = None) -> list[ChannelResult]:
        """Generate every channel concurrently and wait for all of them.

        Returns:
            One result per channel, in the order of the channel list.
        """
        channels = channels if channels is not None else self.settings.channels
        semaphore = asyncio.Semaphore(max(1, self.settings.max_concurrency))

        async def run_one(channel: str) -> ChannelResult:
            async with semaphore:
                log.info("generating_channel", channel=channel)
                return await self.generate_channel(channel)

        return list(await asyncio.gather(*(run_one(c) for c in channels)))

    def write_index(self, channels: list[str] | None = None) -> Path:
        """Render the index page linking every channel's feeds."""
        channels = channels if channels is not None else self.settings.channels
        template = self.jinja_env.get_template(INDEX_TEMPLATE)
        html = template.render(
            title="Nix Channels",
            channels=channels,
            formats=list(FeedFormat),
            generated_at=datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC"),
        )

        self.out_dir.mkdir(parents=True, exist_ok=True)
        path = self.out_dir / INDEX_FILENAME
        path.write_text(html, encoding="utf-8")
        log.info("index_written", path=str(path), channels=len(channels))
        return path

    async def run(self, write_index: bool = True) -> list[ChannelResult]:
        """Generate all channels, then the index page regardless of failures."""
        log.info("batch_start", out_dir=str(self.out_dir), channels=len(self.settings.channels))
        results = await self.generate_all()
        if write_index:
            self.write_index()

        failed = [r.channel for r in results if not r.ok]
        log.info("batch_complete", succeeded=len(results) - len(failed), failed=failed)
        return results
