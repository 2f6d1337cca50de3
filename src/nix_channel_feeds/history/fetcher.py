# ABOUTME: Channel history downloader.
# ABOUTME: Uses httpx to GET the plaintext history file of a nixpkgs channel.

import httpx
import structlog

from nix_channel_feeds.config import Settings, get_settings
from nix_channel_feeds.exceptions import NetworkError

log = structlog.get_logger()


class HistoryFetcher:
    """Fetches raw channel history text from the upstream mirror."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialized HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.fetch_timeout,
                headers={"User-Agent": self.settings.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HistoryFetcher":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    def history_url(self, channel: str) -> str:
        return self.settings.history_url_template.format(channel=channel)

    async def fetch(self, channel: str) -> str:
        """Download the history file of a channel.

        Args:
            channel: Channel name, e.g. "nixos-unstable".

        Returns:
            The response body as text.

        Raises:
            NetworkError: On transport errors, timeouts and non-2xx responses.
        """
        url = self.history_url(channel)
        log.debug("fetching_history", channel=channel, url=url)

        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            log.error("history_fetch_error", channel=channel, url=url, error=str(e))
            raise NetworkError(channel, str(e)) from e

        log.debug("history_fetched", channel=channel, size=len(response.content))
        return response.text
