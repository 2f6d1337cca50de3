# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads channel list, upstream URLs, output paths and logging from env and .env file.

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CHANNELS = [
    "nixos-22.05",
    "nixos-22.05-small",
    "nixos-22.11",
    "nixos-22.11-small",
    "nixos-unstable",
    "nixos-unstable-small",
    "nixpkgs-22.11-darwin",
    "nixpkgs-unstable",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Channels
    channels: list[str] = DEFAULT_CHANNELS

    # Upstream history source
    history_url_template: str = "https://channels.nix.gsc.io/{channel}/history"
    commit_url_template: str = "https://github.com/NixOS/nixpkgs/commit/{commit}"
    fetch_timeout: float = 30.0
    user_agent: str = "nix-channel-feeds/0.1"

    # Feed metadata
    site_url: str = "http://localhost:6969"
    feed_author_name: str = "nix-channel-feeds"
    feed_author_email: str = "feeds@localhost"
    item_content: str = "New channel build available."

    # On-demand endpoint
    cache_ttl: int = 3600  # seconds, also advertised in Cache-Control
    cache_max_entries: int = 64

    # Batch generation
    out_dir: Path = Path("feeds")
    max_concurrency: int = 8
    dump_feeds: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    @property
    def cache_control(self) -> str:
        """Cache-Control header value matching the feed cache lifetime."""
        if self.cache_ttl <= 0:
            return "no-cache"
        return f"public, max-age={self.cache_ttl}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables and .env file.
    """
    return Settings()
