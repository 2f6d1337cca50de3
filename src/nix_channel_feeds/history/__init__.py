# ABOUTME: Channel history module: downloading and parsing upstream history files.
# ABOUTME: Exposes HistoryFetcher and parse_history.

from nix_channel_feeds.history.fetcher import HistoryFetcher
from nix_channel_feeds.history.parser import parse_history

__all__ = ["HistoryFetcher", "parse_history"]
