# ABOUTME: Exception hierarchy for history fetching, parsing and feed rendering.
# ABOUTME: Web and batch drivers map these onto HTTP statuses and per-channel results.


class ChannelFeedError(Exception):
    """Base class for all feed generation errors."""


class NetworkError(ChannelFeedError):
    """History could not be downloaded (transport failure or non-2xx status)."""

    def __init__(self, channel: str, message: str) -> None:
        super().__init__(f"failed to fetch history for {channel}: {message}")
        self.channel = channel


class HistoryFormatError(ChannelFeedError):
    """History body contained no parsable record."""


class SerializationError(ChannelFeedError):
    """A feed could not be rendered to one of the wire formats."""


class UnknownFormatError(ChannelFeedError):
    """Requested feed format is not rss, atom or json."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"no such format: {fmt}")
        self.format = fmt


class UnknownChannelError(ChannelFeedError):
    """Requested channel is not in the configured channel list."""

    def __init__(self, channel: str) -> None:
        super().__init__(f"no such channel: {channel}")
        self.channel = channel
