# ABOUTME: Parser for the line-oriented channel history format.
# ABOUTME: Turns "<commit> <unix-timestamp>" lines into HistoryEntry objects, skipping bad lines.

from datetime import UTC, datetime

import structlog

from nix_channel_feeds.exceptions import HistoryFormatError
from nix_channel_feeds.models import HistoryEntry

log = structlog.get_logger()

_TRIM_CHARS = " \r\n"


def parse_history(text: str) -> list[HistoryEntry]:
    """Parse a channel history file.

    Each non-empty line must be "<commit> <timestamp>" separated by a single
    space. Lines that do not split into exactly two tokens, or whose timestamp
    is not a base-10 integer representable as a date, are logged and skipped.

    Args:
        text: Raw history file contents.

    Returns:
        Entries in the order they appear in the file (oldest first upstream).

    Raises:
        HistoryFormatError: If the text is not blank but no line could be parsed.
    """
    entries: list[HistoryEntry] = []
    skipped = 0

    for line in text.split("\n"):
        if line == "":
            continue

        tokens = line.split(" ")
        if len(tokens) != 2:
            log.warning("history_line_skipped", line=line, reason="token_count")
            skipped += 1
            continue

        commit = tokens[0].strip(_TRIM_CHARS)
        raw_timestamp = tokens[1].strip(_TRIM_CHARS)
        try:
            # int() would also accept "1_000"
            if "_" in raw_timestamp:
                raise ValueError(raw_timestamp)
            timestamp = int(raw_timestamp, 10)
        except ValueError:
            log.warning("history_line_skipped", line=line, reason="bad_timestamp")
            skipped += 1
            continue

        try:
            datetime.fromtimestamp(timestamp, tz=UTC)
        except (ValueError, OverflowError, OSError):
            log.warning("history_line_skipped", line=line, reason="timestamp_out_of_range")
            skipped += 1
            continue

        if not commit:
            log.warning("history_line_skipped", line=line, reason="empty_commit")
            skipped += 1
            continue

        entries.append(HistoryEntry(commit=commit, timestamp=timestamp))

    if not entries and skipped:
        raise HistoryFormatError(f"no valid history lines ({skipped} malformed)")

    return entries
