# ABOUTME: Renders the generic Feed model to RSS 2.0, Atom 1.0 and JSON Feed text.
# ABOUTME: Each format is rendered independently; failures are reported per format.

import json
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import format_datetime
from urllib.parse import urlencode
from xml.etree.ElementTree import Element, SubElement, tostring

import structlog

from nix_channel_feeds.exceptions import SerializationError
from nix_channel_feeds.models import Feed, FeedAuthor, FeedFormat

log = structlog.get_logger()

ATOM_NS = "http://www.w3.org/2005/Atom"
JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _rss_date(dt: datetime) -> str:
    """RFC 822 date as used by RSS 2.0."""
    return format_datetime(dt.astimezone(UTC), usegmt=True)


def _atom_date(dt: datetime) -> str:
    """RFC 3339 date as used by Atom and JSON Feed."""
    return dt.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _feed_url(feed: Feed, fmt: FeedFormat) -> str:
    return f"{feed.id}&{urlencode({'format': fmt.value})}"


def _rss_author(author: FeedAuthor) -> str:
    return f"{author.email} ({author.name})"


def to_rss(feed: Feed) -> str:
    """Render a feed as an RSS 2.0 XML string."""
    rss = Element("rss", version="2.0")

    channel = SubElement(rss, "channel")
    SubElement(channel, "title").text = feed.title
    SubElement(channel, "link").text = feed.link
    SubElement(channel, "description").text = feed.description
    SubElement(channel, "managingEditor").text = _rss_author(feed.author)
    SubElement(channel, "pubDate").text = _rss_date(feed.created)

    for feed_item in feed.items:
        item = SubElement(channel, "item")
        SubElement(item, "title").text = feed_item.title
        SubElement(item, "link").text = feed_item.link
        SubElement(item, "description").text = feed_item.content
        SubElement(item, "author").text = _rss_author(feed_item.author)
        guid = SubElement(item, "guid")
        guid.text = feed_item.id
        guid.set("isPermaLink", "false")
        SubElement(item, "pubDate").text = _rss_date(feed_item.created)

    return XML_DECLARATION + tostring(rss, encoding="unicode")


def _atom_author(parent: Element, author: FeedAuthor) -> None:
    element = SubElement(parent, "author")
    SubElement(element, "name").text = author.name
    SubElement(element, "email").text = author.email


def to_atom(feed: Feed) -> str:
    """Render a feed as an Atom 1.0 XML string."""
    root = Element("feed", xmlns=ATOM_NS)
    SubElement(root, "title").text = feed.title
    SubElement(root, "id").text = feed.id
    SubElement(root, "updated").text = _atom_date(feed.created)
    SubElement(root, "subtitle").text = feed.description
    SubElement(root, "link", href=feed.link, rel="alternate")
    SubElement(root, "link", href=_feed_url(feed, FeedFormat.ATOM), rel="self")
    _atom_author(root, feed.author)

    for feed_item in feed.items:
        entry = SubElement(root, "entry")
        SubElement(entry, "title").text = feed_item.title
        SubElement(entry, "link", href=feed_item.link, rel="alternate")
        SubElement(entry, "id").text = feed_item.id
        SubElement(entry, "updated").text = _atom_date(feed_item.created)
        SubElement(entry, "published").text = _atom_date(feed_item.created)
        _atom_author(entry, feed_item.author)
        SubElement(entry, "content", type="html").text = feed_item.content

    return XML_DECLARATION + tostring(root, encoding="unicode")


def to_json(feed: Feed) -> str:
    """Render a feed as a JSON Feed 1.1 document."""
    document = {
        "version": JSON_FEED_VERSION,
        "title": feed.title,
        "home_page_url": feed.link,
        "feed_url": _feed_url(feed, FeedFormat.JSON),
        "description": feed.description,
        "authors": [{"name": feed.author.name, "url": f"mailto:{feed.author.email}"}],
        "items": [
            {
                "id": item.id,
                "url": item.link,
                "title": item.title,
                "content_html": item.content,
                "date_published": _atom_date(item.created),
                "authors": [{"name": item.author.name, "url": f"mailto:{item.author.email}"}],
            }
            for item in feed.items
        ],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


_RENDERERS: dict[FeedFormat, Callable[[Feed], str]] = {
    FeedFormat.RSS: to_rss,
    FeedFormat.ATOM: to_atom,
    FeedFormat.JSON: to_json,
}


def serialize(feed: Feed, fmt: FeedFormat) -> str:
    """Render a feed in one format.

    Raises:
        SerializationError: If rendering fails.
    """
    try:
        return _RENDERERS[fmt](feed)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to render {fmt.value} feed: {e}") from e


def serialize_all(feed: Feed) -> tuple[dict[FeedFormat, str], dict[FeedFormat, SerializationError]]:
    """Render a feed in every format, attempting each one even if another fails.

    Returns:
        Tuple of (rendered documents, errors) keyed by format.
    """
    rendered: dict[FeedFormat, str] = {}
    errors: dict[FeedFormat, SerializationError] = {}

    for fmt in FeedFormat:
        try:
            rendered[fmt] = serialize(feed, fmt)
        except SerializationError as e:
            log.error("feed_serialization_error", format=fmt.value, error=str(e))
            errors[fmt] = e

    return rendered, errors
