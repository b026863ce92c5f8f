"""Seismicity Feed Client - Imperative Shell.

This module handles HTTP communication with the RSS feed of recent
earthquakes. All I/O is contained here; normalization is in the core module.
"""

import logging
from typing import Any

import feedparser
import requests

from quakeboard.core.config import DEFAULT_FEED_URL, DEFAULT_RELAY_URL
from quakeboard.core.earthquake import RawFeedItem


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 10


def _entry_content(entry: Any) -> str | None:
    """Return the first content body of a feedparser entry, if any."""
    content = entry.get("content")
    if isinstance(content, list) and content:
        return content[0].get("value")
    return None


def entry_to_raw_item(entry: Any) -> RawFeedItem:
    """Convert a feedparser entry into a RawFeedItem.

    Args:
        entry: feedparser entry (dict-like)

    Returns:
        RawFeedItem with the fields the normalizer consumes
    """
    return RawFeedItem(
        title=entry.get("title", ""),
        link=entry.get("link", ""),
        pub_date=entry.get("published"),
        content=_entry_content(entry),
        description=entry.get("description"),
    )


def parse_feed(document: bytes | str) -> list[RawFeedItem]:
    """Parse an RSS document into raw feed items.

    Args:
        document: RSS/XML document

    Returns:
        Raw feed items in document order

    Raises:
        ValueError: If the document is not a readable feed
    """
    feed = feedparser.parse(document)

    if feed.bozo and not feed.entries:
        raise ValueError(f"Malformed feed: {feed.get('bozo_exception')}")

    if feed.bozo:
        logger.warning(
            "Feed is not well-formed, using %d recovered entries: %s",
            len(feed.entries),
            feed.get("bozo_exception"),
        )

    return [entry_to_raw_item(entry) for entry in feed.entries]


class FeedClient:
    """Client for fetching the seismicity RSS feed.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        feed_url: str = DEFAULT_FEED_URL,
        relay_url: str = DEFAULT_RELAY_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize feed client.

        Args:
            feed_url: Upstream RSS feed URL
            relay_url: Relay prefix the feed URL is appended to ("" for none)
            timeout: Request timeout in seconds
        """
        self.feed_url = feed_url
        self.relay_url = relay_url
        self.timeout = timeout

    @property
    def request_url(self) -> str:
        """The URL actually requested."""
        return f"{self.relay_url}{self.feed_url}"

    def fetch_items(self) -> list[RawFeedItem]:
        """Fetch and parse the feed.

        This method performs HTTP I/O.

        Returns:
            Raw feed items in document order

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the response is not a readable feed
        """
        logger.info("Fetching earthquake feed from %s", self.request_url)

        response = requests.get(
            self.request_url,
            timeout=self.timeout,
        )
        response.raise_for_status()

        items = parse_feed(response.content)

        logger.info("Fetched %d feed items", len(items))

        return items
