"""Tests for the seismicity feed client.

Uses the `responses` library to mock HTTP requests.
"""

import pytest
import requests
import responses

from quakeboard.core.earthquake import normalize_items
from quakeboard.shell.feed_client import FeedClient, entry_to_raw_item, parse_feed


FEED_URL = "http://feed.example.com/seismicity.xml"

SAMPLE_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Recent earthquakes</title>
    <link>http://feed.example.com/</link>
    <description>Seismicity</description>
    <item>
      <title>M 4.5 - 10 km NE of Athens</title>
      <link>http://feed.example.com/events/1</link>
      <pubDate>Fri, 16 Oct 2026 12:00:00</pubDate>
      <description>&lt;p&gt;10 km NE of Athens&lt;br&gt;Latitude: 38.5N&lt;br&gt;Longitude: 23.1E&lt;br&gt;Depth: 10km&lt;/p&gt;</description>
    </item>
    <item>
      <title>M 2.1 - 5 km S of Patras</title>
      <link>http://feed.example.com/events/2</link>
      <pubDate>Fri, 16 Oct 2026 11:30:00</pubDate>
      <description>&lt;p&gt;5 km S of Patras&lt;br&gt;Latitude: 38.2N&lt;br&gt;Longitude: 21.7E&lt;br&gt;Depth: 7km&lt;/p&gt;</description>
    </item>
  </channel>
</rss>
"""


class TestParseFeed:
    """Tests for parse_feed()."""

    def test_parses_items(self):
        items = parse_feed(SAMPLE_FEED)

        assert len(items) == 2
        assert items[0].title == "M 4.5 - 10 km NE of Athens"
        assert items[0].link == "http://feed.example.com/events/1"
        assert items[0].pub_date == "Fri, 16 Oct 2026 12:00:00"
        assert "Latitude: 38.5N" in items[0].description

    def test_items_normalize(self):
        """Parsed items feed straight into the normalizer."""
        earthquakes = normalize_items(parse_feed(SAMPLE_FEED))

        assert [e.magnitude for e in earthquakes] == [4.5, 2.1]
        assert earthquakes[0].location == "10 km NE of Athens"
        assert earthquakes[0].coordinates == (38.5, 23.1)
        assert earthquakes[1].depth_km == 7.0

    def test_empty_channel(self):
        document = '<?xml version="1.0"?><rss version="2.0"><channel><title>x</title></channel></rss>'
        assert parse_feed(document) == []

    def test_unreadable_document_raises(self):
        with pytest.raises(ValueError, match="Malformed feed"):
            parse_feed(b"this is not a feed")


class TestEntryToRawItem:
    """Tests for entry_to_raw_item()."""

    def test_content_is_taken_from_first_body(self):
        entry = {
            "title": "M 3.0 - Crete",
            "link": "x",
            "published": "Fri, 16 Oct 2026 12:00:00",
            "content": [{"value": "first"}, {"value": "second"}],
            "description": "plain",
        }

        item = entry_to_raw_item(entry)

        assert item.content == "first"
        assert item.description == "plain"

    def test_missing_fields(self):
        item = entry_to_raw_item({})

        assert item.title == ""
        assert item.link == ""
        assert item.pub_date is None
        assert item.content is None
        assert item.description is None


class TestFeedClient:
    """Tests for FeedClient."""

    def test_request_url_with_relay(self):
        client = FeedClient(feed_url=FEED_URL, relay_url="https://relay.example.com/?url=")
        assert client.request_url == "https://relay.example.com/?url=" + FEED_URL

    def test_request_url_without_relay(self):
        client = FeedClient(feed_url=FEED_URL, relay_url="")
        assert client.request_url == FEED_URL

    @responses.activate
    def test_fetch_items(self):
        responses.add(
            responses.GET,
            FEED_URL,
            body=SAMPLE_FEED,
            status=200,
            content_type="application/rss+xml",
        )

        client = FeedClient(feed_url=FEED_URL, relay_url="")
        items = client.fetch_items()

        assert len(items) == 2
        assert len(responses.calls) == 1

    @responses.activate
    def test_fetch_through_relay(self):
        relay = "https://relay.example.com/?url="
        responses.add(
            responses.GET,
            relay + FEED_URL,
            body=SAMPLE_FEED,
            status=200,
        )

        client = FeedClient(feed_url=FEED_URL, relay_url=relay)
        items = client.fetch_items()

        assert len(items) == 2
        assert responses.calls[0].request.url.startswith("https://relay.example.com/")

    @responses.activate
    def test_server_error_raises(self):
        responses.add(responses.GET, FEED_URL, status=503)

        client = FeedClient(feed_url=FEED_URL, relay_url="")

        with pytest.raises(requests.HTTPError):
            client.fetch_items()

    @responses.activate
    def test_timeout_raises(self):
        responses.add(
            responses.GET,
            FEED_URL,
            body=requests.exceptions.Timeout("timed out"),
        )

        client = FeedClient(feed_url=FEED_URL, relay_url="", timeout=1)

        with pytest.raises(requests.exceptions.Timeout):
            client.fetch_items()

    @responses.activate
    def test_malformed_body_raises(self):
        responses.add(responses.GET, FEED_URL, body="<html>oops", status=200)

        client = FeedClient(feed_url=FEED_URL, relay_url="")

        with pytest.raises(ValueError):
            client.fetch_items()
