#!/usr/bin/env python3
"""Fetch the seismicity feed once and report how each item normalizes.

Useful when the upstream text format drifts: every field extraction is
reported separately, so a pattern that stopped matching shows up as a
column of misses rather than as a pile of zeros on the map.

Usage:
    # Print the last 24 hours, all magnitudes
    python scripts/check_feed.py

    # Only M4+ in the last hour
    python scripts/check_feed.py --time-filter 60 --magnitude-filter light

    # Show per-field extraction misses
    python scripts/check_feed.py --diagnose

    # Also render the map to a PNG
    python scripts/check_feed.py --save-map map.png

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
"""

import argparse
import logging
import os
import sys
from datetime import datetime, timezone

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from quakeboard.core.earthquake import (
    RawFeedItem,
    extract_depth,
    extract_latitude,
    extract_location,
    extract_longitude,
    extract_magnitude,
    get_source_text,
    normalize_items,
    parse_event_time,
)
from quakeboard.core.filters import MAGNITUDE_FILTERS, filter_earthquakes, get_magnitude_filter
from quakeboard.core.formatter import format_depth, format_headline, format_time_ago
from quakeboard.core.map_view import build_map_view
from quakeboard.shell.config_loader import load_config
from quakeboard.shell.feed_client import FeedClient
from quakeboard.shell.map_renderer import MapRenderer

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def diagnose_item(item: RawFeedItem) -> list[str]:
    """List the fields that fell back to defaults for one item."""
    source_text = get_source_text(item)
    title = item.title or ""

    checks = {
        "time": parse_event_time(item.pub_date),
        "location": extract_location(source_text, title),
        "magnitude": extract_magnitude(title),
        "latitude": extract_latitude(source_text),
        "longitude": extract_longitude(source_text),
        "depth": extract_depth(source_text),
    }
    return [name for name, value in checks.items() if value is None]


def print_diagnostics(items: list[RawFeedItem]) -> None:
    """Print per-field misses for every item."""
    print(f"\n{'=' * 60}")
    print("EXTRACTION DIAGNOSTICS")
    print(f"{'=' * 60}")

    misses_by_field: dict[str, int] = {}
    for item in items:
        misses = diagnose_item(item)
        for name in misses:
            misses_by_field[name] = misses_by_field.get(name, 0) + 1
        if misses:
            print(f"  {item.title!r}: missing {', '.join(misses)}")

    print(f"\n{len(items)} items checked")
    for name, count in sorted(misses_by_field.items()):
        print(f"  {name}: {count} misses")


def main():
    parser = argparse.ArgumentParser(
        description="Fetch the seismicity feed and print normalized earthquakes",
    )
    parser.add_argument(
        "--time-filter",
        type=int,
        default=1440,
        help="Time window in minutes, 0 for no limit (default: 1440)",
    )
    parser.add_argument(
        "--magnitude-filter",
        default="all",
        choices=[option.key for option in MAGNITUDE_FILTERS],
        help="Magnitude band (default: all)",
    )
    parser.add_argument(
        "--diagnose",
        action="store_true",
        help="Report per-field extraction misses",
    )
    parser.add_argument(
        "--save-map",
        metavar="PATH",
        help="Render the filtered earthquakes to a PNG map",
    )
    args = parser.parse_args()

    config = load_config()
    client = FeedClient(
        feed_url=config.feed_url,
        relay_url=config.relay_url,
        timeout=config.request_timeout_seconds,
    )

    try:
        items = client.fetch_items()
    except Exception as e:
        logger.error("Failed to fetch feed: %s", e)
        return 1

    earthquakes = normalize_items(items)
    now = datetime.now(timezone.utc)

    filtered = filter_earthquakes(
        earthquakes,
        args.time_filter or None,
        get_magnitude_filter(args.magnitude_filter).magnitude_range,
        now,
    )

    print(f"\n{len(items)} items, {len(earthquakes)} earthquakes, {len(filtered)} after filters\n")
    for eq in filtered:
        print(f"  {format_headline(eq)}")
        print(f"    {format_time_ago(eq.time, now)} | {format_depth(eq)} | "
              f"{eq.latitude:.2f}, {eq.longitude:.2f}")

    if args.diagnose:
        print_diagnostics(items)

    if args.save_map:
        renderer = MapRenderer(
            tile_url=config.map.tile_url,
            width=config.map.width,
            height=config.map.height,
        )
        result = renderer.render(build_map_view(filtered))
        if not result.success or result.image_bytes is None:
            logger.error("Failed to render map: %s", result.error)
            return 1
        with open(args.save_map, "wb") as f:
            f.write(result.image_bytes)
        logger.info("Saved map to %s", args.save_map)

    return 0


if __name__ == "__main__":
    sys.exit(main())
