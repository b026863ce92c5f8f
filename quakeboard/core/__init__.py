"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Feed item normalization
- Time window and magnitude filtering
- Selection tracking
- Display formatting
- Map view construction

All functions here are deterministic and have no I/O.
"""

from quakeboard.core.earthquake import (
    Earthquake,
    RawFeedItem,
    normalize_item,
    normalize_items,
)
from quakeboard.core.filters import FilterState, filter_earthquakes
from quakeboard.core.selection import revalidate_selection, toggle_selection
from quakeboard.core.formatter import format_headline, format_time_ago
from quakeboard.core.map_view import MapView, build_map_view

__all__ = [
    # Earthquake
    "Earthquake",
    "RawFeedItem",
    "normalize_item",
    "normalize_items",
    # Filters
    "FilterState",
    "filter_earthquakes",
    # Selection
    "revalidate_selection",
    "toggle_selection",
    # Formatter
    "format_headline",
    "format_time_ago",
    # Map
    "MapView",
    "build_map_view",
]
