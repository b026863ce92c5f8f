"""Display formatting - Pure functions.

This module formats earthquake data for the list, the map popups and the
"latest earthquake" header. All functions are pure with no side effects.
"""

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quakeboard.core.earthquake import Earthquake


DEFAULT_DISPLAY_TIMEZONE = "Europe/Athens"

MINUTES_IN_DAY = 1440
MINUTES_IN_MONTH = 43200
MINUTES_IN_TWO_MONTHS = 86400


def format_number(value: float) -> str:
    """Render a number without a trailing ".0" (4.0 -> "4", 4.5 -> "4.5")."""
    return f"{value:g}"


def format_headline(earthquake: Earthquake) -> str:
    """Format the list headline, e.g. "M 4.5 - 10 km NE of Athens"."""
    return f"M {format_number(earthquake.magnitude)} - {earthquake.location}"


def format_depth(earthquake: Earthquake) -> str:
    """Format depth, e.g. "Depth: 10 km"."""
    return f"Depth: {format_number(earthquake.depth_km)} km"


def format_local_time(
    time: datetime,
    tz_name: str = DEFAULT_DISPLAY_TIMEZONE,
) -> str:
    """Format a timestamp in the display timezone.

    Pure function.

    Args:
        time: Timezone-aware timestamp
        tz_name: IANA timezone name; an unknown name falls back to
            DEFAULT_DISPLAY_TIMEZONE

    Returns:
        String like "Fri, 16 Oct 2026 15:30:00 EEST"
    """
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        zone = ZoneInfo(DEFAULT_DISPLAY_TIMEZONE)
    local_time = time.astimezone(zone)
    return local_time.strftime("%a, %d %b %Y %H:%M:%S %Z")


def format_utc_time(time: datetime) -> str:
    """Format a timestamp as an HTTP-style UTC string (map popups)."""
    return time.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S GMT")


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_distance(minutes: float) -> str:
    """Describe a duration in words, e.g. "about 2 hours".

    Pure function.

    Args:
        minutes: Non-negative duration in minutes

    Returns:
        Human-readable duration
    """
    rounded = _round_half_up(minutes)

    if rounded < 1:
        return "less than a minute"
    if rounded < 45:
        return _plural(rounded, "minute")
    if rounded < 90:
        return "about 1 hour"
    if rounded < MINUTES_IN_DAY:
        return "about " + _plural(_round_half_up(rounded / 60), "hour")
    if rounded < 2520:
        return "1 day"
    if rounded < MINUTES_IN_MONTH:
        return _plural(_round_half_up(rounded / MINUTES_IN_DAY), "day")
    if rounded < MINUTES_IN_TWO_MONTHS:
        return "about " + _plural(_round_half_up(rounded / MINUTES_IN_MONTH), "month")

    months = _round_half_up(rounded / MINUTES_IN_MONTH)
    if months < 12:
        return _plural(months, "month")
    return "about " + _plural(months // 12, "year")


def format_time_ago(time: datetime, now: datetime) -> str:
    """Describe how long ago an event happened.

    Pure function. Future timestamps read "in 3 minutes".

    Args:
        time: Event timestamp
        now: Current time

    Returns:
        String like "5 minutes ago"
    """
    minutes = (now - time).total_seconds() / 60

    if minutes < 0:
        return f"in {format_distance(-minutes)}"
    return f"{format_distance(minutes)} ago"


def format_latest_summary(
    earthquake: Earthquake,
    tz_name: str = DEFAULT_DISPLAY_TIMEZONE,
) -> str:
    """Format the "Latest Earthquake" header line."""
    return f"{format_headline(earthquake)} - {format_local_time(earthquake.time, tz_name)}"


def format_status_message(loading: bool) -> str:
    """Header text shown when there is no earthquake to display."""
    return "Loading..." if loading else "No recent earthquakes"


def format_popup_lines(earthquake: Earthquake) -> list[str]:
    """Lines shown in a map marker popup."""
    return [
        f"M {format_number(earthquake.magnitude)}",
        earthquake.location,
        format_utc_time(earthquake.time),
        format_depth(earthquake),
    ]


def earthquake_to_dict(
    earthquake: Earthquake,
    now: datetime,
    tz_name: str = DEFAULT_DISPLAY_TIMEZONE,
) -> dict[str, Any]:
    """Convert an Earthquake to a JSON-serializable dict.

    Pure function.

    Args:
        earthquake: Earthquake to convert
        now: Current time, for the relative age
        tz_name: Display timezone for the local time string

    Returns:
        Dict with raw fields plus display strings
    """
    return {
        "title": earthquake.title,
        "link": earthquake.link,
        "time": earthquake.time.isoformat(),
        "location": earthquake.location,
        "latitude": earthquake.latitude,
        "longitude": earthquake.longitude,
        "depth_km": earthquake.depth_km,
        "magnitude": earthquake.magnitude,
        "headline": format_headline(earthquake),
        "time_ago": format_time_ago(earthquake.time, now),
        "local_time": format_local_time(earthquake.time, tz_name),
    }
