"""Earthquake filtering - Pure functions.

This module decides which earthquakes are shown for the current time window
and magnitude band. All functions are pure; the current time is always
passed in by the caller.
"""

import math
from dataclasses import dataclass
from datetime import datetime

from quakeboard.core.earthquake import Earthquake


ALL_MAGNITUDES = "all"

DEFAULT_TIME_FILTER_MINUTES = 1440
DEFAULT_MAGNITUDE_FILTER = ALL_MAGNITUDES


@dataclass(frozen=True)
class TimeFilterOption:
    """A selectable time window.

    Attributes:
        label: Text shown in the selector
        minutes: Window length, None for no limit
    """
    label: str
    minutes: int | None


@dataclass(frozen=True)
class MagnitudeFilterOption:
    """A selectable magnitude band.

    Attributes:
        key: Stable identifier used in requests and config
        label: Text shown in the selector
        magnitude_range: Inclusive (min, max), None for all magnitudes
    """
    key: str
    label: str
    magnitude_range: tuple[float, float] | None


NO_TIME_LIMIT = TimeFilterOption(label="No time limit", minutes=None)

TIME_FILTERS: tuple[TimeFilterOption, ...] = (
    TimeFilterOption(label="Last 10 minutes", minutes=10),
    TimeFilterOption(label="Last 30 minutes", minutes=30),
    TimeFilterOption(label="Last hour", minutes=60),
    TimeFilterOption(label="Last 24 hours", minutes=1440),
)

MAGNITUDE_FILTERS: tuple[MagnitudeFilterOption, ...] = (
    MagnitudeFilterOption(key=ALL_MAGNITUDES, label="All magnitudes", magnitude_range=None),
    MagnitudeFilterOption(key="minor", label="Minor (0 - 3.9)", magnitude_range=(0.0, 3.9)),
    MagnitudeFilterOption(key="light", label="Light (4 - 4.9)", magnitude_range=(4.0, 4.9)),
    MagnitudeFilterOption(key="moderate", label="Moderate (5 - 5.9)", magnitude_range=(5.0, 5.9)),
    MagnitudeFilterOption(key="strong", label="Strong (6+)", magnitude_range=(6.0, math.inf)),
)


@dataclass
class FilterState:
    """The filter selection currently applied by a viewer.

    Attributes:
        time_window_minutes: Window length in minutes, None for no limit
        magnitude_range: Inclusive (min, max), None for all magnitudes
    """
    time_window_minutes: int | None = DEFAULT_TIME_FILTER_MINUTES
    magnitude_range: tuple[float, float] | None = None


def get_time_filter(minutes: int | None) -> TimeFilterOption:
    """Look up a time filter option by its window length.

    None maps to NO_TIME_LIMIT.

    Raises:
        ValueError: If the window is not one of TIME_FILTERS
    """
    if minutes is None:
        return NO_TIME_LIMIT
    for option in TIME_FILTERS:
        if option.minutes == minutes:
            return option
    raise ValueError(f"Unknown time filter: {minutes}")


def get_magnitude_filter(key: str) -> MagnitudeFilterOption:
    """Look up a magnitude filter option by key.

    Raises:
        ValueError: If the key is not one of MAGNITUDE_FILTERS
    """
    for option in MAGNITUDE_FILTERS:
        if option.key == key:
            return option
    raise ValueError(f"Unknown magnitude filter: {key}")


def get_age_minutes(earthquake: Earthquake, now: datetime) -> float:
    """Minutes elapsed between the event and now (negative if in the future)."""
    return (now - earthquake.time).total_seconds() / 60


def matches_time_window(
    earthquake: Earthquake,
    time_window_minutes: int | None,
    now: datetime,
) -> bool:
    """Check if an earthquake falls inside the time window.

    Pure function. With no limit every earthquake matches; a bounded
    window never matches a future timestamp.

    Args:
        earthquake: Earthquake to check
        time_window_minutes: Window length, None for no limit
        now: Current time (timezone-aware)

    Returns:
        True if there is no window or 0 <= age <= window
    """
    if time_window_minutes is None:
        return True

    age = get_age_minutes(earthquake, now)
    return 0 <= age <= time_window_minutes


def matches_magnitude_range(
    earthquake: Earthquake,
    magnitude_range: tuple[float, float] | None,
) -> bool:
    """Check if an earthquake falls inside an inclusive magnitude band.

    Pure function.
    """
    if magnitude_range is None:
        return True

    min_magnitude, max_magnitude = magnitude_range
    return min_magnitude <= earthquake.magnitude <= max_magnitude


def filter_earthquakes(
    earthquakes: list[Earthquake],
    time_window_minutes: int | None,
    magnitude_range: tuple[float, float] | None,
    now: datetime,
) -> list[Earthquake]:
    """Filter earthquakes by time window and magnitude band.

    Pure function. Order of the input is preserved.

    Args:
        earthquakes: Earthquakes to filter
        time_window_minutes: Window length, None for no limit
        magnitude_range: Inclusive (min, max), None for all magnitudes
        now: Current time (timezone-aware)

    Returns:
        Earthquakes matching both predicates
    """
    return [
        e for e in earthquakes
        if matches_time_window(e, time_window_minutes, now)
        and matches_magnitude_range(e, magnitude_range)
    ]


def apply_filter_state(
    earthquakes: list[Earthquake],
    state: FilterState,
    now: datetime,
) -> list[Earthquake]:
    """Filter earthquakes with a FilterState. Pure function."""
    return filter_earthquakes(
        earthquakes,
        state.time_window_minutes,
        state.magnitude_range,
        now,
    )
