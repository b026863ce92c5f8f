"""Unit tests for earthquake filtering.

Pure function tests - fast, no mocks needed.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from quakeboard.core.earthquake import Earthquake
from quakeboard.core.filters import (
    MAGNITUDE_FILTERS,
    NO_TIME_LIMIT,
    TIME_FILTERS,
    FilterState,
    apply_filter_state,
    filter_earthquakes,
    get_age_minutes,
    get_magnitude_filter,
    get_time_filter,
    matches_magnitude_range,
    matches_time_window,
)


NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


def make_earthquake(minutes_ago: float = 5, magnitude: float = 3.0, link: str = "eq") -> Earthquake:
    """Create an earthquake with a given age and magnitude."""
    return Earthquake(
        title=f"M {magnitude} - 10 km NE of Athens",
        link=link,
        time=NOW - timedelta(minutes=minutes_ago),
        location="10 km NE of Athens",
        latitude=38.5,
        longitude=23.1,
        depth_km=10.0,
        magnitude=magnitude,
    )


class TestFilterOptions:
    """Tests for the filter option tables and lookups."""

    def test_time_filter_windows(self):
        assert [option.minutes for option in TIME_FILTERS] == [10, 30, 60, 1440]

    def test_magnitude_filter_keys(self):
        keys = [option.key for option in MAGNITUDE_FILTERS]
        assert keys == ["all", "minor", "light", "moderate", "strong"]

    def test_get_time_filter(self):
        assert get_time_filter(60).label == "Last hour"

    def test_get_time_filter_none_is_no_limit(self):
        assert get_time_filter(None) is NO_TIME_LIMIT

    def test_get_time_filter_unknown(self):
        with pytest.raises(ValueError, match="Unknown time filter"):
            get_time_filter(45)

    def test_get_magnitude_filter(self):
        assert get_magnitude_filter("moderate").magnitude_range == (5.0, 5.9)

    def test_get_magnitude_filter_all_has_no_range(self):
        assert get_magnitude_filter("all").magnitude_range is None

    def test_get_magnitude_filter_unknown(self):
        with pytest.raises(ValueError, match="Unknown magnitude filter"):
            get_magnitude_filter("huge")

    def test_strong_is_unbounded(self):
        assert get_magnitude_filter("strong").magnitude_range == (6.0, math.inf)


class TestMatchesTimeWindow:
    """Tests for matches_time_window()."""

    def test_inside_window(self):
        assert matches_time_window(make_earthquake(minutes_ago=5), 10, NOW)

    def test_outside_window(self):
        assert not matches_time_window(make_earthquake(minutes_ago=11), 10, NOW)

    def test_age_equal_to_window_is_included(self):
        """The window boundary is inclusive."""
        assert matches_time_window(make_earthquake(minutes_ago=30), 30, NOW)

    def test_event_at_now_is_included(self):
        assert matches_time_window(make_earthquake(minutes_ago=0), 10, NOW)

    def test_future_event_is_excluded(self):
        """Clock skew in the feed must not show events from the future."""
        assert not matches_time_window(make_earthquake(minutes_ago=-1), 10, NOW)

    def test_no_limit_matches_everything(self):
        assert matches_time_window(make_earthquake(minutes_ago=100000), None, NOW)

    def test_no_limit_includes_future_event(self):
        """Without a window the time predicate is always true."""
        assert matches_time_window(make_earthquake(minutes_ago=-5), None, NOW)

    def test_age_minutes(self):
        assert get_age_minutes(make_earthquake(minutes_ago=90), NOW) == 90


class TestMatchesMagnitudeRange:
    """Tests for matches_magnitude_range()."""

    def test_no_range_matches_everything(self):
        assert matches_magnitude_range(make_earthquake(magnitude=9.1), None)

    def test_bounds_are_inclusive(self):
        light = get_magnitude_filter("light").magnitude_range
        assert matches_magnitude_range(make_earthquake(magnitude=4.0), light)
        assert matches_magnitude_range(make_earthquake(magnitude=4.9), light)

    def test_four_is_light_not_minor(self):
        """4.0 falls in Light, not in Minor."""
        minor = get_magnitude_filter("minor").magnitude_range
        light = get_magnitude_filter("light").magnitude_range
        eq = make_earthquake(magnitude=4.0)

        assert not matches_magnitude_range(eq, minor)
        assert matches_magnitude_range(eq, light)

    def test_value_between_bands_matches_neither(self):
        """3.95 sits in the gap between Minor and Light."""
        eq = make_earthquake(magnitude=3.95)

        assert not matches_magnitude_range(eq, get_magnitude_filter("minor").magnitude_range)
        assert not matches_magnitude_range(eq, get_magnitude_filter("light").magnitude_range)

    def test_strong_has_no_upper_bound(self):
        strong = get_magnitude_filter("strong").magnitude_range
        assert matches_magnitude_range(make_earthquake(magnitude=9.5), strong)

    def test_zero_magnitude_is_minor(self):
        """Records without a parsed magnitude default to 0 and count as Minor."""
        minor = get_magnitude_filter("minor").magnitude_range
        assert matches_magnitude_range(make_earthquake(magnitude=0.0), minor)


class TestFilterEarthquakes:
    """Tests for filter_earthquakes()."""

    def test_time_and_magnitude_combined(self):
        """Only the item satisfying both predicates survives."""
        keep = make_earthquake(minutes_ago=5, magnitude=4.2, link="keep")
        too_old = make_earthquake(minutes_ago=120, magnitude=4.2, link="old")
        too_small = make_earthquake(minutes_ago=5, magnitude=2.0, link="small")

        result = filter_earthquakes([keep, too_old, too_small], 60, (4.0, 4.9), NOW)

        assert [e.link for e in result] == ["keep"]

    def test_preserves_order(self):
        earthquakes = [make_earthquake(minutes_ago=m, link=str(m)) for m in (1, 2, 3)]
        result = filter_earthquakes(earthquakes, 10, None, NOW)
        assert [e.link for e in result] == ["1", "2", "3"]

    def test_thirty_minute_window(self):
        """Items at 5, 20 and 40 minutes: only the first two are in 30 min."""
        earthquakes = [
            make_earthquake(minutes_ago=5, link="a"),
            make_earthquake(minutes_ago=20, link="b"),
            make_earthquake(minutes_ago=40, link="c"),
        ]

        result = filter_earthquakes(earthquakes, 30, None, NOW)

        assert [e.link for e in result] == ["a", "b"]

    def test_idempotent(self):
        """Filtering twice with the same arguments changes nothing."""
        earthquakes = [
            make_earthquake(minutes_ago=m, magnitude=mag, link=f"{m}-{mag}")
            for m in (1, 15, 45, 300)
            for mag in (1.0, 4.5, 6.2)
        ]

        once = filter_earthquakes(earthquakes, 60, (4.0, 4.9), NOW)
        twice = filter_earthquakes(once, 60, (4.0, 4.9), NOW)

        assert once == twice

    def test_empty_input(self):
        assert filter_earthquakes([], 10, None, NOW) == []

    def test_no_limit_keeps_future_dated_record(self):
        """With no window a record dated after now is still shown."""
        future = make_earthquake(minutes_ago=-5, link="future")
        assert filter_earthquakes([future], None, None, NOW) == [future]


class TestApplyFilterState:
    """Tests for apply_filter_state()."""

    def test_default_state_is_last_24_hours(self):
        state = FilterState()
        assert state.time_window_minutes == 1440
        assert state.magnitude_range is None

    def test_applies_state(self):
        earthquakes = [
            make_earthquake(minutes_ago=5, magnitude=6.5, link="strong"),
            make_earthquake(minutes_ago=5, magnitude=3.0, link="minor"),
        ]
        state = FilterState(time_window_minutes=10, magnitude_range=(6.0, math.inf))

        result = apply_filter_state(earthquakes, state, NOW)

        assert [e.link for e in result] == ["strong"]
