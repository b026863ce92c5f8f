"""Unit tests for map view configuration.

Pure function tests - fast, no mocks needed.
"""

from datetime import datetime, timezone

import pytest

from quakeboard.core.earthquake import Earthquake
from quakeboard.core.map_view import (
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    MARKER_COLORS,
    build_map_view,
    create_marker,
    get_map_center,
    get_marker_color,
)


def make_earthquake(link: str, magnitude: float, latitude: float, longitude: float) -> Earthquake:
    """Create an earthquake at the given position."""
    return Earthquake(
        title=f"M {magnitude} - somewhere",
        link=link,
        time=datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc),
        location="somewhere",
        latitude=latitude,
        longitude=longitude,
        depth_km=10.0,
        magnitude=magnitude,
    )


@pytest.fixture
def earthquakes():
    """Two earthquakes, newest first."""
    return [
        make_earthquake("first", 5.4, 35.3, 25.1),
        make_earthquake("second", 2.1, 38.0, 23.7),
    ]


class TestGetMarkerColor:
    """Tests for get_marker_color()."""

    @pytest.mark.parametrize("magnitude,expected", [
        (7.1, "red"),
        (6.0, "red"),
        (5.9, "orange"),
        (5.0, "orange"),
        (4.0, "gold"),
        (3.9, "green"),
        (0.0, "green"),
    ])
    def test_colors(self, magnitude, expected):
        assert get_marker_color(magnitude) == expected

    def test_every_color_has_hex(self):
        for magnitude in (0, 4, 5, 6):
            assert get_marker_color(magnitude) in MARKER_COLORS


class TestGetMapCenter:
    """Tests for get_map_center()."""

    def test_centers_on_first(self, earthquakes):
        assert get_map_center(earthquakes) == (35.3, 25.1)

    def test_defaults_to_greece(self):
        assert get_map_center([]) == DEFAULT_CENTER


class TestCreateMarker:
    """Tests for create_marker()."""

    def test_marker_fields(self, earthquakes):
        marker = create_marker(earthquakes[0])

        assert marker.link == "first"
        assert (marker.latitude, marker.longitude) == (35.3, 25.1)
        assert marker.color == "orange"
        assert marker.hex_color == MARKER_COLORS["orange"]
        assert marker.popup[0] == "M 5.4"


class TestBuildMapView:
    """Tests for build_map_view()."""

    def test_all_filtered_earthquakes(self, earthquakes):
        view = build_map_view(earthquakes)

        assert view.center == (35.3, 25.1)
        assert view.zoom == DEFAULT_ZOOM
        assert [m.link for m in view.markers] == ["first", "second"]

    def test_selected_earthquake_only(self, earthquakes):
        """A selection shows exactly one marker and centers on it."""
        view = build_map_view(earthquakes, selected=earthquakes[1])

        assert view.center == (38.0, 23.7)
        assert [m.link for m in view.markers] == ["second"]

    def test_empty(self):
        view = build_map_view([])

        assert view.center == DEFAULT_CENTER
        assert view.markers == ()

    def test_to_dict(self, earthquakes):
        result = build_map_view(earthquakes, zoom=8).to_dict()

        assert result["center"] == {"lat": 35.3, "lng": 25.1}
        assert result["zoom"] == 8
        assert result["markers"][1]["color"] == "green"
        assert isinstance(result["markers"][0]["popup"], list)
