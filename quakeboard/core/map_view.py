"""Map view configuration - Pure functions.

This module decides what the earthquake map shows: its center, zoom and
one marker per earthquake. The actual image rendering (I/O) is handled by
the shell layer.
"""

from dataclasses import dataclass, field
from typing import Any

from quakeboard.core.earthquake import Earthquake
from quakeboard.core.formatter import format_popup_lines


# Center of Greece
DEFAULT_CENTER = (39.0742, 21.8243)
DEFAULT_ZOOM = 6

MARKER_COLORS = {
    "red": "#dc2626",
    "orange": "#f97316",
    "gold": "#eab308",
    "green": "#22c55e",
}


@dataclass(frozen=True)
class MapMarker:
    """A single earthquake marker.

    Attributes:
        link: Link of the earthquake the marker belongs to
        latitude: Marker latitude
        longitude: Marker longitude
        color: Marker color name (red/orange/gold/green)
        popup: Popup text lines
    """
    link: str
    latitude: float
    longitude: float
    color: str
    popup: tuple[str, ...] = field(default_factory=tuple)

    @property
    def hex_color(self) -> str:
        """Hex value of the marker color."""
        return MARKER_COLORS[self.color]


@dataclass(frozen=True)
class MapView:
    """Immutable description of what the map shows.

    Attributes:
        center: (latitude, longitude) the map is centered on
        zoom: Zoom level (1-18)
        markers: One marker per displayed earthquake
    """
    center: tuple[float, float]
    zoom: int
    markers: tuple[MapMarker, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "center": {"lat": self.center[0], "lng": self.center[1]},
            "zoom": self.zoom,
            "markers": [
                {
                    "link": m.link,
                    "latitude": m.latitude,
                    "longitude": m.longitude,
                    "color": m.color,
                    "popup": list(m.popup),
                }
                for m in self.markers
            ],
        }


def get_marker_color(magnitude: float) -> str:
    """Get the marker color for a magnitude.

    Pure function.

    Args:
        magnitude: Earthquake magnitude

    Returns:
        Color name: red (6+), orange (5+), gold (4+), green otherwise
    """
    if magnitude >= 6:
        return "red"
    elif magnitude >= 5:
        return "orange"
    elif magnitude >= 4:
        return "gold"
    return "green"


def get_map_center(earthquakes: list[Earthquake]) -> tuple[float, float]:
    """Center on the first earthquake, or on Greece if there is none."""
    if earthquakes:
        return earthquakes[0].coordinates
    return DEFAULT_CENTER


def create_marker(earthquake: Earthquake) -> MapMarker:
    """Create the map marker for an earthquake. Pure function."""
    return MapMarker(
        link=earthquake.link,
        latitude=earthquake.latitude,
        longitude=earthquake.longitude,
        color=get_marker_color(earthquake.magnitude),
        popup=tuple(format_popup_lines(earthquake)),
    )


def build_map_view(
    earthquakes: list[Earthquake],
    selected: Earthquake | None = None,
    zoom: int = DEFAULT_ZOOM,
) -> MapView:
    """Build the map view for the filtered earthquakes.

    Pure function. A selected earthquake is shown on its own; otherwise
    every filtered earthquake gets a marker.

    Args:
        earthquakes: Filtered earthquakes, newest first
        selected: The selected earthquake, if any
        zoom: Zoom level

    Returns:
        MapView with center and markers set
    """
    shown = [selected] if selected is not None else earthquakes

    return MapView(
        center=get_map_center(shown),
        zoom=zoom,
        markers=tuple(create_marker(e) for e in shown),
    )
