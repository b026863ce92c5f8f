"""Map Renderer - Imperative Shell.

This module renders the earthquake map as a PNG using OpenStreetMap tiles.
All I/O is contained here; what the map shows is decided in the core module.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from quakeboard.core.config import DEFAULT_TILE_URL
from quakeboard.core.map_view import MapView


logger = logging.getLogger(__name__)


MARKER_RADIUS = 8


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class MapRenderer:
    """Renders a MapView into a static PNG image.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(
        self,
        tile_url: str | None = None,
        width: int = 800,
        height: int = 600,
    ) -> None:
        """Initialize map renderer.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
            width: Image width in pixels
            height: Image height in pixels
        """
        self.tile_url = tile_url or DEFAULT_TILE_URL
        self.width = width
        self.height = height

    def render(self, view: MapView) -> MapImageResult:
        """Render the map view.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            view: Map view from core module

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Rendering map with %d markers around (%.4f, %.4f) at zoom %d",
            len(view.markers),
            view.center[0],
            view.center[1],
            view.zoom,
        )

        try:
            static_map = StaticMap(
                self.width,
                self.height,
                url_template=self.tile_url,
            )

            for marker in view.markers:
                # (lon, lat) order for staticmap
                position = (marker.longitude, marker.latitude)
                # White ring first so it renders behind the colored dot
                static_map.add_marker(CircleMarker(position, "white", MARKER_RADIUS + 3))
                static_map.add_marker(CircleMarker(position, marker.hex_color, MARKER_RADIUS))

            image = static_map.render(
                zoom=view.zoom,
                center=[view.center[1], view.center[0]],
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info("Rendered map image: %d bytes", len(image_bytes))

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to render map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
