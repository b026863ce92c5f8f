"""Dashboard API - FastAPI service for the earthquake dashboard.

Serves the filtered earthquake list, the latest earthquake and the map.
The application owns the feed poller: it starts with the app and is
stopped on shutdown.
"""

import logging
import math
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from quakeboard.core.config import Config
from quakeboard.core.filters import MAGNITUDE_FILTERS, TIME_FILTERS
from quakeboard.core.formatter import earthquake_to_dict, format_status_message
from quakeboard.dashboard import Dashboard, DashboardSession
from quakeboard.shell.map_renderer import MapRenderer
from quakeboard.shell.poller import Poller


logger = logging.getLogger(__name__)


# Pydantic models for the viewer endpoints
class ClickRequest(BaseModel):
    link: str
    time_filter: int | None = Field(default=None, ge=0)
    magnitude_filter: str | None = None
    selected: str | None = None


class RefreshResponse(BaseModel):
    status: str
    summary: str
    items_fetched: int
    earthquakes_parsed: int
    errors: list[str]


def _range_to_json(magnitude_range: tuple[float, float] | None) -> list[float | None] | None:
    """Magnitude band as [min, max]; an unbounded max becomes null."""
    if magnitude_range is None:
        return None
    min_magnitude, max_magnitude = magnitude_range
    return [min_magnitude, max_magnitude if math.isfinite(max_magnitude) else None]


def _open_session(
    dashboard: Dashboard,
    time_filter: int | None,
    magnitude_filter: str | None,
    selected: str | None,
) -> DashboardSession:
    """Build a viewer session from query parameters or raise 400.

    A missing time filter means the configured default; 0 means no limit.
    """
    try:
        return dashboard.new_session(
            time_filter_minutes=time_filter or None,
            magnitude_filter=magnitude_filter,
            selected_link=selected,
            use_defaults=time_filter is None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def create_app(
    config: Config,
    dashboard: Dashboard | None = None,
    map_renderer: MapRenderer | None = None,
    start_poller: bool = True,
) -> FastAPI:
    """Create the dashboard application.

    Args:
        config: Application configuration
        dashboard: Dashboard (created if not provided)
        map_renderer: Map renderer (created if not provided)
        start_poller: Poll the feed in the background while the app runs

    Returns:
        Configured FastAPI app
    """
    dashboard = dashboard or Dashboard(config)
    map_renderer = map_renderer or MapRenderer(
        tile_url=config.map.tile_url,
        width=config.map.width,
        height=config.map.height,
    )
    poller = Poller(
        dashboard.refresh,
        interval=config.polling_interval_seconds,
        skip_overlapping=config.skip_overlapping_polls,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_poller:
            poller.start()
        try:
            yield
        finally:
            if start_poller:
                poller.stop(timeout=1)

    app = FastAPI(
        title="QuakeBoard API",
        description="Recent earthquakes from the UOA seismicity feed",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.state.dashboard = dashboard
    app.state.poller = poller

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        last_refreshed = dashboard.last_refreshed
        return {
            "status": "healthy",
            "loading": dashboard.loading,
            "last_refreshed": last_refreshed.isoformat() if last_refreshed else None,
        }

    @app.get("/api/filters")
    async def get_filters():
        """List the time and magnitude filter options."""
        return {
            "time_filters": [
                {"label": option.label, "minutes": option.minutes}
                for option in TIME_FILTERS
            ],
            "magnitude_filters": [
                {
                    "key": option.key,
                    "label": option.label,
                    "range": _range_to_json(option.magnitude_range),
                }
                for option in MAGNITUDE_FILTERS
            ],
            "default_time_filter": config.default_time_filter_minutes,
            "default_magnitude_filter": config.default_magnitude_filter,
        }

    @app.get("/api/earthquakes")
    def get_earthquakes(
        time_filter: int | None = Query(default=None, ge=0),
        magnitude_filter: str | None = Query(default=None),
        selected: str | None = Query(default=None),
    ):
        """Get the filtered earthquakes, newest first."""
        session = _open_session(dashboard, time_filter, magnitude_filter, selected)
        return session.snapshot()

    @app.post("/api/click")
    def click_earthquake(request: ClickRequest):
        """Toggle the selection for a clicked earthquake.

        The client sends its current filters and selection; the response
        is the session snapshot after the click.
        """
        session = _open_session(
            dashboard, request.time_filter, request.magnitude_filter, request.selected,
        )
        session.click(request.link)
        return session.snapshot()

    @app.get("/api/latest")
    def get_latest():
        """Get the most recent earthquake, ignoring filters."""
        latest = dashboard.latest_earthquake()
        if latest is None:
            return {
                "latest_earthquake": None,
                "message": format_status_message(dashboard.loading),
            }
        return {
            "latest_earthquake": earthquake_to_dict(
                latest, dashboard.now(), config.display_timezone,
            ),
            "fetched_at": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/map")
    def get_map(
        time_filter: int | None = Query(default=None, ge=0),
        magnitude_filter: str | None = Query(default=None),
        selected: str | None = Query(default=None),
    ):
        """Get the map view (center, zoom, markers)."""
        session = _open_session(dashboard, time_filter, magnitude_filter, selected)
        return session.map_view().to_dict()

    @app.get("/api/map.png")
    def get_map_image(
        time_filter: int | None = Query(default=None, ge=0),
        magnitude_filter: str | None = Query(default=None),
        selected: str | None = Query(default=None),
    ):
        """Render the map view as a PNG image."""
        session = _open_session(dashboard, time_filter, magnitude_filter, selected)
        result = map_renderer.render(session.map_view())

        if not result.success or result.image_bytes is None:
            raise HTTPException(status_code=502, detail="Failed to render map")

        return Response(content=result.image_bytes, media_type="image/png")

    @app.post("/api/refresh", response_model=RefreshResponse)
    def trigger_refresh():
        """Poll the feed now instead of waiting for the next tick."""
        result = dashboard.refresh()
        return RefreshResponse(
            status="success" if result.success else "error",
            summary=result.summary,
            items_fetched=result.items_fetched,
            earthquakes_parsed=result.earthquakes_parsed,
            errors=result.errors,
        )

    return app
