"""Dashboard - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. The Dashboard owns the
in-memory earthquake collection; a DashboardSession holds one viewer's
filter selection and selected earthquake.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from quakeboard.core.config import Config
from quakeboard.core.earthquake import Earthquake, latest_earthquake, normalize_items
from quakeboard.core.filters import (
    FilterState,
    MagnitudeFilterOption,
    TimeFilterOption,
    filter_earthquakes,
    get_magnitude_filter,
    get_time_filter,
)
from quakeboard.core.formatter import (
    earthquake_to_dict,
    format_latest_summary,
    format_status_message,
)
from quakeboard.core.map_view import MapView, build_map_view
from quakeboard.core.selection import find_selected, revalidate_selection, toggle_selection
from quakeboard.shell.feed_client import FeedClient


logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current wall-clock time (UTC)."""
    return datetime.now(timezone.utc)


@dataclass
class RefreshResult:
    """Result of a single poll cycle.

    Attributes:
        items_fetched: Raw items in the feed
        earthquakes_parsed: Items that normalized into earthquakes
        errors: Any errors that occurred
    """
    items_fetched: int = 0
    earthquakes_parsed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Returns True if no critical errors occurred."""
        return len(self.errors) == 0

    @property
    def items_rejected(self) -> int:
        """Items dropped by the normalizer."""
        return self.items_fetched - self.earthquakes_parsed

    @property
    def summary(self) -> str:
        """Human-readable summary of the refresh."""
        if not self.success:
            return f"Refresh failed: {'; '.join(self.errors)}"
        return (
            f"Fetched {self.items_fetched} items, "
            f"{self.earthquakes_parsed} earthquakes, "
            f"{self.items_rejected} rejected"
        )


class Dashboard:
    """Holds the current earthquake collection and refreshes it.

    This class wires together:
    - Feed client (fetches the RSS feed)
    - Core functions (normalization, filtering, formatting)

    The collection is replaced wholesale on every successful refresh and
    left untouched when a refresh fails.
    """

    def __init__(
        self,
        config: Config,
        feed_client: FeedClient | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize dashboard with configuration.

        Args:
            config: Application configuration
            feed_client: Feed client (created if not provided)
            clock: Source of the current time
        """
        self.config = config
        self.feed_client = feed_client or FeedClient(
            feed_url=config.feed_url,
            relay_url=config.relay_url,
            timeout=config.request_timeout_seconds,
        )
        self.clock = clock

        self._lock = threading.Lock()
        self._earthquakes: list[Earthquake] = []
        self._loading = True
        self._last_refreshed: datetime | None = None

    @property
    def earthquakes(self) -> list[Earthquake]:
        """All earthquakes from the last successful refresh, newest first."""
        with self._lock:
            return list(self._earthquakes)

    @property
    def loading(self) -> bool:
        """True until the first refresh attempt has finished."""
        with self._lock:
            return self._loading

    @property
    def last_refreshed(self) -> datetime | None:
        """When the collection was last replaced."""
        with self._lock:
            return self._last_refreshed

    def now(self) -> datetime:
        """Current time according to the dashboard clock."""
        return self.clock()

    def latest_earthquake(self) -> Earthquake | None:
        """The most recent earthquake, regardless of filters."""
        return latest_earthquake(self.earthquakes)

    def refresh(self) -> RefreshResult:
        """Run one poll cycle.

        This is the main entry point that:
        1. Fetches the feed
        2. Normalizes items into earthquakes (newest first)
        3. Replaces the in-memory collection

        Returns:
            RefreshResult with details of what happened
        """
        try:
            items = self.feed_client.fetch_items()
        except Exception as e:
            error_msg = f"Failed to fetch earthquakes: {e}"
            logger.error(error_msg)
            with self._lock:
                self._loading = False
            return RefreshResult(errors=[error_msg])

        # Pure core function
        earthquakes = normalize_items(items)

        with self._lock:
            self._earthquakes = earthquakes
            self._loading = False
            self._last_refreshed = self.now()

        result = RefreshResult(
            items_fetched=len(items),
            earthquakes_parsed=len(earthquakes),
        )
        logger.info("Refresh complete: %s", result.summary)
        return result

    def new_session(
        self,
        time_filter_minutes: int | None = None,
        magnitude_filter: str | None = None,
        selected_link: str | None = None,
        use_defaults: bool = True,
    ) -> "DashboardSession":
        """Open a viewer session.

        Args:
            time_filter_minutes: Time window, None for the configured default
                (or for no limit when use_defaults is False)
            magnitude_filter: Magnitude band key, None for the configured default
            selected_link: Initially selected earthquake link
            use_defaults: Fill a missing time window from config

        Raises:
            ValueError: If a filter option is unknown
        """
        if time_filter_minutes is None and use_defaults:
            time_filter_minutes = self.config.default_time_filter_minutes

        return DashboardSession(
            self,
            time_filter_minutes=time_filter_minutes,
            magnitude_filter=magnitude_filter or self.config.default_magnitude_filter,
            selected_link=selected_link,
        )


class DashboardSession:
    """One viewer's filter selection and selected earthquake.

    The filtered collection is recomputed whenever a filter changes or the
    dashboard data is re-synced, and the selection is dropped as soon as
    its earthquake is no longer in the filtered collection.
    """

    def __init__(
        self,
        dashboard: Dashboard,
        time_filter_minutes: int | None,
        magnitude_filter: str,
        selected_link: str | None = None,
    ) -> None:
        self.dashboard = dashboard
        self.time_filter: TimeFilterOption = get_time_filter(time_filter_minutes)
        self.magnitude_filter: MagnitudeFilterOption = get_magnitude_filter(magnitude_filter)
        self.selected_link = selected_link
        self.filtered: list[Earthquake] = []
        self.sync()

    @property
    def filter_state(self) -> FilterState:
        """The active filters as a FilterState."""
        return FilterState(
            time_window_minutes=self.time_filter.minutes,
            magnitude_range=self.magnitude_filter.magnitude_range,
        )

    @property
    def selected_earthquake(self) -> Earthquake | None:
        """The selected earthquake object, if any."""
        return find_selected(self.selected_link, self.filtered)

    def sync(self) -> list[Earthquake]:
        """Recompute the filtered collection from the dashboard data."""
        state = self.filter_state
        self.filtered = filter_earthquakes(
            self.dashboard.earthquakes,
            state.time_window_minutes,
            state.magnitude_range,
            self.dashboard.now(),
        )

        selected = revalidate_selection(self.selected_link, self.filtered)
        if selected != self.selected_link:
            logger.debug("Selected earthquake %s filtered out, clearing", self.selected_link)
            self.selected_link = selected

        return self.filtered

    def set_time_filter(self, minutes: int | None) -> list[Earthquake]:
        """Change the time window and refilter.

        Raises:
            ValueError: If the window is not a known option
        """
        self.time_filter = get_time_filter(minutes)
        return self.sync()

    def set_magnitude_filter(self, key: str) -> list[Earthquake]:
        """Change the magnitude band and refilter.

        Raises:
            ValueError: If the key is not a known option
        """
        self.magnitude_filter = get_magnitude_filter(key)
        return self.sync()

    def click(self, link: str) -> str | None:
        """Toggle the selection for the clicked earthquake."""
        self.selected_link = revalidate_selection(
            toggle_selection(self.selected_link, link),
            self.filtered,
        )
        return self.selected_link

    def map_view(self) -> MapView:
        """Map showing the selected earthquake, or every filtered one."""
        return build_map_view(self.filtered, self.selected_earthquake)

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable view of the session."""
        now = self.dashboard.now()
        tz_name = self.dashboard.config.display_timezone
        latest = self.dashboard.latest_earthquake()

        return {
            "time_filter": self.time_filter.minutes,
            "magnitude_filter": self.magnitude_filter.key,
            "selected": self.selected_link,
            "loading": self.dashboard.loading,
            "latest": earthquake_to_dict(latest, now, tz_name) if latest else None,
            "latest_summary": (
                format_latest_summary(latest, tz_name)
                if latest else format_status_message(self.dashboard.loading)
            ),
            "earthquakes": [earthquake_to_dict(e, now, tz_name) for e in self.filtered],
            "count": len(self.filtered),
        }
