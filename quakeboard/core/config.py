"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from quakeboard.core.filters import (
    DEFAULT_MAGNITUDE_FILTER,
    DEFAULT_TIME_FILTER_MINUTES,
    MAGNITUDE_FILTERS,
    TIME_FILTERS,
)
from quakeboard.core.formatter import DEFAULT_DISPLAY_TIMEZONE


# University of Athens seismicity feed
DEFAULT_FEED_URL = "http://www.geophysics.geol.uoa.gr/stations/maps/seismicity.xml"
DEFAULT_RELAY_URL = "https://corsproxy.io/?url="
DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


@dataclass
class MapConfig:
    """Rendering settings for the map image.

    Attributes:
        tile_url: Tile URL template
        width: Image width in pixels
        height: Image height in pixels
    """
    tile_url: str = DEFAULT_TILE_URL
    width: int = 800
    height: int = 600


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_url: RSS feed with recent earthquakes
        relay_url: Prefix the feed URL is appended to ("" to fetch directly)
        request_timeout_seconds: Feed request timeout
        polling_interval_seconds: How often to poll the feed
        skip_overlapping_polls: Skip a poll while the previous one is in flight
        default_time_filter_minutes: Initial time window (None for no limit)
        default_magnitude_filter: Initial magnitude band key
        display_timezone: Timezone for displayed times
        map: Map rendering settings
    """
    feed_url: str = DEFAULT_FEED_URL
    relay_url: str = DEFAULT_RELAY_URL
    request_timeout_seconds: int = 10
    polling_interval_seconds: int = 120
    skip_overlapping_polls: bool = True
    default_time_filter_minutes: int | None = DEFAULT_TIME_FILTER_MINUTES
    default_magnitude_filter: str = DEFAULT_MAGNITUDE_FILTER
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE
    map: MapConfig = field(default_factory=MapConfig)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_positive(value: int, field_name: str) -> list[ValidationError]:
    """Validate that a numeric setting is positive. Pure function."""
    if value <= 0:
        return [ValidationError(
            field=field_name,
            message=f"{field_name} must be positive, got {value}",
        )]
    return []


def validate_timezone(tz_name: str, field_name: str) -> list[ValidationError]:
    """Validate an IANA timezone name."""
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return [ValidationError(
            field=field_name,
            message=f"Unknown timezone '{tz_name}'",
        )]
    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.feed_url:
        errors.append(ValidationError(
            field="feed_url",
            message="Feed URL is empty",
        ))
    elif config.feed_url.startswith("${"):
        errors.append(ValidationError(
            field="feed_url",
            message="Feed URL not resolved (still contains placeholder)",
            severity="warning",
        ))

    errors.extend(validate_positive(
        config.request_timeout_seconds, "request_timeout_seconds",
    ))
    errors.extend(validate_positive(
        config.polling_interval_seconds, "polling_interval_seconds",
    ))

    # A request that outlives the interval means polls can pile up
    if (
        0 < config.polling_interval_seconds <= config.request_timeout_seconds
        and not config.skip_overlapping_polls
    ):
        errors.append(ValidationError(
            field="polling_interval_seconds",
            message=(
                f"Polling interval ({config.polling_interval_seconds}s) does not exceed "
                f"request timeout ({config.request_timeout_seconds}s); polls may overlap"
            ),
            severity="warning",
        ))

    time_filter_values = {option.minutes for option in TIME_FILTERS}
    if (
        config.default_time_filter_minutes is not None
        and config.default_time_filter_minutes not in time_filter_values
    ):
        errors.append(ValidationError(
            field="default_time_filter_minutes",
            message=(
                f"Unknown time filter {config.default_time_filter_minutes}, "
                f"expected one of {sorted(time_filter_values)}"
            ),
        ))

    magnitude_keys = [option.key for option in MAGNITUDE_FILTERS]
    if config.default_magnitude_filter not in magnitude_keys:
        errors.append(ValidationError(
            field="default_magnitude_filter",
            message=(
                f"Unknown magnitude filter '{config.default_magnitude_filter}', "
                f"expected one of {magnitude_keys}"
            ),
        ))

    errors.extend(validate_timezone(config.display_timezone, "display_timezone"))

    errors.extend(validate_positive(config.map.width, "map.width"))
    errors.extend(validate_positive(config.map.height, "map.height"))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
