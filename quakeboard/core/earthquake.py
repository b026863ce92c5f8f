"""Earthquake data models and feed-item normalization - Pure functions.

This module turns loosely-formatted RSS items into typed Earthquake records.
Each field is extracted by its own function so that format drift in the
upstream feed can be diagnosed field by field.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


logger = logging.getLogger(__name__)


UNKNOWN_LOCATION = "Unknown location"

# "10 km NE of Athens<br>" inside the item description
DESCRIPTION_LOCATION_PATTERN = re.compile(r"(\d+\.?\d* km [NSEW]+ of .+?)<")
# "M 4.5 - 10 km NE of Athens" when the description carries no location
TITLE_DISTANCE_LOCATION_PATTERN = re.compile(r"(\d+\.?\d* km [NSEW]+ of .+)$")
# "M 3.0 earthquake of Crete"
TITLE_LOCATION_PATTERN = re.compile(r"of (.+)$")
MAGNITUDE_PATTERN = re.compile(r"M ([\d.]+)")
LATITUDE_PATTERN = re.compile(r"Latitude: ([\d.]+)[NS]", re.IGNORECASE)
LONGITUDE_PATTERN = re.compile(r"Longitude: ([\d.]+)[EW]", re.IGNORECASE)
DEPTH_PATTERN = re.compile(r"Depth: ([\d.]+)km")
NUMBER_PREFIX_PATTERN = re.compile(r"\d+(?:\.\d*)?|\.\d+")


@dataclass(frozen=True)
class RawFeedItem:
    """A single feed entry as delivered by the upstream RSS source.

    Attributes:
        title: Item title (e.g. "M 4.5 - 10 km NE of Athens")
        link: Item URL
        pub_date: Publication date string, usually GMT without a zone
        content: Rich content body (preferred over description)
        description: Plain description body
    """
    title: str = ""
    link: str = ""
    pub_date: str | None = None
    content: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake record.

    Attributes:
        title: Item title, verbatim
        link: Event URL, used as the identity key
        time: Event timestamp (UTC)
        location: Human-readable location description
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        depth_km: Depth in kilometers
        magnitude: Earthquake magnitude
    """
    title: str
    link: str
    time: datetime
    location: str
    latitude: float
    longitude: float
    depth_km: float
    magnitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def get_source_text(item: RawFeedItem) -> str:
    """Pick the text the coordinates are embedded in.

    Pure function. Content wins over description; neither gives "".
    """
    return item.content or item.description or ""


def _parse_float(pattern: re.Pattern[str], text: str) -> float | None:
    match = pattern.search(text)
    if match is None:
        return None
    # [\d.]+ also matches "4.5." or "..."; keep the leading number only
    number = NUMBER_PREFIX_PATTERN.match(match.group(1))
    if number is None:
        return None
    return float(number.group(0))


def extract_location(source_text: str, title: str) -> str | None:
    """Extract the location description.

    Pure function.

    Args:
        source_text: Item content/description
        title: Item title, used as a fallback

    Returns:
        Location text, or None if neither pattern matches
    """
    for pattern, text in (
        (DESCRIPTION_LOCATION_PATTERN, source_text),
        (TITLE_DISTANCE_LOCATION_PATTERN, title),
        (TITLE_LOCATION_PATTERN, title),
    ):
        match = pattern.search(text)
        if match is not None:
            return match.group(1).strip()
    return None


def extract_magnitude(title: str) -> float | None:
    """Extract magnitude from an "M 4.5 ..." title. Pure function."""
    return _parse_float(MAGNITUDE_PATTERN, title)


def extract_latitude(source_text: str) -> float | None:
    """Extract latitude from a "Latitude: 38.5N" fragment. Pure function."""
    return _parse_float(LATITUDE_PATTERN, source_text)


def extract_longitude(source_text: str) -> float | None:
    """Extract longitude from a "Longitude: 23.1E" fragment. Pure function."""
    return _parse_float(LONGITUDE_PATTERN, source_text)


def extract_depth(source_text: str) -> float | None:
    """Extract depth from a "Depth: 10km" fragment. Pure function."""
    return _parse_float(DEPTH_PATTERN, source_text)


def parse_event_time(pub_date: str | None) -> datetime | None:
    """Parse a feed publication date into an aware UTC datetime.

    Pure function. Feed dates are RFC-822 strings that usually carry no
    zone; those are taken as GMT. ISO-8601 strings are accepted as well.

    Args:
        pub_date: Raw publication date string

    Returns:
        UTC datetime, or None if the string is not a valid date
    """
    if not pub_date or not pub_date.strip():
        return None

    text = pub_date.strip()
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def normalize_item(item: RawFeedItem) -> Earthquake | None:
    """Normalize one raw feed item into an Earthquake.

    Pure function (apart from diagnostics logging). An unparseable event
    time rejects the item; every other field falls back to a default.

    Args:
        item: Raw feed item

    Returns:
        Earthquake object or None if the item is rejected
    """
    try:
        source_text = get_source_text(item)
        title = item.title or ""

        event_time = parse_event_time(item.pub_date)
        if event_time is None:
            logger.warning(
                "Invalid date %r for item %r, skipping",
                item.pub_date,
                item.title,
            )
            return None

        location = extract_location(source_text, title)
        magnitude = extract_magnitude(title)
        latitude = extract_latitude(source_text)
        longitude = extract_longitude(source_text)
        depth_km = extract_depth(source_text)

        return Earthquake(
            title=title,
            link=item.link or "",
            time=event_time,
            location=location or UNKNOWN_LOCATION,
            latitude=latitude if latitude is not None else 0.0,
            longitude=longitude if longitude is not None else 0.0,
            depth_km=depth_km if depth_km is not None else 0.0,
            magnitude=magnitude if magnitude is not None else 0.0,
        )
    except Exception:
        logger.exception("Error parsing earthquake item %r", item.title)
        return None


def sort_by_time(earthquakes: list[Earthquake]) -> list[Earthquake]:
    """Sort earthquakes newest first. Pure function."""
    return sorted(earthquakes, key=lambda e: e.time, reverse=True)


def normalize_items(items: list[RawFeedItem]) -> list[Earthquake]:
    """Normalize a batch of feed items.

    Pure function: drops rejected items, returns valid earthquakes.

    Args:
        items: Raw feed items from one poll

    Returns:
        List of valid Earthquake objects, sorted by time (newest first)
    """
    earthquakes = []

    for item in items:
        earthquake = normalize_item(item)
        if earthquake is not None:
            earthquakes.append(earthquake)

    return sort_by_time(earthquakes)


def latest_earthquake(earthquakes: list[Earthquake]) -> Earthquake | None:
    """Return the most recent earthquake of a time-sorted list."""
    return earthquakes[0] if earthquakes else None
