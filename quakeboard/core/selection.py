"""Selected-earthquake tracking - Pure functions.

The selection is a weak reference by link into the filtered collection.
It must be revalidated whenever that collection changes.
"""

from quakeboard.core.earthquake import Earthquake


def toggle_selection(current_link: str | None, clicked_link: str) -> str | None:
    """Clicking the selected earthquake deselects it; any other selects it."""
    if current_link == clicked_link:
        return None
    return clicked_link


def revalidate_selection(
    selected_link: str | None,
    earthquakes: list[Earthquake],
) -> str | None:
    """Keep the selection only if it is still present.

    Pure function.

    Args:
        selected_link: Currently selected link (or None)
        earthquakes: The current filtered earthquakes

    Returns:
        selected_link if an earthquake with that link is present, else None
    """
    if selected_link is None:
        return None

    if any(e.link == selected_link for e in earthquakes):
        return selected_link

    return None


def find_selected(
    selected_link: str | None,
    earthquakes: list[Earthquake],
) -> Earthquake | None:
    """Return the selected earthquake object, if present."""
    if selected_link is None:
        return None

    for earthquake in earthquakes:
        if earthquake.link == selected_link:
            return earthquake

    return None
