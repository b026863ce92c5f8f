"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Seismicity feed client (HTTP)
- Feed poller (background schedule)
- Map renderer (tile fetching, image rendering)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from quakeboard.shell.feed_client import FeedClient
from quakeboard.shell.poller import Poller
from quakeboard.shell.map_renderer import MapRenderer
from quakeboard.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "FeedClient",
    "Poller",
    "MapRenderer",
    "load_config",
    "load_config_from_env",
]
