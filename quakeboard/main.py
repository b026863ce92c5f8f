"""Application Entry Point.

This module configures logging, loads configuration and builds the
dashboard app. Run it directly to serve the dashboard with uvicorn.
"""

import logging
import os

import uvicorn

from quakeboard.api import create_app
from quakeboard.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("FEED_URL"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


app = create_app(_get_config())


if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8080"))

    logger.info("Serving dashboard on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
