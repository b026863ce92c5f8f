"""QuakeBoard - live dashboard for the UOA seismicity feed."""

__version__ = "1.0.0"
