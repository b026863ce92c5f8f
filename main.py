"""Dashboard Entry Point - Root Module.

This is the root-level entry point for `uvicorn main:app`.
It imports from the quakeboard package.
"""

from quakeboard.main import app

__all__ = [
    "app",
]
