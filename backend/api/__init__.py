"""
Outlay API package.

Provides the FastAPI application for the Outlay expense tracker.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
