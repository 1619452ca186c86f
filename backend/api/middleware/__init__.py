"""
ASGI middleware for the Outlay API.
"""

from .session import SessionGateMiddleware

__all__ = ["SessionGateMiddleware"]
