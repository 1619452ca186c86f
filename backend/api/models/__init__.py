"""
API-level response models shared by several routers.
"""

from .errors import ErrorResponse

__all__ = ["ErrorResponse"]
