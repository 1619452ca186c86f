"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for every OutlayError."""

    error: str = Field(..., description="Stable error code, e.g. EXPENSE_NOT_FOUND")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
