"""
Base exception classes for the Outlay backend.

Each module defines its own exceptions that inherit from these bases.
Every class carries the HTTP status the API error handler answers with,
so route handlers can let domain errors propagate.
"""

from typing import Optional, Any


class OutlayError(Exception):
    """
    Base exception for all Outlay errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(OutlayError):
    """Resource not found (or hidden by row-level security)."""

    status_code = 404


class ValidationError(OutlayError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(OutlayError):
    """Authentication failed (invalid, missing or expired credentials)."""

    status_code = 401


class AuthorizationError(OutlayError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class ExternalServiceError(OutlayError):
    """
    Error communicating with an external service.

    Surfaced to users as a generic banner; the underlying cause stays in
    the logs.
    """

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code or "SERVICE_UNAVAILABLE", details)
        self.service = service
        self.details["service"] = service
