"""
Health check and public configuration endpoints.

Provides endpoints for monitoring application health and readiness, plus
the client configuration a browser needs to talk to Supabase directly.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    supabase: str
    jwt_verification: str


class PublicConfigResponse(BaseModel):
    """
    Client-safe configuration.

    Only the public URL and the anon key; the service-role key has no
    field here.
    """

    supabase_url: str
    supabase_anon_key: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether the Supabase settings needed to serve requests are present.
    """
    settings = get_settings()
    configured = bool(settings.supabase_url and settings.supabase_anon_key)
    return ReadinessResponse(
        status="ready" if configured else "not_ready",
        supabase="configured" if configured else "missing",
        jwt_verification="local" if settings.supabase_jwt_secret else "remote",
    )


@router.get("/config", response_model=PublicConfigResponse)
async def public_config() -> PublicConfigResponse:
    settings = get_settings()
    return PublicConfigResponse(
        supabase_url=settings.supabase_url,
        supabase_anon_key=settings.supabase_anon_key,
    )
