"""
Centralized configuration for the Outlay backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, COOKIE_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Outlay API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    # Elevated key: server-only, never exposed through the public config
    supabase_service_role_key: SecretStr = SecretStr("")
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""

    # Base URL used in email confirmation and password recovery links
    site_url: str = "http://localhost:8000"

    # Session handling
    auth_timeout_seconds: float = 5.0
    refresh_margin_seconds: int = 10
    cookie_secure: bool = False
    cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    cookie_max_age: int = 60 * 60 * 24 * 400

    # Route protection (allowlist; unlisted paths are public unless flipped)
    protected_paths: list[str] = ["/", "/expenses", "/settings"]
    auth_entry_paths: list[str] = ["/login", "/signup"]
    public_paths: list[str] = ["/auth", "/forgot-password", "/reset-password", "/api"]
    unlisted_paths_protected: bool = False
    login_path: str = "/login"
    home_path: str = "/"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
