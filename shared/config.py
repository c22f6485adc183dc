"""
Centralized configuration for the Bloggazers backend.

All settings are loaded from environment variables (prefixed with
BLOGGAZERS_) with sensible defaults. Supabase settings are grouped
under SUPABASE_*.
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BLOGGAZERS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Bloggazers API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_storage_bucket: str = "bloggazers"
    supabase_db_url: str = ""
    supabase_timeout: float = 10.0  # seconds, per request

    # Which Remote Data Gateway backs the services
    gateway_backend: Literal["supabase", "memory"] = "supabase"

    # Listing and scan sizes
    listing_page_size: int = 9
    search_scan_limit: int = 100
    tag_scan_limit: int = 1000
    admin_list_limit: int = 50
    related_posts_limit: int = 3

    # Uploads
    max_upload_bytes: int = 5 * 1024 * 1024

    # Session
    identity_resolution_timeout: float = 10.0  # seconds
    view_session_cookie: str = "bloggazers_session"

    # Placeholder avatar for freshly created principals
    default_avatar_url: str = "https://api.dicebear.com/7.x/avataaars/svg?seed={user_id}"

    # Frontend URLs (for redirects)
    frontend_url: str = "http://localhost:5173"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
