"""
Supabase client for the Remote Data Gateway.

One service-role client per process. Row-level rules are enforced by the
service layer, so the client bypasses RLS.
"""

from typing import Optional

from supabase import Client, create_client
from supabase.client import ClientOptions

from .config import Settings, get_settings

# Settings the service-role client cannot start without
REQUIRED_SUPABASE_SETTINGS = ("supabase_url", "supabase_service_role_key")

_client: Optional[Client] = None


def missing_supabase_settings(settings: Settings) -> list[str]:
    """Environment variable names of required Supabase settings that are empty."""
    return [
        f"BLOGGAZERS_{name.upper()}"
        for name in REQUIRED_SUPABASE_SETTINGS
        if not getattr(settings, name)
    ]


def get_supabase_client() -> Client:
    """
    The cached service-role client.

    Raises:
        RuntimeError: If the URL or service role key is not configured
    """
    global _client

    if _client is None:
        settings = get_settings()
        missing = missing_supabase_settings(settings)
        if missing:
            raise RuntimeError(f"Supabase configuration missing: set {', '.join(missing)}")
        _client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
            options=ClientOptions(
                postgrest_client_timeout=settings.supabase_timeout,
                storage_client_timeout=int(settings.supabase_timeout),
            ),
        )

    return _client


def reset_client_cache() -> None:
    global _client
    _client = None
