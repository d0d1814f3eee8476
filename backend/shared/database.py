"""
Database client factory for Supabase.

The backend talks to Postgres through the service-role client, so Row
Level Security is bypassed and owner scoping is enforced by the storage
service instead.
"""

import logging
from typing import Optional
from supabase import create_client, Client

from .config import Settings, get_settings

logger = logging.getLogger(__name__)

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Args:
        settings: Optional settings; defaults to the cached application settings

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = settings or get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )
        logger.info("Created Supabase client for %s", settings.supabase_url)

    return _service_client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Called on application shutdown, and useful for testing or when
    configuration changes.
    """
    global _service_client
    _service_client = None
