"""
app/db/supabase.py

Purpose: Supabase client setup

- Builds the async Supabase client once per process
- Table names used by the store service
- Health check and client lifecycle management
"""

from typing import Optional

from supabase import AsyncClient, acreate_client

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ConfigurationError
from app.core.logging import get_logger

logger = get_logger(__name__)

USERS_TABLE = "users"
SETTINGS_TABLE = "settings"
JOIN_REQUESTS_TABLE = "join_requests"
FAVORITES_TABLE = "user_favorites"


async def create_supabase_client(config: Optional[Settings] = None) -> AsyncClient:
    """
    Creates the async Supabase client.
    Called once during application startup.

    Raises:
        ConfigurationError: If URL or service role key is missing
    """
    config = config or default_settings

    if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
        raise ConfigurationError(
            "Supabase credentials are not set",
            details={"missing": [
                name for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")
                if not getattr(config, name)
            ]}
        )

    client = await acreate_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
    logger.info("✅ Supabase client created")
    return client


async def close_supabase_client(client: Optional[AsyncClient]) -> None:
    """
    Releases the HTTP session held by the PostgREST client.
    Called during application shutdown.
    """
    if client is None:
        return

    try:
        await client.postgrest.aclose()
        logger.info("Supabase client closed")
    except Exception as e:
        logger.warning(f"Error closing Supabase client: {e}")


async def check_database_health(client) -> bool:
    """
    Checks that the settings table answers a trivial query.

    Returns:
        True if the store is reachable, False otherwise
    """
    try:
        if client is None:
            logger.error("Supabase client not initialized")
            return False

        await client.table(SETTINGS_TABLE).select("key").limit(1).execute()
        return True

    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False
