"""
Document store connection management.

Machines, fabrics and settings live in Supabase tables. This module owns the
single cached client every service reads and writes through.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions.errors import StoreConnectionError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        StoreConnectionError: If the client cannot be created
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info("supabase_connected", status="success")
        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise StoreConnectionError(str(e)) from e


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check store connection health.

    Returns:
        dict: Connection status with machine count
    """
    try:
        client = get_supabase_client()
        machines = client.table("machines").select("id", count="exact").execute()

        return {
            "status": "healthy",
            "machines_count": machines.count,
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }

