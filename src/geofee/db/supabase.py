"""Supabase client used by the provider usage log."""

from __future__ import annotations

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


def supabase_configured() -> bool:
    return bool(settings.supabase_url and settings.supabase_key)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Shared Supabase client, or None when credentials are missing or rejected.

    Creating the client does not contact the project; insert failures surface
    later and are handled by the usage sink.
    """
    if not supabase_configured():
        logger.info("Supabase credentials not configured; usage events stay in the log")
        return None
    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None
