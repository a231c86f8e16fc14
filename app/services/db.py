"""Shared Supabase client for the reference-data tables."""

import threading

from app.config import get_settings
from app.core.logging import logger
from supabase import Client, create_client

_supabase: Client | None = None
_client_lock = threading.Lock()


def get_supabase_client() -> Client:
    """Get or create the shared Supabase client (thread-safe).

    Queries run in worker threads via ``asyncio.to_thread``, so creation is
    guarded by a lock.
    """
    global _supabase
    if _supabase is None:
        with _client_lock:
            if _supabase is None:
                settings = get_settings()
                logger.info(f"Connecting to Supabase at {settings.supabase_url}")
                _supabase = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase
