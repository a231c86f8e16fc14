"""FastAPI dependency injection."""

import time
from functools import lru_cache
from typing import Any

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings
from app.core.logging import log_db_query, log_error
from app.services.vehicle_db import SupabaseVehicleStore, VehicleStore

limiter = Limiter(key_func=get_remote_address)


def calculation_rate_limit() -> str:
    return get_settings().rate_limit


@lru_cache
def _supabase_store() -> SupabaseVehicleStore:
    return SupabaseVehicleStore()


def get_vehicle_store() -> VehicleStore:
    """Dependency for the reference-data store."""
    return _supabase_store()


async def check_store_health(store: VehicleStore) -> dict[str, Any]:
    """Probe the reference-data store with a cheap read."""
    start = time.time()
    try:
        await store.list_brands()
        duration_ms = (time.time() - start) * 1000
        log_db_query("health_check", "brands", duration_ms)
        return {"status": "healthy", "latency_ms": round(duration_ms, 2)}
    except Exception as e:
        duration_ms = (time.time() - start) * 1000
        log_error("Store health check failed", e)
        return {
            "status": "unhealthy",
            "error": str(e),
            "latency_ms": round(duration_ms, 2),
        }
