"""Read-only accessors for vehicle reference data stored in Supabase.

Tables: ``brands``, ``models``, ``versions`` and ``config``. The query
functions are synchronous, mirroring the supabase-py client;
:class:`SupabaseVehicleStore` runs them in worker threads so the calculator
can await several lookups at once.
"""

import asyncio
import math
import time
from typing import Any, Callable, Optional, Protocol, TypeVar

from supabase import Client

from app.config import get_settings
from app.core.logging import log_db_query
from app.models.vehicle import Brand, ConfigEntry, HybridCandidate, VehicleModel
from app.services.db import get_supabase_client

T = TypeVar("T")

_HYBRID_SELECT = (
    "id, specific_version, km_per_gallon, is_hybrid, image_url, "
    "models!inner (id, name, brands!inner (id, name))"
)


def _optional_float(val: Any) -> Optional[float]:
    if val is None or val == "":
        return None
    try:
        number = float(val)
    except (ValueError, TypeError):
        return None
    return number if math.isfinite(number) else None


def _first_row(data: Any) -> Optional[dict[str, Any]]:
    if data and isinstance(data, list) and isinstance(data[0], dict):
        return data[0]
    return None


def _flatten_hybrid_row(row: dict[str, Any]) -> Optional[HybridCandidate]:
    """Resolve the nested model/brand join into a flat candidate."""
    efficiency = _optional_float(row.get("km_per_gallon"))
    if efficiency is None:
        return None
    model = row.get("models") if isinstance(row.get("models"), dict) else {}
    brand = model.get("brands") if isinstance(model.get("brands"), dict) else {}
    return HybridCandidate(
        id=int(row["id"]),
        variant_label=str(row.get("specific_version") or ""),
        efficiency=efficiency,
        image_ref=str(row["image_url"]) if row.get("image_url") else None,
        brand_name=str(brand.get("name") or ""),
        model_name=str(model.get("name") or ""),
    )


# ---------------------------------------------------------------------------
# Brands / Models
# ---------------------------------------------------------------------------


def fetch_all_brands(client: Client) -> list[Brand]:
    """All brands ordered alphabetically."""
    result = client.table("brands").select("id, name").order("name").execute()
    brands: list[Brand] = []
    if result.data and isinstance(result.data, list):
        for row in result.data:
            if isinstance(row, dict):
                brands.append(Brand(id=int(row["id"]), name=str(row["name"])))
    return brands


def fetch_brand_name(client: Client, brand_id: int) -> Optional[str]:
    result = client.table("brands").select("name").eq("id", brand_id).limit(1).execute()
    row = _first_row(result.data)
    return str(row["name"]) if row and row.get("name") else None


def fetch_models_by_brand(client: Client, brand_id: int) -> list[VehicleModel]:
    """Models of one brand ordered alphabetically."""
    result = (
        client.table("models")
        .select("id, brand_id, name")
        .eq("brand_id", brand_id)
        .order("name")
        .execute()
    )
    models: list[VehicleModel] = []
    if result.data and isinstance(result.data, list):
        for row in result.data:
            if isinstance(row, dict):
                models.append(
                    VehicleModel(
                        id=int(row["id"]),
                        brand_id=int(row["brand_id"]),
                        name=str(row["name"]),
                    )
                )
    return models


def fetch_model_name(client: Client, model_id: int) -> Optional[str]:
    result = client.table("models").select("name").eq("id", model_id).limit(1).execute()
    row = _first_row(result.data)
    return str(row["name"]) if row and row.get("name") else None


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------


def fetch_max_efficiency_for_model(client: Client, model_id: int) -> Optional[float]:
    """Best km/gallon across every version of a model."""
    result = (
        client.table("versions")
        .select("km_per_gallon")
        .eq("model_id", model_id)
        .order("km_per_gallon", desc=True)
        .limit(1)
        .execute()
    )
    row = _first_row(result.data)
    return _optional_float(row.get("km_per_gallon")) if row else None


def fetch_hybrid_candidates(
    client: Client, brand_name: Optional[str] = None
) -> list[HybridCandidate]:
    """Hybrid versions with their model and brand names, best efficiency first."""
    query = client.table("versions").select(_HYBRID_SELECT).eq("is_hybrid", True)
    if brand_name:
        query = query.eq("models.brands.name", brand_name)
    result = query.order("km_per_gallon", desc=True).execute()

    candidates: list[HybridCandidate] = []
    if result.data and isinstance(result.data, list):
        for row in result.data:
            if isinstance(row, dict):
                candidate = _flatten_hybrid_row(row)
                if candidate is not None:
                    candidates.append(candidate)
    return candidates


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


def fetch_config_entry(client: Client, key: str) -> Optional[ConfigEntry]:
    result = (
        client.table("config")
        .select("key, value, description")
        .eq("key", key)
        .limit(1)
        .execute()
    )
    row = _first_row(result.data)
    if row is None:
        return None
    value = _optional_float(row.get("value"))
    if value is None:
        return None
    return ConfigEntry(key=str(row["key"]), value=value, description=row.get("description"))


# ---------------------------------------------------------------------------
# Async store
# ---------------------------------------------------------------------------


class VehicleStore(Protocol):
    """Reference data the savings calculator reads. ``None`` means absent."""

    async def get_max_efficiency_for_model(self, model_id: int) -> Optional[float]: ...

    async def get_hybrid_candidates(self) -> Optional[list[HybridCandidate]]: ...

    async def get_gas_price_per_liter(self) -> Optional[float]: ...

    async def get_brand_name(self, brand_id: int) -> Optional[str]: ...

    async def get_model_name(self, model_id: int) -> Optional[str]: ...

    async def list_brands(self) -> list[Brand]: ...

    async def list_models(self, brand_id: int) -> list[VehicleModel]: ...


class SupabaseVehicleStore:
    """:class:`VehicleStore` backed by the shared Supabase client."""

    def __init__(
        self,
        client: Client | None = None,
        fuel_price_key: str | None = None,
        hybrid_brand_name: str | None = None,
    ) -> None:
        if fuel_price_key is None or hybrid_brand_name is None:
            settings = get_settings()
            fuel_price_key = fuel_price_key or settings.fuel_price_config_key
            if hybrid_brand_name is None:
                hybrid_brand_name = settings.hybrid_brand_name
        self.client = client or get_supabase_client()
        self.fuel_price_key = fuel_price_key
        self.hybrid_brand_name = hybrid_brand_name

    async def _run(self, operation: str, table: str, fn: Callable[[], T]) -> T:
        start = time.time()
        result = await asyncio.to_thread(fn)
        log_db_query(operation, table, (time.time() - start) * 1000)
        return result

    async def get_max_efficiency_for_model(self, model_id: int) -> Optional[float]:
        return await self._run(
            "max_efficiency",
            "versions",
            lambda: fetch_max_efficiency_for_model(self.client, model_id),
        )

    async def get_hybrid_candidates(self) -> Optional[list[HybridCandidate]]:
        return await self._run(
            "hybrid_candidates",
            "versions",
            lambda: fetch_hybrid_candidates(self.client, self.hybrid_brand_name or None),
        )

    async def get_gas_price_per_liter(self) -> Optional[float]:
        entry = await self._run(
            "config",
            "config",
            lambda: fetch_config_entry(self.client, self.fuel_price_key),
        )
        return entry.value if entry else None

    async def get_brand_name(self, brand_id: int) -> Optional[str]:
        return await self._run(
            "brand_name", "brands", lambda: fetch_brand_name(self.client, brand_id)
        )

    async def get_model_name(self, model_id: int) -> Optional[str]:
        return await self._run(
            "model_name", "models", lambda: fetch_model_name(self.client, model_id)
        )

    async def list_brands(self) -> list[Brand]:
        return await self._run("list", "brands", lambda: fetch_all_brands(self.client))

    async def list_models(self, brand_id: int) -> list[VehicleModel]:
        return await self._run(
            "list", "models", lambda: fetch_models_by_brand(self.client, brand_id)
        )
