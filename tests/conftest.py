"""Shared fixtures: environment defaults and an in-memory reference-data store."""

import asyncio
import os
import sys
from typing import Any, Optional

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Settings require Supabase credentials even though tests never connect
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("RATE_LIMIT_REQUESTS", "1000")

from app.models.vehicle import Brand, HybridCandidate, VehicleModel  # noqa: E402

_UNSET = object()


def default_candidates() -> list[HybridCandidate]:
    return [
        HybridCandidate(id=1, variant_label="1.8 HEV XEI", efficiency=20.0,
                        image_ref="/corolla.jpg", brand_name="Toyota", model_name="Corolla"),
        HybridCandidate(id=2, variant_label="1.5 HV FULL CVT", efficiency=25.0,
                        image_ref="/yaris-cross.jpg", brand_name="Toyota", model_name="Yaris Cross"),
        HybridCandidate(id=3, variant_label="2.5 FULL D-LUX HEV", efficiency=15.0,
                        image_ref=None, brand_name="Toyota", model_name="RAV4"),
    ]


class FakeVehicleStore:
    """In-memory store. Pass ``None`` for absent data or an exception to raise."""

    def __init__(
        self,
        efficiency: Any = 13.0,
        candidates: Any = _UNSET,
        gas_price: Any = 16.5,
        brand_name: Any = "Nissan",
        model_name: Any = "Sentra",
    ) -> None:
        self.values: dict[str, Any] = {
            "efficiency": efficiency,
            "candidates": default_candidates() if candidates is _UNSET else candidates,
            "gas_price": gas_price,
            "brand_name": brand_name,
            "model_name": model_name,
        }
        self.calls: list[tuple[str, Any]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _get(self, name: str, arg: Any = None) -> Any:
        self.calls.append((name, arg))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        value = self.values[name]
        if isinstance(value, Exception):
            raise value
        return value

    async def get_max_efficiency_for_model(self, model_id: int) -> Optional[float]:
        return await self._get("efficiency", model_id)

    async def get_hybrid_candidates(self) -> Optional[list[HybridCandidate]]:
        return await self._get("candidates")

    async def get_gas_price_per_liter(self) -> Optional[float]:
        return await self._get("gas_price")

    async def get_brand_name(self, brand_id: int) -> Optional[str]:
        return await self._get("brand_name", brand_id)

    async def get_model_name(self, model_id: int) -> Optional[str]:
        return await self._get("model_name", model_id)

    async def list_brands(self) -> list[Brand]:
        return [Brand(id=1, name="Toyota"), Brand(id=4, name="Nissan")]

    async def list_models(self, brand_id: int) -> list[VehicleModel]:
        return [VehicleModel(id=15, brand_id=brand_id, name="Sentra")]


@pytest.fixture
def store() -> FakeVehicleStore:
    return FakeVehicleStore()


@pytest.fixture
def make_store():
    """Factory for stores with some values overridden."""
    return FakeVehicleStore
