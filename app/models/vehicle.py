from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Brand(BaseModel):
    id: int
    name: str


class VehicleModel(BaseModel):
    id: int
    brand_id: int
    name: str


class Version(BaseModel):
    """A concrete trim of a model, as stored in the ``versions`` table."""

    id: int
    model_id: int
    specific_version: str
    km_per_gallon: float
    is_hybrid: bool = False
    image_url: Optional[str] = None


class ConfigEntry(BaseModel):
    key: str
    value: float
    description: Optional[str] = None


class HybridCandidate(BaseModel):
    """Hybrid version flattened from the versions -> models -> brands join."""

    id: int
    variant_label: str
    efficiency: float  # km per gallon
    image_ref: Optional[str] = None
    brand_name: str = ""
    model_name: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.brand_name} {self.model_name}".strip()


_FORM_ALIASES = {
    "brandId": "brand_id",
    "modelId": "model_id",
    "monthlyExpense": "monthly_spend",
    "monthly_expense": "monthly_spend",
}


class FormInput(BaseModel):
    """Answers from the first calculator step."""

    brand_id: int = Field(..., gt=0)
    model_id: int = Field(..., gt=0)
    monthly_spend: float = Field(..., gt=0)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def accept_form_field_names(cls, data: dict) -> dict:  # type: ignore[override]
        """Accept the camelCase names the web form posts (``brandId``,
        ``modelId``, ``monthlyExpense``) and the snake_case ``monthly_expense``.
        Canonical names win when both are present."""
        if isinstance(data, dict) and any(k in data for k in _FORM_ALIASES):
            data = dict(data)
            for alias, field in _FORM_ALIASES.items():
                if alias in data:
                    data.setdefault(field, data.pop(alias))
        return data
