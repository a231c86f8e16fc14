from typing import Optional, Union

from pydantic import BaseModel, Field

from app.core.enums import CalculatorStep, FailureReason, MissingData
from app.models.vehicle import FormInput


class HybridComparison(BaseModel):
    id: int
    variant_label: str
    brand_name: str = ""
    model_name: str = ""
    efficiency: float
    image_ref: Optional[str] = None
    distance: float = Field(..., ge=0)  # km the hybrid covers on the user's monthly spend
    equivalent_spend: float = Field(..., ge=0)  # cost for the hybrid to cover the user's distance
    savings: float = Field(..., ge=0)  # monthly, never negative

    model_config = {"frozen": True, "allow_inf_nan": False}


class CalculationResult(BaseModel):
    current_vehicle_name: str
    current_efficiency: float
    monthly_distance: float
    monthly_spend: float
    hybrid_comparisons: list[HybridComparison]
    gas_price_per_liter: float

    model_config = {"frozen": True}

    def find_comparison(self, candidate_id: int) -> Optional[HybridComparison]:
        for comparison in self.hybrid_comparisons:
            if comparison.id == candidate_id:
                return comparison
        return None


class SelectedHybridResult(BaseModel):
    comparison: HybridComparison
    monthly_spend: float
    hybrid_monthly_spend: float
    monthly_savings: float = Field(..., ge=0)
    annual_savings: float = Field(..., ge=0)

    model_config = {"frozen": True}


class CalculationFailure(BaseModel):
    reason: FailureReason
    message: str
    missing: Optional[MissingData] = None

    model_config = {"frozen": True}


CalculationOutcome = Union[CalculationResult, CalculationFailure]
SelectionOutcome = Union[SelectedHybridResult, CalculationFailure]


class CalculatorState(BaseModel):
    """Snapshot of the three-step form. Transitions return new snapshots."""

    step: CalculatorStep = CalculatorStep.INPUT
    form: Optional[FormInput] = None
    result: Optional[CalculationResult] = None
    selection: Optional[SelectedHybridResult] = None
    error: Optional[CalculationFailure] = None

    model_config = {"frozen": True}
