"""FastAPI route definitions for the hybrid savings calculator."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from app.api.deps import calculation_rate_limit, get_vehicle_store, limiter
from app.core.enums import FailureReason
from app.core.logging import log_error
from app.models.savings import (
    CalculationFailure,
    CalculationResult,
    CalculatorState,
    SelectedHybridResult,
)
from app.models.vehicle import FormInput
from app.services import calculator_flow
from app.services.calculator_flow import InvalidTransition
from app.services.savings import calculate_savings, select_hybrid
from app.services.vehicle_db import VehicleStore

router = APIRouter()

_FAILURE_STATUS = {
    FailureReason.MISSING_REFERENCE_DATA: 422,
    FailureReason.EMPTY_CANDIDATE_SET: 422,
    FailureReason.SELECTION_NOT_FOUND: 409,
    FailureReason.DATA_SOURCE_ERROR: 503,
}


def _failure_exception(failure: CalculationFailure) -> HTTPException:
    return HTTPException(
        status_code=_FAILURE_STATUS[failure.reason],
        detail=failure.model_dump(mode="json"),
    )


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------


class SelectRequest(BaseModel):
    result: CalculationResult
    candidate_id: int


class FlowSubmitRequest(BaseModel):
    state: Optional[CalculatorState] = None
    form: FormInput


class FlowChooseRequest(BaseModel):
    state: CalculatorState
    candidate_id: int


class FlowStateRequest(BaseModel):
    state: CalculatorState


# ---------------------------------------------------------------------------
# Form data
# ---------------------------------------------------------------------------


@router.get("/brands")
async def get_brands(store: VehicleStore = Depends(get_vehicle_store)):
    """All brands for the first form step."""
    try:
        brands = await store.list_brands()
    except Exception as e:
        log_error("Failed to get brands", e)
        raise HTTPException(status_code=500, detail="Failed to retrieve brands")
    return {"brands": [b.model_dump() for b in brands]}


@router.get("/brands/{brand_id}/models")
async def get_models(brand_id: int, store: VehicleStore = Depends(get_vehicle_store)):
    """Models of one brand."""
    try:
        models = await store.list_models(brand_id)
    except Exception as e:
        log_error("Failed to get models", e, brand_id=brand_id)
        raise HTTPException(status_code=500, detail="Failed to retrieve models")
    return {"models": [m.model_dump() for m in models]}


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


@router.post("/calculator/calculate", response_model=CalculationResult)
@limiter.limit(calculation_rate_limit)
async def calculate(
    request: Request,
    form: FormInput,
    store: VehicleStore = Depends(get_vehicle_store),
):
    """Compare the user's vehicle with every hybrid candidate."""
    outcome = await calculate_savings(form, store)
    if isinstance(outcome, CalculationFailure):
        raise _failure_exception(outcome)
    return outcome


@router.post("/calculator/select", response_model=SelectedHybridResult)
async def select(req: SelectRequest):
    """Annualized savings for the chosen hybrid."""
    outcome = select_hybrid(req.result, req.candidate_id)
    if isinstance(outcome, CalculationFailure):
        raise _failure_exception(outcome)
    return outcome


# ---------------------------------------------------------------------------
# Step flow (client holds the state between calls)
# ---------------------------------------------------------------------------


@router.post("/calculator/flow/submit", response_model=CalculatorState)
@limiter.limit(calculation_rate_limit)
async def flow_submit(
    request: Request,
    req: FlowSubmitRequest,
    store: VehicleStore = Depends(get_vehicle_store),
):
    state = req.state or calculator_flow.initial_state()
    try:
        return await calculator_flow.submit_form(state, req.form, store)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/calculator/flow/choose", response_model=CalculatorState)
async def flow_choose(req: FlowChooseRequest):
    try:
        return calculator_flow.choose_hybrid(req.state, req.candidate_id)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/calculator/flow/back", response_model=CalculatorState)
async def flow_back(req: FlowStateRequest):
    return calculator_flow.go_back(req.state)


@router.post("/calculator/flow/reset", response_model=CalculatorState)
async def flow_reset(req: Optional[FlowStateRequest] = None):
    return calculator_flow.reset(req.state if req else calculator_flow.initial_state())
