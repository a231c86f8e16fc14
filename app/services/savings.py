"""Fuel savings calculator.

Converts a monthly fuel spend into distance for the user's current vehicle,
then prices that same distance for each hybrid candidate.

Efficiencies are km per gallon while gas is priced per liter, so every
formula goes through a price-per-gallon (``price * LITERS_PER_GALLON``).

Rounding: money and distance figures are rounded to ``RESULT_PRECISION``
decimals with the built-in :func:`round` when they are stored in a result
record. Intermediate values are never rounded.
"""

import asyncio
import math

from app.core.enums import (
    LITERS_PER_GALLON,
    MONTHS_PER_YEAR,
    RESULT_PRECISION,
    FailureReason,
    MissingData,
)
from app.core.logging import log_calculation, log_error, log_selection, logger
from app.models.savings import (
    CalculationFailure,
    CalculationOutcome,
    CalculationResult,
    HybridComparison,
    SelectedHybridResult,
    SelectionOutcome,
)
from app.models.vehicle import FormInput, HybridCandidate
from app.services.vehicle_db import VehicleStore

# ---------------------------------------------------------------------------
# Formulas
# ---------------------------------------------------------------------------


def _usable(value: float) -> bool:
    """Finite and strictly positive; NaN and infinity are not data."""
    return math.isfinite(value) and value > 0


def _price_per_gallon(price_per_liter: float) -> float:
    if not _usable(price_per_liter):
        raise ValueError(f"Gas price must be positive, got {price_per_liter}")
    return price_per_liter * LITERS_PER_GALLON


def monthly_distance(monthly_spend: float, price_per_liter: float, km_per_gallon: float) -> float:
    """Distance covered in a month for a fixed fuel spend.

    Args:
        monthly_spend: Currency spent on fuel per month.
        price_per_liter: Gas price per liter.
        km_per_gallon: Vehicle efficiency.

    Raises:
        ValueError: If the price or the efficiency is not positive.
    """
    if not _usable(km_per_gallon):
        raise ValueError(f"Efficiency must be positive, got {km_per_gallon}")
    gallons = monthly_spend / _price_per_gallon(price_per_liter)
    return gallons * km_per_gallon


def hybrid_distance(monthly_spend: float, price_per_liter: float, hybrid_km_per_gallon: float) -> float:
    """Distance a hybrid covers on the same monthly spend."""
    return monthly_distance(monthly_spend, price_per_liter, hybrid_km_per_gallon)


def hybrid_equivalent_spend(
    user_distance: float, price_per_liter: float, hybrid_km_per_gallon: float
) -> float:
    """Cost for a hybrid to cover ``user_distance``.

    Raises:
        ValueError: If the price or the hybrid efficiency is not positive.
    """
    if not _usable(hybrid_km_per_gallon):
        raise ValueError(f"Hybrid efficiency must be positive, got {hybrid_km_per_gallon}")
    gallons_needed = user_distance / hybrid_km_per_gallon
    return gallons_needed * _price_per_gallon(price_per_liter)


def monthly_savings(user_spend: float, equivalent_spend: float) -> float:
    """Raw monthly savings; negative when the hybrid costs more."""
    return user_spend - equivalent_spend


def _round(value: float) -> float:
    return round(value, RESULT_PRECISION)


def compare_hybrid(
    candidate: HybridCandidate,
    monthly_spend: float,
    price_per_liter: float,
    user_distance: float,
) -> HybridComparison:
    """Price one candidate against the user's current vehicle."""
    equivalent = hybrid_equivalent_spend(user_distance, price_per_liter, candidate.efficiency)
    savings = max(0.0, monthly_savings(monthly_spend, equivalent))
    return HybridComparison(
        id=candidate.id,
        variant_label=candidate.variant_label,
        brand_name=candidate.brand_name,
        model_name=candidate.model_name,
        efficiency=candidate.efficiency,
        image_ref=candidate.image_ref,
        distance=_round(hybrid_distance(monthly_spend, price_per_liter, candidate.efficiency)),
        equivalent_spend=_round(equivalent),
        savings=_round(savings),
    )


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def _missing(category: MissingData, message: str) -> CalculationFailure:
    return CalculationFailure(
        reason=FailureReason.MISSING_REFERENCE_DATA,
        message=message,
        missing=category,
    )


async def calculate_savings(form: FormInput, store: VehicleStore) -> CalculationOutcome:
    """Compare the user's vehicle against every hybrid candidate.

    The five reference lookups are independent and run concurrently. Any
    lookup error aborts the calculation; no partial data is used.

    Returns:
        A :class:`CalculationResult`, or a :class:`CalculationFailure`
        describing the first unmet precondition.
    """
    try:
        efficiency, candidates, gas_price, brand_name, model_name = await asyncio.gather(
            store.get_max_efficiency_for_model(form.model_id),
            store.get_hybrid_candidates(),
            store.get_gas_price_per_liter(),
            store.get_brand_name(form.brand_id),
            store.get_model_name(form.model_id),
        )
    except Exception as e:
        log_error("Reference data fetch failed", e, model_id=form.model_id)
        return CalculationFailure(
            reason=FailureReason.DATA_SOURCE_ERROR,
            message="reference data unavailable",
        )

    if efficiency is None or not _usable(efficiency):
        return _missing(MissingData.EFFICIENCY, "no efficiency data for model")
    if candidates is None:
        return _missing(MissingData.HYBRID_CANDIDATES, "no hybrid candidates available")
    if not candidates:
        return CalculationFailure(
            reason=FailureReason.EMPTY_CANDIDATE_SET,
            message="no hybrid candidates available",
            missing=MissingData.HYBRID_CANDIDATES,
        )
    if gas_price is None or not _usable(gas_price):
        return _missing(MissingData.GAS_PRICE, "no gas price configured")
    if not brand_name or not model_name:
        return _missing(MissingData.VEHICLE_IDENTIFICATION, "vehicle identification incomplete")

    user_distance = monthly_distance(form.monthly_spend, gas_price, efficiency)

    try:
        comparisons = [
            compare_hybrid(c, form.monthly_spend, gas_price, user_distance) for c in candidates
        ]
    except ValueError as e:
        logger.warning(f"Invalid hybrid reference data: {e}")
        return _missing(MissingData.HYBRID_CANDIDATES, "hybrid candidate has no efficiency data")

    # sorted() is stable, so equal savings keep catalog order
    comparisons = sorted(comparisons, key=lambda c: c.savings, reverse=True)

    log_calculation(form.model_id, form.monthly_spend, len(comparisons))
    return CalculationResult(
        current_vehicle_name=f"{brand_name} {model_name}",
        current_efficiency=efficiency,
        monthly_distance=_round(user_distance),
        monthly_spend=_round(form.monthly_spend),
        hybrid_comparisons=comparisons,
        gas_price_per_liter=gas_price,
    )


def select_hybrid(result: CalculationResult, candidate_id: int) -> SelectionOutcome:
    """Annualize the savings of the hybrid the user picked."""
    comparison = result.find_comparison(candidate_id)
    if comparison is None:
        logger.warning(f"Selected hybrid {candidate_id} not in result set")
        return CalculationFailure(
            reason=FailureReason.SELECTION_NOT_FOUND,
            message=f"selection not found: hybrid {candidate_id}",
        )

    savings = max(0.0, comparison.savings)
    annual = _round(savings * MONTHS_PER_YEAR)
    log_selection(candidate_id, annual)
    return SelectedHybridResult(
        comparison=comparison,
        monthly_spend=result.monthly_spend,
        hybrid_monthly_spend=_round(max(0.0, result.monthly_spend - savings)),
        monthly_savings=savings,
        annual_savings=annual,
    )
