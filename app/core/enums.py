"""Enums and unit constants for the savings calculator."""

from enum import Enum


class FailureReason(str, Enum):
    """Why a calculation or selection could not produce a result."""

    MISSING_REFERENCE_DATA = "missing_reference_data"
    EMPTY_CANDIDATE_SET = "empty_candidate_set"
    SELECTION_NOT_FOUND = "selection_not_found"
    DATA_SOURCE_ERROR = "data_source_error"


class MissingData(str, Enum):
    """Category of reference data a calculation could not obtain."""

    EFFICIENCY = "efficiency"
    HYBRID_CANDIDATES = "hybrid_candidates"
    GAS_PRICE = "gas_price"
    VEHICLE_IDENTIFICATION = "vehicle_identification"


class CalculatorStep(str, Enum):
    """Steps of the three-page calculator form."""

    INPUT = "input"
    COMPARED = "compared"
    RESULT = "result"


# US liquid gallon
LITERS_PER_GALLON = 3.78541

MONTHS_PER_YEAR = 12

# Decimal places for money and distance figures in result records
RESULT_PRECISION = 2
