"""Transitions for the three-step calculator form.

``INPUT -> COMPARED -> RESULT``. Each function takes the current
:class:`CalculatorState` and returns the next one; states are never mutated.
"""

from app.core.enums import CalculatorStep
from app.models.savings import CalculationFailure, CalculatorState
from app.models.vehicle import FormInput
from app.services.savings import calculate_savings, select_hybrid
from app.services.vehicle_db import VehicleStore


class InvalidTransition(Exception):
    """Raised when a transition is requested from a step that does not allow it."""

    def __init__(self, action: str, step: CalculatorStep) -> None:
        super().__init__(f"Cannot {action} from step '{step.value}'")
        self.action = action
        self.step = step


def initial_state() -> CalculatorState:
    return CalculatorState()


async def submit_form(
    state: CalculatorState, form: FormInput, store: VehicleStore
) -> CalculatorState:
    """Run the calculation; stay on INPUT with the error if it fails."""
    if state.step != CalculatorStep.INPUT:
        raise InvalidTransition("submit the form", state.step)

    outcome = await calculate_savings(form, store)
    if isinstance(outcome, CalculationFailure):
        return CalculatorState(step=CalculatorStep.INPUT, form=form, error=outcome)
    return CalculatorState(step=CalculatorStep.COMPARED, form=form, result=outcome)


def choose_hybrid(state: CalculatorState, candidate_id: int) -> CalculatorState:
    """Select a hybrid from the comparison list.

    A selection missing from the result means the client holds a stale result
    set; the flow restarts at INPUT with the failure attached.
    """
    if state.step != CalculatorStep.COMPARED or state.result is None:
        raise InvalidTransition("choose a hybrid", state.step)

    outcome = select_hybrid(state.result, candidate_id)
    if isinstance(outcome, CalculationFailure):
        return CalculatorState(step=CalculatorStep.INPUT, form=state.form, error=outcome)
    return state.model_copy(
        update={"step": CalculatorStep.RESULT, "selection": outcome, "error": None}
    )


def go_back(state: CalculatorState) -> CalculatorState:
    if state.step == CalculatorStep.RESULT:
        return state.model_copy(
            update={"step": CalculatorStep.COMPARED, "selection": None, "error": None}
        )
    if state.step == CalculatorStep.COMPARED:
        return CalculatorState(step=CalculatorStep.INPUT, form=state.form)
    return state


def reset(state: CalculatorState) -> CalculatorState:
    return initial_state()
