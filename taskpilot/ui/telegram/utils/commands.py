from __future__ import annotations

from typing import Optional

from taskpilot.domain.common.errors import InvalidOverrideError
from taskpilot.domain.tasks.rules import coerce_energy_level
from taskpilot.models import PlanBudget
from taskpilot.parser import extract_duration
from taskpilot.utils import parse_int_safe


def parse_plan_args(args: Optional[str], default_minutes: int) -> PlanBudget:
    """
    Arguments of /plan: an optional focus budget and an optional energy level,
    in any order.

    Examples:
        >>> parse_plan_args("90 low", 240)
        PlanBudget(available_minutes=90, energy_level='Low')
        >>> parse_plan_args("high 2h", 240)
        PlanBudget(available_minutes=120, energy_level='High')
        >>> parse_plan_args(None, 240)
        PlanBudget(available_minutes=240, energy_level='Medium')

    Raises:
        InvalidOverrideError: on a token that is neither a duration nor an energy level
    """
    minutes, rest = extract_duration(args or "")
    budget = PlanBudget(available_minutes=default_minutes)
    energy = budget.energy_level

    for token in rest.split():
        number = parse_int_safe(token)
        if number is not None:
            if number <= 0:
                raise InvalidOverrideError(f"Focus budget must be positive, got {number}")
            minutes = (minutes or 0) + number
            continue
        energy = coerce_energy_level(token)

    return PlanBudget(available_minutes=minutes or default_minutes, energy_level=energy)
