"""
Allocation policy: how many units go to free vs paid subscribers.

RULES:
------
- GROWTH_ONLY: every unit targets the free segment.
- GROWTH_AND_RETENTION: paid target = round(total_units x paid_allocation_fraction),
  raised to ``min_paid_units`` when a floor is configured.
- Guardrail A: paid units never exceed paid subscribers.
- Guardrail B: free units = remaining units, capped at free subscribers.

Units freed up by a guardrail are NOT shifted to the other segment, so the
configured ratio is never silently violated. The total deployed can therefore
be lower than ``total_units`` when the pools are small.
"""

import logging
import math

from ..models import Allocation, PlanChoice, RoiInputs

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up."""
    return int(math.floor(value + 0.5))


def target_paid_units(inputs: RoiInputs, config) -> int:
    """Paid units requested by the plan, before guardrails."""
    if inputs.plan_choice != PlanChoice.GROWTH_AND_RETENTION:
        return 0

    paid = round_half_up(inputs.total_units * config.paid_allocation_fraction)
    if config.min_paid_units:
        paid = max(paid, min(config.min_paid_units, inputs.total_units))
    return paid


def allocate(inputs: RoiInputs, config) -> Allocation:
    """
    Split the unit pool between the free and paid segments.

    Args:
        inputs: Validated ROI inputs
        config: Any config exposing ``paid_allocation_fraction`` and ``min_paid_units``

    Returns:
        Allocation after guardrail clamping
    """
    paid = target_paid_units(inputs, config)

    # Guardrail A
    if paid > inputs.paid_subscribers:
        logger.debug(
            "Paid allocation clamped from %d to %d paid subscribers",
            paid, inputs.paid_subscribers,
        )
        paid = inputs.paid_subscribers

    # Guardrail B
    free = inputs.total_units - paid
    if free > inputs.free_subscribers:
        logger.debug(
            "Free allocation clamped from %d to %d free subscribers",
            free, inputs.free_subscribers,
        )
        free = inputs.free_subscribers

    return Allocation(free=free, paid=paid)
