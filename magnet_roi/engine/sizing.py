"""Pilot size recommendation from observed monthly revenue."""

import math

from ..config import DEFAULT_SIZING, SizingPolicy
from ..models import RoiInputs


def monthly_recurring_revenue(inputs: RoiInputs) -> float:
    """Monthly revenue proxy: paid subscribers x monthly price."""
    return inputs.paid_subscribers * inputs.monthly_revenue_per_paid_user


def recommend_size(inputs: RoiInputs, policy: SizingPolicy = DEFAULT_SIZING) -> int:
    """
    Recommend how many units a pilot should deploy.

    Spends ``budget_fraction_of_mrr`` of one month's revenue at the reference
    unit cost, then clamps into the supported pilot band. Does not look at
    ``inputs.total_units``, so it can be called before a size is chosen.

    Args:
        inputs: Validated ROI inputs
        policy: Sizing constants

    Returns:
        Recommended unit count within [min_units, max_units]
    """
    budget = monthly_recurring_revenue(inputs) * policy.budget_fraction_of_mrr
    raw_units = math.floor(budget / policy.reference_unit_cost_usd)
    return int(min(policy.max_units, max(policy.min_units, raw_units)))
