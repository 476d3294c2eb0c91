"""
Full evaluation entry points and the adaptive horizon policy.

HORIZON POLICY:
---------------
1. Report over 12 months.
2. If the 12-month net gain is negative:
   - payback reached by month 24 -> report over 24 months
   - otherwise (later, or never) -> report over 36 months
3. Never escalate a second time.

The simulation itself always runs the full ``simulation_months``; changing
the horizon only re-aggregates the same monthly flows.
"""

import logging
from dataclasses import replace
from typing import Optional

from ..config import (
    DEFAULT_CONFIG,
    LONG_HORIZON_MONTHS,
    MEDIUM_HORIZON_MONTHS,
    SHORT_HORIZON_MONTHS,
    RoiConfig,
)
from ..models import Allocation, RoiInputs, RoiResult
from .allocation import allocate
from .simulator import SimulationResult, aggregate_horizon, simulate

logger = logging.getLogger(__name__)


def _build_result(
    allocation: Allocation, simulation: SimulationResult, horizon_months: int
) -> RoiResult:
    aggregates = aggregate_horizon(simulation, horizon_months)
    return RoiResult(
        allocation=allocation,
        pilot_cost_usd=simulation.pilot_cost_usd,
        growth=aggregates.growth,
        retention=aggregates.retention,
        total=aggregates.total,
        monthly_flows=simulation.monthly_flows,
        horizon_months=horizon_months,
    )


def allocate_and_simulate(inputs: RoiInputs, config: RoiConfig = DEFAULT_CONFIG) -> RoiResult:
    """
    Evaluate a pilot at the config's own horizon.

    Args:
        inputs: Validated ROI inputs
        config: Engine constants (defaults to DEFAULT_CONFIG)

    Returns:
        RoiResult summed over ``config.horizon_months``
    """
    allocation = allocate(inputs, config)
    simulation = simulate(inputs, allocation, config)
    return _build_result(allocation, simulation, config.horizon_months)


def escalated_horizon(payback_months: Optional[int]) -> int:
    """Horizon to report when the short-horizon net gain is negative."""
    if payback_months is not None and payback_months <= MEDIUM_HORIZON_MONTHS:
        return MEDIUM_HORIZON_MONTHS
    return LONG_HORIZON_MONTHS


def evaluate_with_adaptive_horizon(
    inputs: RoiInputs, config: RoiConfig = DEFAULT_CONFIG
) -> RoiResult:
    """
    Evaluate at 12 months, escalating to 24 or 36 when the result is negative.

    ``config.horizon_months`` is ignored; the policy picks the horizon.
    """
    short_config = replace(config, horizon_months=SHORT_HORIZON_MONTHS)
    allocation = allocate(inputs, short_config)
    simulation = simulate(inputs, allocation, short_config)

    result = _build_result(allocation, simulation, SHORT_HORIZON_MONTHS)
    if result.total.net_gain_in_horizon >= 0:
        return result

    horizon = escalated_horizon(result.total.payback_months)
    logger.info(
        "Net gain over %d months is negative (payback month %s), reporting over %d months",
        SHORT_HORIZON_MONTHS, result.total.payback_months, horizon,
    )
    return _build_result(allocation, simulation, horizon)
