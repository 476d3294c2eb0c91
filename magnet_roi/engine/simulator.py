"""
Monthly cashflow simulation for a magnet pilot.

This module provides:
1. Month-by-month simulation of the growth and retention effects
2. Payback month detection (first month cumulative net gain >= 0)
3. Headline aggregation over a reporting horizon

EFFECT MECHANICS:
-----------------
Both effects fade with the same exponential decay D(t) = exp(-t / tau).

- GROWTH: conversion p(t) = p0 x (1 + alpha x D(t)). Each month the free
  recipients convert at p(t) instead of p0; the difference is the
  incremental new paid users. The free pool is treated as constant, not
  depleted by earlier conversions.
- RETENTION: churn c(t) = c0 x (1 - beta x D(t)). Baseline survival
  compounds by (1 - c0) and treated survival by (1 - c(t)); the gap times
  the paid recipients is the incremental paying users that month.

Profit per incremental paid user-month is K = price x (1 - platform share) x
gross margin. The pilot cost is paid once up front (month 0).

All values stay unrounded; rounding belongs to the presentation layer.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import RoiConfig
from ..errors import InvalidConfigError
from ..models import (
    Allocation,
    GrowthSummary,
    MonthlyFlow,
    RetentionSummary,
    RoiInputs,
    TotalSummary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Results from the monthly simulation."""
    monthly_flows: Tuple[MonthlyFlow, ...]
    payback_month: Optional[int]  # First month with cumulative net gain >= 0
    pilot_cost_usd: float
    profit_per_user_month: float  # K


@dataclass(frozen=True)
class HorizonAggregates:
    """Headline figures summed over the first ``horizon_months`` months."""
    horizon_months: int
    growth: GrowthSummary
    retention: RetentionSummary
    total: TotalSummary


def profit_per_user_month(inputs: RoiInputs, config: RoiConfig) -> float:
    """K: creator profit per additional paid user-month."""
    return inputs.monthly_revenue_per_paid_user * config.profit_fraction


def pilot_cost(allocation: Allocation, config) -> float:
    """One-time cost of the deployed units."""
    return allocation.total * config.cost_per_unit_usd


def decay_factor(month: float, tau_months: float) -> float:
    """Share of the initial effect still active at ``month``."""
    return math.exp(-month / tau_months)


def simulate(inputs: RoiInputs, allocation: Allocation, config: RoiConfig) -> SimulationResult:
    """
    Run the month-by-month cashflow simulation.

    Args:
        inputs: Validated ROI inputs
        allocation: Unit split produced by the allocation policy
        config: Engine constants

    Returns:
        SimulationResult with one flow per simulated month
    """
    baseline_churn = 1.0 / inputs.avg_paid_lifetime_months
    baseline_conversion = inputs.baseline_conversion.resolve(config.default_baseline_conversion_rate)
    k = profit_per_user_month(inputs, config)
    cost = pilot_cost(allocation, config)

    baseline_survival = 1.0
    treated_survival = 1.0
    cumulative_profit = 0.0
    payback_month = None
    flows: List[MonthlyFlow] = []

    for month in range(1, config.simulation_months + 1):
        decay = decay_factor(month, config.effect_decay_tau_months)

        # Growth track
        conversion = baseline_conversion * (1.0 + config.conversion_uplift_alpha * decay)
        new_paid = allocation.free * (conversion - baseline_conversion)
        growth_profit = new_paid * k

        # Retention track
        churn = baseline_churn * (1.0 - config.churn_reduction_beta * decay)
        baseline_survival *= max(0.0, 1.0 - baseline_churn)
        treated_survival *= max(0.0, 1.0 - churn)
        extra_paid = allocation.paid * max(0.0, treated_survival - baseline_survival)
        retention_profit = extra_paid * k

        total_profit = growth_profit + retention_profit
        cumulative_profit += total_profit
        cumulative_net_gain = cumulative_profit - cost

        flows.append(
            MonthlyFlow(
                month=month,
                growth_profit=growth_profit,
                retention_profit=retention_profit,
                total_profit=total_profit,
                cumulative_net_gain=cumulative_net_gain,
                new_paid_users=new_paid,
                extra_paid_users=extra_paid,
            )
        )

        if payback_month is None and cumulative_net_gain >= 0:
            payback_month = month

    if payback_month is None:
        logger.debug("No payback within %d simulated months", config.simulation_months)
    else:
        logger.debug("Payback reached in month %d", payback_month)

    return SimulationResult(
        monthly_flows=tuple(flows),
        payback_month=payback_month,
        pilot_cost_usd=cost,
        profit_per_user_month=k,
    )


def aggregate_horizon(simulation: SimulationResult, horizon_months: int) -> HorizonAggregates:
    """
    Sum the simulated months 1..horizon_months into headline figures.

    ``roi_multiple`` is the horizon net gain over the pilot cost, and 0 when
    nothing was deployed. ``is_profitable`` compares the growth track alone
    against the full pilot cost.
    """
    if horizon_months < 1:
        raise InvalidConfigError(f"horizon_months must be >= 1, got {horizon_months}")
    if horizon_months > len(simulation.monthly_flows):
        raise InvalidConfigError(
            f"horizon_months ({horizon_months}) exceeds simulated months "
            f"({len(simulation.monthly_flows)})"
        )

    window: Sequence[MonthlyFlow] = simulation.monthly_flows[:horizon_months]
    growth_profit = sum(f.growth_profit for f in window)
    retention_profit = sum(f.retention_profit for f in window)
    new_paid_users = sum(f.new_paid_users for f in window)
    extra_user_months = sum(f.extra_paid_users for f in window)

    cost = simulation.pilot_cost_usd
    net_gain = growth_profit + retention_profit - cost
    roi_multiple = net_gain / cost if cost > 0 else 0.0

    return HorizonAggregates(
        horizon_months=horizon_months,
        growth=GrowthSummary(
            new_paid_users_in_horizon=new_paid_users,
            profit_in_horizon=growth_profit,
            is_profitable=growth_profit >= cost,
        ),
        retention=RetentionSummary(
            profit_in_horizon=retention_profit,
            extra_paid_user_months_in_horizon=extra_user_months,
        ),
        total=TotalSummary(
            net_gain_in_horizon=net_gain,
            roi_multiple=roi_multiple,
            payback_months=simulation.payback_month,
        ),
    )
