"""
Closed-form quick estimate of pilot ROI.

Flat, undecayed effects summed over the horizon. Kept as a back-of-envelope
check next to the monthly simulation; it has its own constants
(ClosedFormConfig) and never shares them with the simulation.

GROWTH TRACK:
    new_paid = free_units x delta_c
    profit   = new_paid x K x horizon
    break-even when delta_c >= cost_per_unit / (K x horizon)

RETENTION TRACK:
    delta_L           = u / (1 - u) x L0
    delta_L_effective = coverage x delta_L
    extra_user_months = paid_units x delta_L_effective
    profit            = extra_user_months x K

PAYBACK:
    cost / (total_profit / horizon), 0 when there is no profit.
"""

from dataclasses import dataclass

from ..config import DEFAULT_CLOSED_FORM_CONFIG, ClosedFormConfig
from ..models import Allocation, RoiInputs
from .allocation import allocate


@dataclass(frozen=True)
class ClosedFormGrowth:
    """Growth track of the closed-form estimate."""
    units_free: int
    new_paid_users: float
    revenue_in_horizon: float  # Gross, before platform share and margin
    profit_in_horizon: float
    is_profitable: bool


@dataclass(frozen=True)
class ClosedFormRetention:
    """Retention track of the closed-form estimate."""
    units_paid: int
    delta_lifetime_months: float
    delta_lifetime_effective_months: float
    extra_user_months: float
    profit_in_horizon: float


@dataclass(frozen=True)
class ClosedFormResult:
    """Complete closed-form estimate."""
    allocation: Allocation
    pilot_cost_usd: float
    profit_per_user_month: float
    growth: ClosedFormGrowth
    retention: ClosedFormRetention
    net_gain_in_horizon: float
    roi_multiple: float
    payback_months: float  # Fractional months; 0 when there is no profit
    horizon_months: int


def estimate_closed_form(
    inputs: RoiInputs, config: ClosedFormConfig = DEFAULT_CLOSED_FORM_CONFIG
) -> ClosedFormResult:
    """
    Compute the closed-form ROI estimate.

    Args:
        inputs: Validated ROI inputs (baseline conversion is not used here)
        config: Closed-form constants

    Returns:
        ClosedFormResult over ``config.horizon_months``
    """
    horizon = config.horizon_months
    price = inputs.monthly_revenue_per_paid_user

    allocation = allocate(inputs, config)
    cost = allocation.total * config.cost_per_unit_usd
    k = price * config.profit_fraction

    # Growth
    new_paid = allocation.free * config.conversion_rate_growth
    growth_revenue = new_paid * price * horizon
    growth_profit = new_paid * k * horizon
    if k > 0:
        break_even_rate = config.cost_per_unit_usd / (k * horizon)
        growth_profitable = config.conversion_rate_growth >= break_even_rate
    else:
        growth_profitable = False

    # Retention
    u = config.churn_improvement
    delta_l = u / (1.0 - u) * inputs.avg_paid_lifetime_months
    delta_l_effective = config.retention_coverage * delta_l
    extra_user_months = allocation.paid * delta_l_effective
    retention_profit = extra_user_months * k

    total_profit = growth_profit + retention_profit
    net_gain = total_profit - cost
    roi_multiple = net_gain / cost if cost > 0 else 0.0

    monthly_run_rate = total_profit / horizon
    payback = cost / monthly_run_rate if monthly_run_rate > 0 else 0.0

    return ClosedFormResult(
        allocation=allocation,
        pilot_cost_usd=cost,
        profit_per_user_month=k,
        growth=ClosedFormGrowth(
            units_free=allocation.free,
            new_paid_users=new_paid,
            revenue_in_horizon=growth_revenue,
            profit_in_horizon=growth_profit,
            is_profitable=growth_profitable,
        ),
        retention=ClosedFormRetention(
            units_paid=allocation.paid,
            delta_lifetime_months=delta_l,
            delta_lifetime_effective_months=delta_l_effective,
            extra_user_months=extra_user_months,
            profit_in_horizon=retention_profit,
        ),
        net_gain_in_horizon=net_gain,
        roi_multiple=roi_multiple,
        payback_months=payback,
        horizon_months=horizon,
    )
