"""
ROI engine for magnet pilots.

Provides the allocation policy, pilot sizing, the monthly cashflow
simulation, the adaptive horizon policy and the closed-form estimate.
"""

from .allocation import allocate, round_half_up, target_paid_units
from .sizing import monthly_recurring_revenue, recommend_size
from .simulator import (
    SimulationResult,
    HorizonAggregates,
    aggregate_horizon,
    decay_factor,
    pilot_cost,
    profit_per_user_month,
    simulate,
)
from .horizon import (
    allocate_and_simulate,
    escalated_horizon,
    evaluate_with_adaptive_horizon,
)
from .closed_form import (
    ClosedFormGrowth,
    ClosedFormRetention,
    ClosedFormResult,
    estimate_closed_form,
)

__all__ = [
    # allocation.py
    "allocate",
    "round_half_up",
    "target_paid_units",
    # sizing.py
    "monthly_recurring_revenue",
    "recommend_size",
    # simulator.py
    "SimulationResult",
    "HorizonAggregates",
    "aggregate_horizon",
    "decay_factor",
    "pilot_cost",
    "profit_per_user_month",
    "simulate",
    # horizon.py
    "allocate_and_simulate",
    "escalated_horizon",
    "evaluate_with_adaptive_horizon",
    # closed_form.py
    "ClosedFormGrowth",
    "ClosedFormRetention",
    "ClosedFormResult",
    "estimate_closed_form",
]
