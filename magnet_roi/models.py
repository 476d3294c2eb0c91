"""Data models for the magnet ROI engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from .errors import InvalidInputError
from .validation import require_count, require_finite, require_range


class PlanChoice(Enum):
    """Which allocation and effect policy applies."""
    GROWTH_ONLY = "growth_only"
    GROWTH_AND_RETENTION = "growth_and_retention"


class PricingModel(Enum):
    """How the subscription price entered by the creator is billed."""
    MONTHLY = "monthly"
    ANNUAL = "annual"


def monthly_equivalent_price(price: float, pricing_model: PricingModel = PricingModel.MONTHLY) -> float:
    """
    Normalize a subscription price to a monthly equivalent.

    Args:
        price: Price as entered (per month or per year)
        pricing_model: Billing period of ``price``

    Returns:
        Monthly-equivalent price in USD
    """
    price = require_finite("price", price, InvalidInputError)
    if price < 0:
        raise InvalidInputError(f"price must be >= 0, got {price}")
    if pricing_model == PricingModel.ANNUAL:
        return price / 12.0
    return price


@dataclass(frozen=True)
class ProvidedRate:
    """Baseline free-to-paid conversion rate observed by the creator."""
    rate: float

    def __post_init__(self):
        require_range(
            "baseline conversion rate", self.rate, InvalidInputError,
            0.0, 1.0, high_inclusive=False,
        )

    def resolve(self, default_rate: float) -> float:
        return float(self.rate)


@dataclass(frozen=True)
class UseDefault:
    """Use the configured default baseline conversion rate."""

    def resolve(self, default_rate: float) -> float:
        return default_rate


BaselineConversion = Union[ProvidedRate, UseDefault]


@dataclass(frozen=True)
class RoiInputs:
    """Caller-supplied subscriber and pricing inputs for one evaluation."""
    total_units: int
    paid_subscribers: int
    free_subscribers: int
    monthly_revenue_per_paid_user: float
    avg_paid_lifetime_months: float
    plan_choice: PlanChoice = PlanChoice.GROWTH_ONLY
    baseline_conversion: BaselineConversion = field(default_factory=UseDefault)

    def __post_init__(self):
        require_count("total_units", self.total_units, InvalidInputError)
        require_count("paid_subscribers", self.paid_subscribers, InvalidInputError)
        require_count("free_subscribers", self.free_subscribers, InvalidInputError)
        require_range(
            "monthly_revenue_per_paid_user", self.monthly_revenue_per_paid_user,
            InvalidInputError, 0.0, math.inf,
        )
        require_range(
            "avg_paid_lifetime_months", self.avg_paid_lifetime_months,
            InvalidInputError, 0.0, math.inf, low_inclusive=False,
        )
        if not isinstance(self.plan_choice, PlanChoice):
            raise InvalidInputError(f"plan_choice must be a PlanChoice, got {self.plan_choice!r}")
        if not isinstance(self.baseline_conversion, (ProvidedRate, UseDefault)):
            raise InvalidInputError(
                f"baseline_conversion must be ProvidedRate or UseDefault, got {self.baseline_conversion!r}"
            )

    @classmethod
    def from_subscriber_totals(
        cls,
        total_units: int,
        total_subscribers: int,
        paid_subscribers: int,
        monthly_revenue_per_paid_user: float,
        avg_paid_lifetime_months: float,
        plan_choice: PlanChoice = PlanChoice.GROWTH_ONLY,
        baseline_conversion_rate: Optional[float] = None,
    ) -> "RoiInputs":
        """Build inputs from a total subscriber count, deriving the free pool."""
        require_count("total_subscribers", total_subscribers, InvalidInputError)
        require_count("paid_subscribers", paid_subscribers, InvalidInputError)

        if baseline_conversion_rate is None:
            baseline = UseDefault()
        else:
            baseline = ProvidedRate(baseline_conversion_rate)

        return cls(
            total_units=total_units,
            paid_subscribers=paid_subscribers,
            free_subscribers=max(0, total_subscribers - paid_subscribers),
            monthly_revenue_per_paid_user=monthly_revenue_per_paid_user,
            avg_paid_lifetime_months=avg_paid_lifetime_months,
            plan_choice=plan_choice,
            baseline_conversion=baseline,
        )


@dataclass(frozen=True)
class Allocation:
    """Units assigned to each segment after guardrails."""
    free: int
    paid: int

    @property
    def total(self) -> int:
        return self.free + self.paid


@dataclass(frozen=True)
class MonthlyFlow:
    """Incremental profit for a single simulated month."""
    month: int
    growth_profit: float
    retention_profit: float
    total_profit: float
    cumulative_net_gain: float
    # Expected values, not rounded
    new_paid_users: float = 0.0
    extra_paid_users: float = 0.0


@dataclass(frozen=True)
class GrowthSummary:
    """Growth (free -> paid conversion) track over the horizon."""
    new_paid_users_in_horizon: float
    profit_in_horizon: float
    is_profitable: bool


@dataclass(frozen=True)
class RetentionSummary:
    """Retention (churn reduction) track over the horizon."""
    profit_in_horizon: float
    extra_paid_user_months_in_horizon: float


@dataclass(frozen=True)
class TotalSummary:
    """Combined headline figures."""
    net_gain_in_horizon: float
    roi_multiple: float
    payback_months: Optional[int]  # None if not reached within the simulation


@dataclass(frozen=True)
class RoiResult:
    """Complete evaluation result."""
    allocation: Allocation
    pilot_cost_usd: float
    growth: GrowthSummary
    retention: RetentionSummary
    total: TotalSummary
    monthly_flows: Tuple[MonthlyFlow, ...]
    horizon_months: int
