"""
Scenario analysis around a single pilot evaluation.

- Low/mid/high bands that scale the effect sizes
- Net gain across a range of subscription prices
- Break-even monthly price for the reporting horizon
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, RoiConfig
from .engine import allocate_and_simulate, evaluate_with_adaptive_horizon
from .errors import InvalidInputError
from .models import RoiInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectBand:
    """Multipliers applied to the configured uplift and churn reduction."""
    name: str
    alpha_factor: float
    beta_factor: float


DEFAULT_BANDS = (
    EffectBand("low", 0.5, 0.5),
    EffectBand("mid", 1.0, 1.0),
    EffectBand("high", 1.5, 1.5),
)

DEFAULT_PRICE_GRID = np.linspace(10.0, 60.0, 11)

# Churn reduction must stay below 1 or treated churn reaches zero
MAX_CHURN_REDUCTION_BETA = float(np.nextafter(1.0, 0.0))


def run_sensitivity(
    inputs: RoiInputs,
    config: RoiConfig = DEFAULT_CONFIG,
    bands: Sequence[EffectBand] = DEFAULT_BANDS,
    adaptive_horizon: bool = False,
) -> pd.DataFrame:
    """
    Re-evaluate the pilot with scaled effect sizes.

    Scaled churn reduction is capped just below 1.

    Args:
        inputs: Validated ROI inputs
        config: Base engine constants
        bands: Effect multipliers to evaluate
        adaptive_horizon: Use the adaptive horizon policy instead of the config horizon

    Returns:
        DataFrame with one row per band
    """
    evaluate = evaluate_with_adaptive_horizon if adaptive_horizon else allocate_and_simulate

    rows = []
    for band in bands:
        beta = config.churn_reduction_beta * band.beta_factor
        if beta > MAX_CHURN_REDUCTION_BETA:
            logger.debug("Band %s churn reduction %.3f capped below 1", band.name, beta)
            beta = MAX_CHURN_REDUCTION_BETA
        band_config = replace(
            config,
            conversion_uplift_alpha=config.conversion_uplift_alpha * band.alpha_factor,
            churn_reduction_beta=beta,
        )
        result = evaluate(inputs, band_config)
        rows.append({
            "band": band.name,
            "horizon_months": result.horizon_months,
            "new_paid_users": result.growth.new_paid_users_in_horizon,
            "extra_paid_user_months": result.retention.extra_paid_user_months_in_horizon,
            "net_gain": result.total.net_gain_in_horizon,
            "roi_multiple": result.total.roi_multiple,
            "payback_months": result.total.payback_months,
        })

    return pd.DataFrame(rows)


def price_sweep(
    inputs: RoiInputs,
    prices: Optional[Iterable[float]] = None,
    config: RoiConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """
    Evaluate the pilot across monthly subscription prices.

    Args:
        inputs: Validated ROI inputs; the price field is replaced per row
        prices: Monthly prices to evaluate (defaults to $10-$60)
        config: Engine constants

    Returns:
        DataFrame with price, growth/retention profit, net gain and payback
    """
    grid = DEFAULT_PRICE_GRID if prices is None else np.asarray(list(prices), dtype=float)
    if grid.size and (not np.all(np.isfinite(grid)) or np.any(grid < 0)):
        raise InvalidInputError("prices must be finite and >= 0")

    rows = []
    for price in grid:
        result = allocate_and_simulate(
            replace(inputs, monthly_revenue_per_paid_user=float(price)), config
        )
        rows.append({
            "monthly_price": float(price),
            "growth_profit": result.growth.profit_in_horizon,
            "retention_profit": result.retention.profit_in_horizon,
            "net_gain": result.total.net_gain_in_horizon,
            "payback_months": result.total.payback_months,
        })

    return pd.DataFrame(rows, columns=[
        "monthly_price", "growth_profit", "retention_profit", "net_gain", "payback_months",
    ])


def find_break_even_price(
    inputs: RoiInputs, config: RoiConfig = DEFAULT_CONFIG
) -> Optional[float]:
    """
    Lowest monthly price at which the horizon net gain reaches zero.

    Profit is linear in price, so the pilot is evaluated once at $1/month
    and the cost is divided by the profit earned per dollar of price.

    Returns:
        Break-even monthly price, or None if the pilot produces no
        incremental paid user-months at all
    """
    unit_result = allocate_and_simulate(
        replace(inputs, monthly_revenue_per_paid_user=1.0), config
    )
    cost = unit_result.pilot_cost_usd
    if cost <= 0:
        return 0.0

    profit_per_price_dollar = (
        unit_result.growth.profit_in_horizon + unit_result.retention.profit_in_horizon
    )
    if profit_per_price_dollar <= 0:
        logger.debug("Pilot yields no incremental user-months, break-even price undefined")
        return None

    return cost / profit_per_price_dollar
