"""
Tabular and presentation views of an ROI result.

The engine keeps every figure unrounded. Rounding happens here, once, for
display and for documents that must match what was shown on screen.
"""

from typing import Any, Dict

import pandas as pd

from .models import RoiResult

FLOW_COLUMNS = [
    "month",
    "growth_profit",
    "retention_profit",
    "total_profit",
    "cumulative_net_gain",
    "new_paid_users",
    "extra_paid_users",
]

CURRENCY_DECIMALS = 2
COUNT_DECIMALS = 1
MULTIPLE_DECIMALS = 2


def flows_to_dataframe(result: RoiResult) -> pd.DataFrame:
    """
    Convert the monthly flows into a DataFrame.

    Args:
        result: Engine result

    Returns:
        DataFrame with one row per simulated month and an ``in_horizon`` flag
    """
    df = pd.DataFrame(
        [[getattr(flow, col) for col in FLOW_COLUMNS] for flow in result.monthly_flows],
        columns=FLOW_COLUMNS,
    )
    df["in_horizon"] = df["month"] <= result.horizon_months
    return df


def annual_profit_summary(result: RoiResult, years: int = 3) -> pd.DataFrame:
    """
    Roll the monthly flows up into 12-month blocks.

    Args:
        result: Engine result
        years: Number of years to report (limited by the simulated months)

    Returns:
        DataFrame with year, growth/retention/total profit and the
        cumulative net gain at the end of each year
    """
    df = flows_to_dataframe(result)
    df["year"] = (df["month"] - 1) // 12 + 1
    df = df[df["year"] <= years]

    annual = (
        df.groupby("year")
        .agg(
            growth_profit=("growth_profit", "sum"),
            retention_profit=("retention_profit", "sum"),
            total_profit=("total_profit", "sum"),
            cumulative_net_gain=("cumulative_net_gain", "last"),
            months=("month", "count"),
        )
        .reset_index()
    )

    # A trailing partial year is not comparable
    return annual[annual["months"] == 12].drop(columns="months").reset_index(drop=True)


def summarize(result: RoiResult) -> Dict[str, Any]:
    """
    Build the rounded headline figures for display and documents.

    Args:
        result: Engine result

    Returns:
        Nested dict of presentation values
    """
    payback = result.total.payback_months

    return {
        "horizon_months": result.horizon_months,
        "allocation": {
            "free": result.allocation.free,
            "paid": result.allocation.paid,
        },
        "pilot_cost_usd": round(result.pilot_cost_usd, CURRENCY_DECIMALS),
        "growth": {
            "new_paid_users": round(result.growth.new_paid_users_in_horizon, COUNT_DECIMALS),
            "profit_usd": round(result.growth.profit_in_horizon, CURRENCY_DECIMALS),
            "is_profitable": result.growth.is_profitable,
        },
        "retention": {
            "profit_usd": round(result.retention.profit_in_horizon, CURRENCY_DECIMALS),
            "extra_paid_user_months": round(
                result.retention.extra_paid_user_months_in_horizon, COUNT_DECIMALS
            ),
        },
        "total": {
            "net_gain_usd": round(result.total.net_gain_in_horizon, CURRENCY_DECIMALS),
            "roi_multiple": round(result.total.roi_multiple, MULTIPLE_DECIMALS),
            "payback_months": payback,
            "payback_reached": payback is not None,
        },
    }
