import pytest

from magnet_roi.config import RoiConfig
from magnet_roi.models import PlanChoice, ProvidedRate, RoiInputs


@pytest.fixture
def growth_inputs():
    return RoiInputs(
        total_units=1500,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
        plan_choice=PlanChoice.GROWTH_ONLY,
    )


@pytest.fixture
def mixed_inputs():
    return RoiInputs(
        total_units=1500,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
        plan_choice=PlanChoice.GROWTH_AND_RETENTION,
    )


@pytest.fixture
def flat_effect_inputs():
    """1000 free recipients converting 10 extra users a month at $10 of profit each."""
    return RoiInputs(
        total_units=1000,
        paid_subscribers=0,
        free_subscribers=1000,
        monthly_revenue_per_paid_user=10.0,
        avg_paid_lifetime_months=7.0,
        plan_choice=PlanChoice.GROWTH_ONLY,
        baseline_conversion=ProvidedRate(0.1),
    )


def flat_effect_config(cost_per_unit_usd, alpha=1.0):
    """Near-constant uplift (huge tau) with all revenue kept as profit: ~$1000/month."""
    return RoiConfig(
        gross_margin_fraction=1.0,
        platform_revenue_share_fraction=0.0,
        cost_per_unit_usd=cost_per_unit_usd,
        conversion_uplift_alpha=alpha,
        churn_reduction_beta=0.0,
        effect_decay_tau_months=1e9,
    )
