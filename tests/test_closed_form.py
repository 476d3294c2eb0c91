import pytest

from magnet_roi.config import ClosedFormConfig
from magnet_roi.engine.closed_form import estimate_closed_form
from magnet_roi.models import Allocation, PlanChoice, RoiInputs


def test_growth_only_reference_scenario(growth_inputs):
    result = estimate_closed_form(growth_inputs)

    assert result.allocation == Allocation(free=1500, paid=0)
    assert result.pilot_cost_usd == pytest.approx(30000.0)
    assert result.profit_per_user_month == pytest.approx(20.88)
    assert result.growth.new_paid_users == pytest.approx(150.0)
    assert result.growth.revenue_in_horizon == pytest.approx(150 * 29 * 12)
    assert result.growth.profit_in_horizon == pytest.approx(37584.0)
    assert result.growth.is_profitable
    assert result.retention.profit_in_horizon == 0.0
    assert result.retention.extra_user_months == 0.0
    assert result.net_gain_in_horizon == pytest.approx(7584.0)
    assert result.roi_multiple == pytest.approx(7584.0 / 30000.0)
    assert result.payback_months == pytest.approx(30000.0 / 3132.0)


def test_growth_and_retention(mixed_inputs):
    result = estimate_closed_form(mixed_inputs)

    delta_l = 0.08 / 0.92 * 7
    assert result.allocation == Allocation(free=1275, paid=225)
    assert result.retention.delta_lifetime_months == pytest.approx(delta_l)
    assert result.retention.delta_lifetime_effective_months == pytest.approx(0.5 * delta_l)
    assert result.retention.extra_user_months == pytest.approx(225 * 0.5 * delta_l)
    assert result.retention.profit_in_horizon == pytest.approx(225 * 0.5 * delta_l * 20.88)


def test_paid_floor_applies():
    inputs = RoiInputs(
        total_units=1000,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
        plan_choice=PlanChoice.GROWTH_AND_RETENTION,
    )
    assert estimate_closed_form(inputs).allocation == Allocation(free=800, paid=200)


def test_pilot_cost_for_standard_batch():
    inputs = RoiInputs(
        total_units=2000,
        paid_subscribers=2000,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
    )
    assert estimate_closed_form(inputs).pilot_cost_usd == pytest.approx(40000.0)


@pytest.mark.parametrize("price,profitable", [(15.0, False), (23.0, False), (24.0, True), (50.0, True)])
def test_growth_break_even_threshold(price, profitable):
    inputs = RoiInputs(
        total_units=1500,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=price,
        avg_paid_lifetime_months=7.0,
    )
    result = estimate_closed_form(inputs)
    assert result.growth.is_profitable is profitable
    assert (result.net_gain_in_horizon >= 0) is profitable


def test_zero_price_has_no_payback():
    inputs = RoiInputs(
        total_units=1500,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=0.0,
        avg_paid_lifetime_months=7.0,
    )
    result = estimate_closed_form(inputs)
    assert result.payback_months == 0.0
    assert not result.growth.is_profitable
    assert result.net_gain_in_horizon == pytest.approx(-30000.0)


def test_custom_horizon():
    config = ClosedFormConfig(horizon_months=24)
    inputs = RoiInputs(
        total_units=1500,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
    )
    assert estimate_closed_form(inputs, config).growth.profit_in_horizon == pytest.approx(2 * 37584.0)
