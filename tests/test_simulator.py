import math

import pytest

from magnet_roi.config import RoiConfig
from magnet_roi.engine.allocation import allocate
from magnet_roi.engine.horizon import allocate_and_simulate
from magnet_roi.engine.simulator import (
    aggregate_horizon,
    decay_factor,
    profit_per_user_month,
    simulate,
)
from magnet_roi.errors import InvalidConfigError
from magnet_roi.models import Allocation, PlanChoice, ProvidedRate, RoiInputs

from .conftest import flat_effect_config


def test_profit_per_user_month(growth_inputs):
    assert profit_per_user_month(growth_inputs, RoiConfig()) == pytest.approx(29 * 0.9 * 0.8)


def test_flows_cover_the_simulation(growth_inputs):
    config = RoiConfig()
    sim = simulate(growth_inputs, allocate(growth_inputs, config), config)

    assert [f.month for f in sim.monthly_flows] == list(range(1, 61))
    assert sim.pilot_cost_usd == pytest.approx(15000.0)


def test_first_month_growth(growth_inputs):
    config = RoiConfig()
    sim = simulate(growth_inputs, allocate(growth_inputs, config), config)
    first = sim.monthly_flows[0]

    expected_new = 1500 * 0.03 * 0.5 * math.exp(-1 / 6)
    assert first.new_paid_users == pytest.approx(expected_new)
    assert first.growth_profit == pytest.approx(expected_new * 20.88)
    assert first.retention_profit == 0.0


def test_first_month_retention(mixed_inputs):
    config = RoiConfig()
    sim = simulate(mixed_inputs, allocate(mixed_inputs, config), config)
    first = sim.monthly_flows[0]

    c0 = 1 / 7
    survival_gap = (1 - c0 * (1 - 0.3 * math.exp(-1 / 6))) - (1 - c0)
    assert first.extra_paid_users == pytest.approx(225 * survival_gap)
    assert first.retention_profit == pytest.approx(225 * survival_gap * 20.88)


def test_retention_compounds_with_time_varying_churn(mixed_inputs):
    config = RoiConfig()
    sim = simulate(mixed_inputs, Allocation(free=0, paid=225), config)

    c0 = 1 / 7
    baseline = treated = 1.0
    for month in range(1, 4):
        baseline *= 1 - c0
        treated *= 1 - c0 * (1 - 0.3 * math.exp(-month / 6))
    assert sim.monthly_flows[2].extra_paid_users == pytest.approx(225 * (treated - baseline))


def test_provided_baseline_conversion(growth_inputs):
    config = RoiConfig()
    inputs = RoiInputs(
        total_units=1500,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
        baseline_conversion=ProvidedRate(0.06),
    )
    default_sim = simulate(growth_inputs, allocate(growth_inputs, config), config)
    provided_sim = simulate(inputs, allocate(inputs, config), config)

    assert provided_sim.monthly_flows[0].new_paid_users == pytest.approx(
        2 * default_sim.monthly_flows[0].new_paid_users
    )


def test_cumulative_net_gain_is_running_total(mixed_inputs):
    result = allocate_and_simulate(mixed_inputs)
    running = -result.pilot_cost_usd
    for flow in result.monthly_flows:
        assert flow.total_profit == pytest.approx(flow.growth_profit + flow.retention_profit)
        running += flow.total_profit
        assert flow.cumulative_net_gain == pytest.approx(running)


def test_payback_is_first_crossing(flat_effect_inputs):
    result = allocate_and_simulate(flat_effect_inputs, flat_effect_config(17.5))
    payback = result.total.payback_months

    assert payback == 18
    flows = result.monthly_flows
    assert flows[payback - 1].cumulative_net_gain >= 0
    assert all(f.cumulative_net_gain < 0 for f in flows[: payback - 1])


def test_no_payback_is_none(flat_effect_inputs):
    result = allocate_and_simulate(flat_effect_inputs, flat_effect_config(17.5, alpha=0.0))
    assert result.total.payback_months is None
    assert result.total.net_gain_in_horizon == pytest.approx(-17500.0)


def test_tiny_tau_removes_effects(mixed_inputs):
    config = RoiConfig(effect_decay_tau_months=1e-3)
    result = allocate_and_simulate(mixed_inputs, config)
    last = result.monthly_flows[-1]

    assert last.growth_profit == pytest.approx(0.0, abs=1e-12)
    assert last.retention_profit == pytest.approx(0.0, abs=1e-12)


def test_effects_start_at_configured_maxima():
    assert decay_factor(0.0, 6.0) == 1.0
    assert decay_factor(1e-9, 6.0) == pytest.approx(1.0)

    # With a near-infinite tau the month-1 uplift is the full alpha
    inputs = RoiInputs(
        total_units=1000,
        paid_subscribers=0,
        free_subscribers=1000,
        monthly_revenue_per_paid_user=10.0,
        avg_paid_lifetime_months=5.0,
        baseline_conversion=ProvidedRate(0.04),
    )
    config = RoiConfig(conversion_uplift_alpha=0.7, effect_decay_tau_months=1e12)
    first = allocate_and_simulate(inputs, config).monthly_flows[0]
    assert first.new_paid_users / (1000 * 0.04) == pytest.approx(0.7)


def test_zero_units_zero_cost_zero_roi():
    inputs = RoiInputs(
        total_units=0,
        paid_subscribers=800,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
        plan_choice=PlanChoice.GROWTH_AND_RETENTION,
    )
    result = allocate_and_simulate(inputs)

    assert result.pilot_cost_usd == 0.0
    assert result.total.roi_multiple == 0.0
    assert result.total.net_gain_in_horizon == 0.0
    assert not math.isnan(result.total.roi_multiple)


def test_no_paid_subscribers_under_retention_plan():
    inputs = RoiInputs(
        total_units=1500,
        paid_subscribers=0,
        free_subscribers=10000,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=7.0,
        plan_choice=PlanChoice.GROWTH_AND_RETENTION,
    )
    result = allocate_and_simulate(inputs)

    assert result.allocation == Allocation(free=1500, paid=0)
    assert result.retention.profit_in_horizon == 0.0
    assert result.retention.extra_paid_user_months_in_horizon == 0.0


def test_short_lifetime_keeps_survival_non_negative():
    inputs = RoiInputs(
        total_units=300,
        paid_subscribers=300,
        free_subscribers=0,
        monthly_revenue_per_paid_user=29.0,
        avg_paid_lifetime_months=0.5,
        plan_choice=PlanChoice.GROWTH_AND_RETENTION,
    )
    result = allocate_and_simulate(inputs, RoiConfig(paid_allocation_fraction=1.0))
    assert all(f.extra_paid_users >= 0 for f in result.monthly_flows)


def test_deterministic(mixed_inputs):
    assert allocate_and_simulate(mixed_inputs) == allocate_and_simulate(mixed_inputs)


def test_aggregate_horizon_sums_window(mixed_inputs):
    config = RoiConfig()
    sim = simulate(mixed_inputs, allocate(mixed_inputs, config), config)
    aggregates = aggregate_horizon(sim, 24)
    window = sim.monthly_flows[:24]

    assert aggregates.growth.profit_in_horizon == pytest.approx(sum(f.growth_profit for f in window))
    assert aggregates.retention.extra_paid_user_months_in_horizon == pytest.approx(
        sum(f.extra_paid_users for f in window)
    )
    assert aggregates.total.net_gain_in_horizon == pytest.approx(
        window[-1].cumulative_net_gain
    )
    assert aggregates.total.roi_multiple == pytest.approx(
        aggregates.total.net_gain_in_horizon / sim.pilot_cost_usd
    )


def test_aggregate_horizon_bounds(growth_inputs):
    config = RoiConfig()
    sim = simulate(growth_inputs, allocate(growth_inputs, config), config)
    with pytest.raises(InvalidConfigError):
        aggregate_horizon(sim, 0)
    with pytest.raises(InvalidConfigError):
        aggregate_horizon(sim, 61)


def test_growth_profitability_flag(flat_effect_inputs):
    # About $12,000 of growth profit in 12 months
    assert allocate_and_simulate(flat_effect_inputs, flat_effect_config(5.0)).growth.is_profitable
    assert not allocate_and_simulate(flat_effect_inputs, flat_effect_config(17.5)).growth.is_profitable


def test_results_are_immutable(growth_inputs):
    result = allocate_and_simulate(growth_inputs)
    with pytest.raises(AttributeError):
        result.pilot_cost_usd = 0.0
    assert isinstance(result.monthly_flows, tuple)
