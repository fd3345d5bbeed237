from __future__ import annotations

from math import isclose

import pytest

from first_million.core import solvers
from first_million.core.projection import (
    ContributionIndexation,
    ContributionTiming,
    final_balance_real,
    simulate_projection,
)
from first_million.core.solvers import months_to_target, solve_required_contribution


def test_finds_months_to_reach_goal():
    months = months_to_target(
        pv_today=0,
        pmt0=100,
        target_today=5000,
        age_now=25,
        real_monthly_rate=0.01,
        inflation_monthly_rate=0.002,
        indexation=ContributionIndexation.FIXED_NOMINAL,
        timing=ContributionTiming.BEGIN,
        max_months=200,
    )
    assert months is not None
    assert 0 < months < 200


def test_unreachable_goal_returns_none():
    months = months_to_target(
        pv_today=0,
        pmt0=10,
        target_today=10_000_000,
        age_now=25,
        real_monthly_rate=0.0,
        inflation_monthly_rate=0.01,
        indexation=ContributionIndexation.FIXED_NOMINAL,
        timing=ContributionTiming.END,
        max_months=120,
    )
    assert months is None


@pytest.mark.parametrize("target", [0, 500, 1000])
def test_goal_already_met_takes_zero_months(target):
    assert months_to_target(
        pv_today=1000, pmt0=0, target_today=target, age_now=30,
        real_monthly_rate=-0.5, inflation_monthly_rate=0.5, max_months=0,
    ) == 0


def test_diverging_balance_is_not_reached():
    months = months_to_target(
        pv_today=1e300, pmt0=0, target_today=1.7e308, age_now=30,
        real_monthly_rate=10.0, inflation_monthly_rate=0.0,
    )
    assert months is None


def test_fixed_nominal_uses_previous_month_price_level():
    # month 1 adds 100 / 1.1**0, month 2 adds 100 / 1.1**1 -> 190.91
    kwargs = dict(
        pv_today=0, pmt0=100, age_now=30,
        real_monthly_rate=0.0, inflation_monthly_rate=0.1,
        indexation=ContributionIndexation.FIXED_NOMINAL, timing=ContributionTiming.END,
    )
    assert months_to_target(target_today=100, **kwargs) == 1
    assert months_to_target(target_today=190, **kwargs) == 2
    assert months_to_target(target_today=191, **kwargs) == 3


@pytest.mark.parametrize("timing", list(ContributionTiming))
@pytest.mark.parametrize("indexation", list(ContributionIndexation))
def test_months_to_target_agrees_with_the_projection(indexation, timing):
    kwargs = dict(
        pv_today=1500, pmt0=220, age_now=35,
        real_monthly_rate=0.004, inflation_monthly_rate=0.006,
        indexation=indexation, timing=timing,
    )
    target = 20_000
    months = months_to_target(target_today=target, max_months=600, **kwargs)
    assert months is not None

    points = simulate_projection(months=months, **kwargs)
    assert points[-1].balance_real >= target
    assert points[-2].balance_real < target


def test_solves_required_contribution_to_hit_target():
    payment = solve_required_contribution(
        pv_today=5000,
        target_today=50_000,
        months=120,
        age_now=30,
        real_monthly_rate=0.005,
        inflation_monthly_rate=0.002,
        indexation=ContributionIndexation.INFLATION_ADJUSTED,
        timing=ContributionTiming.END,
    )
    assert payment is not None
    assert payment > 0

    # ordinary annuity closed form for a constant real contribution
    growth = 1.005 ** 120
    expected = (50_000 - 5000 * growth) / ((growth - 1) / 0.005)
    assert isclose(payment, expected, rel_tol=1e-9)


@pytest.mark.parametrize("timing", list(ContributionTiming))
@pytest.mark.parametrize("indexation", list(ContributionIndexation))
def test_required_contribution_is_the_smallest_that_reaches(indexation, timing):
    kwargs = dict(
        pv_today=10_000, months=240,
        real_monthly_rate=0.003, inflation_monthly_rate=0.004,
        indexation=indexation, timing=timing,
    )
    target = 400_000
    payment = solve_required_contribution(target_today=target, age_now=30, **kwargs)
    assert payment is not None

    assert final_balance_real(pmt0=payment, **kwargs) >= target
    assert final_balance_real(pmt0=payment * 0.999, **kwargs) < target


@pytest.mark.parametrize("target", [0, 4999.99, 5000])
def test_no_contribution_needed_when_goal_already_met(target):
    assert solve_required_contribution(
        pv_today=5000, target_today=target, months=12, age_now=30,
        real_monthly_rate=0.0, inflation_monthly_rate=0.0,
    ) == 0


@pytest.mark.parametrize("months", [0, -12])
def test_non_positive_horizon_has_no_answer(months):
    assert solve_required_contribution(
        pv_today=0, target_today=1000, months=months, age_now=30,
        real_monthly_rate=0.01, inflation_monthly_rate=0.0,
    ) is None


def test_contribution_above_ceiling_is_unreachable():
    # with -99% a month, only 1% of a begin-of-month deposit survives
    assert solve_required_contribution(
        pv_today=0, target_today=1e10, months=1, age_now=30,
        real_monthly_rate=-0.99, inflation_monthly_rate=0.0,
        timing=ContributionTiming.BEGIN,
    ) is None


def test_doubling_cap_also_reports_unreachable(monkeypatch):
    monkeypatch.setattr(solvers, "MAX_DOUBLINGS", 3)
    # three doublings reach 8e6, of which 1% survives the month: 8e4 < 1e6
    assert solve_required_contribution(
        pv_today=0, target_today=1e6, months=1, age_now=30,
        real_monthly_rate=-0.99, inflation_monthly_rate=0.0,
        timing=ContributionTiming.BEGIN,
    ) is None
