"""Deterministic projection engine: rates, trajectories and goal solvers."""

from first_million.core.numbers import clamp, parse_number_br
from first_million.core.projection import (
    ContributionIndexation,
    ContributionPolicy,
    ContributionTiming,
    SimulationPoint,
    final_balance_real,
    simulate_projection,
)
from first_million.core.rates import (
    RateAssumptions,
    annual_to_monthly_rate,
    real_monthly_rate_from_gross,
)
from first_million.core.solvers import months_to_target, solve_required_contribution

__all__ = [
    "clamp",
    "parse_number_br",
    "ContributionIndexation",
    "ContributionPolicy",
    "ContributionTiming",
    "SimulationPoint",
    "final_balance_real",
    "simulate_projection",
    "RateAssumptions",
    "annual_to_monthly_rate",
    "real_monthly_rate_from_gross",
    "months_to_target",
    "solve_required_contribution",
]
