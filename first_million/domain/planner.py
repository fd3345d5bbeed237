from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from pydantic import ValidationInfo, model_validator

from first_million.core.projection import (
    ContributionIndexation,
    ContributionPolicy,
    ContributionTiming,
    simulate_projection,
)
from first_million.core.rates import (
    MONTHS_PER_YEAR,
    RateAssumptions,
    annual_to_monthly_rate,
)
from first_million.core.solvers import (
    DEFAULT_MAX_MONTHS,
    months_to_target,
    solve_required_contribution,
)
from first_million.schemas.projection import (
    CamelModel,
    LocaleFloat,
    SimulationPointOut,
    horizon_limit,
)


class BenchmarkKey(str, Enum):
    INVESTOR = "investor"
    POPULATION = "population"


class ScenarioKey(str, Enum):
    PESSIMISTIC = "pessimistic"
    BASE = "base"
    OPTIMISTIC = "optimistic"
    CUSTOM = "custom"


class DisplayMode(str, Enum):
    REAL = "real"
    NOMINAL = "nominal"


@dataclass(frozen=True)
class Benchmark:
    label: str
    base_age: float
    income: float
    start_balance: float


@dataclass(frozen=True)
class ReturnScenario:
    key: ScenarioKey
    label: str
    gross_monthly_pct: float


BENCHMARKS: Dict[BenchmarkKey, Benchmark] = {
    BenchmarkKey.INVESTOR: Benchmark(
        label="Brazilian investor (benchmark)",
        base_age=43,
        income=6299,
        start_balance=2270,
    ),
    BenchmarkKey.POPULATION: Benchmark(
        label="General population (benchmark)",
        base_age=43,
        income=4520,
        start_balance=0,
    ),
}

SCENARIOS: List[ReturnScenario] = [
    ReturnScenario(key=ScenarioKey.PESSIMISTIC, label="Pessimistic", gross_monthly_pct=0.4),
    ReturnScenario(key=ScenarioKey.BASE, label="Base", gross_monthly_pct=0.6),
    ReturnScenario(key=ScenarioKey.OPTIMISTIC, label="Optimistic", gross_monthly_pct=0.8),
]

DEFAULT_GROSS_MONTHLY_PCT = 0.6


class GoalInputs(CamelModel):
    """Everything the goal planner form collects. Amounts are in today's money."""

    benchmark: BenchmarkKey = BenchmarkKey.INVESTOR
    model_contribution_pct_of_income: LocaleFloat = 10.0

    current_portfolio: LocaleFloat = 50000.0
    current_age: LocaleFloat = 23.0
    target: LocaleFloat = 1000000.0

    scenario: ScenarioKey = ScenarioKey.BASE
    custom_gross_monthly_pct: LocaleFloat = 1.0

    annual_inflation_pct: LocaleFloat = 4.5
    effective_tax_pct: LocaleFloat = 15.0

    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED
    timing: ContributionTiming = ContributionTiming.END
    display_mode: DisplayMode = DisplayMode.REAL

    use_model_time: bool = True
    manual_target_age: LocaleFloat = 60.0

    my_contribution: LocaleFloat = 1000.0

    @model_validator(mode="after")
    def _bound_manual_horizon(self, info: ValidationInfo) -> "GoalInputs":
        limit = horizon_limit(info)
        if limit is None:
            return self
        months_away = (self.manual_target_age - max(0.0, self.current_age)) * MONTHS_PER_YEAR
        # rounds half-up past the limit, and catches NaN
        if not months_away < limit + 0.5:
            raise ValueError(
                f"target age {self.manual_target_age:g} is more than {limit} months away"
            )
        return self

    @property
    def policy(self) -> ContributionPolicy:
        return ContributionPolicy(indexation=self.indexation, timing=self.timing)

    @property
    def gross_monthly_pct(self) -> float:
        if self.scenario == ScenarioKey.CUSTOM:
            return self.custom_gross_monthly_pct
        for preset in SCENARIOS:
            if preset.key == self.scenario:
                return preset.gross_monthly_pct
        return DEFAULT_GROSS_MONTHLY_PCT


class ScenarioComparison(CamelModel):
    key: ScenarioKey
    label: str
    gross_monthly_pct: float
    real_monthly_pct: float
    required_contribution: Optional[float]


class GoalPlan(CamelModel):
    inflation_monthly_rate: float
    gross_monthly_rate: float
    net_nominal_monthly_rate: float
    real_monthly_rate: float

    model_contribution: float
    model_months_to_target: Optional[int]
    model_age_at_target: Optional[float]

    target_age: Optional[float]
    months_until_target_age: Optional[int]
    required_contribution: Optional[float]

    my_months_to_target: Optional[int]
    my_age_at_target: Optional[float]

    shortfall_today: float
    projection: Optional[List[SimulationPointOut]]
    chart_values: List[float]
    scenario_comparison: List[ScenarioComparison]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _age_after(age: float, months: Optional[int]) -> Optional[float]:
    if months is None:
        return None
    return age + months / MONTHS_PER_YEAR


def resolve_target_age(
    inputs: GoalInputs, age_now: float, model_months: Optional[int]
) -> Optional[float]:
    """Age at which the goal should be met: the benchmark's pace or a manual age."""
    if inputs.use_model_time and model_months is not None:
        return age_now + model_months / MONTHS_PER_YEAR
    return inputs.manual_target_age if inputs.manual_target_age > 0 else None


def months_until(target_age: Optional[float], age_now: float) -> Optional[int]:
    if target_age is None:
        return None
    years = target_age - age_now
    return round_half_up(years * MONTHS_PER_YEAR) if years > 0 else None


def compare_scenarios(
    pv_today: float,
    target_today: float,
    months: Optional[int],
    age_now: float,
    tax_rate: float,
    inflation_monthly_rate: float,
    policy: ContributionPolicy,
) -> List[ScenarioComparison]:
    """Required contribution under each return preset, all else equal."""
    if months is None:
        return []

    rows: List[ScenarioComparison] = []
    for preset in SCENARIOS:
        rates = RateAssumptions(
            gross_monthly_rate=preset.gross_monthly_pct / 100,
            tax_on_gains_rate=tax_rate,
            inflation_monthly_rate=inflation_monthly_rate,
        )
        real_rate = rates.real_monthly_rate
        rows.append(
            ScenarioComparison(
                key=preset.key,
                label=preset.label,
                gross_monthly_pct=preset.gross_monthly_pct,
                real_monthly_pct=real_rate * 100,
                required_contribution=solve_required_contribution(
                    pv_today=pv_today,
                    target_today=target_today,
                    months=months,
                    age_now=age_now,
                    real_monthly_rate=real_rate,
                    inflation_monthly_rate=inflation_monthly_rate,
                    indexation=policy.indexation,
                    timing=policy.timing,
                ),
            )
        )
    return rows


def plan_goal(inputs: GoalInputs, max_months: int = DEFAULT_MAX_MONTHS) -> GoalPlan:
    """
    Answer the planner's questions for one set of inputs:

      1) How long the benchmark saver takes to reach the target, which by
         default sets the target age.
      2) What monthly contribution reaches the target by that age, and the
         resulting month-by-month projection.
      3) How long the user's own contribution takes.
      4) What each return preset would require instead.

    Unreachable answers are ``None``.
    """
    benchmark = BENCHMARKS[inputs.benchmark]
    policy = inputs.policy

    pv_today = max(0.0, inputs.current_portfolio)
    age_now = max(0.0, inputs.current_age)
    target_today = max(0.0, inputs.target)

    inflation_monthly_rate = annual_to_monthly_rate(inputs.annual_inflation_pct / 100)
    tax_rate = inputs.effective_tax_pct / 100
    rates = RateAssumptions(
        gross_monthly_rate=inputs.gross_monthly_pct / 100,
        tax_on_gains_rate=tax_rate,
        inflation_monthly_rate=inflation_monthly_rate,
    )
    real_rate = rates.real_monthly_rate

    model_contribution = benchmark.income * max(0.0, inputs.model_contribution_pct_of_income) / 100
    model_months = months_to_target(
        pv_today=benchmark.start_balance,
        pmt0=model_contribution,
        target_today=target_today,
        age_now=benchmark.base_age,
        real_monthly_rate=real_rate,
        inflation_monthly_rate=inflation_monthly_rate,
        indexation=policy.indexation,
        timing=policy.timing,
        max_months=max_months,
    )

    target_age = resolve_target_age(inputs, age_now, model_months)
    horizon = months_until(target_age, age_now)

    required = None
    if horizon is not None:
        required = solve_required_contribution(
            pv_today=pv_today,
            target_today=target_today,
            months=horizon,
            age_now=age_now,
            real_monthly_rate=real_rate,
            inflation_monthly_rate=inflation_monthly_rate,
            indexation=policy.indexation,
            timing=policy.timing,
        )

    my_months = months_to_target(
        pv_today=pv_today,
        pmt0=max(0.0, inputs.my_contribution),
        target_today=target_today,
        age_now=age_now,
        real_monthly_rate=real_rate,
        inflation_monthly_rate=inflation_monthly_rate,
        indexation=policy.indexation,
        timing=policy.timing,
        max_months=max_months,
    )

    projection = None
    chart_values: List[float] = []
    if horizon is not None:
        points = simulate_projection(
            pv_today=pv_today,
            pmt0=required if required is not None else 0.0,
            months=horizon,
            age_now=age_now,
            real_monthly_rate=real_rate,
            inflation_monthly_rate=inflation_monthly_rate,
            indexation=policy.indexation,
            timing=policy.timing,
        )
        projection = [SimulationPointOut.from_point(point) for point in points]
        chart_values = [
            point.balance_real if inputs.display_mode == DisplayMode.REAL else point.balance_nominal
            for point in points
        ]

    return GoalPlan(
        inflation_monthly_rate=inflation_monthly_rate,
        gross_monthly_rate=rates.gross_monthly_rate,
        net_nominal_monthly_rate=rates.net_nominal_monthly_rate,
        real_monthly_rate=real_rate,
        model_contribution=model_contribution,
        model_months_to_target=model_months,
        model_age_at_target=_age_after(benchmark.base_age, model_months),
        target_age=target_age,
        months_until_target_age=horizon,
        required_contribution=required,
        my_months_to_target=my_months,
        my_age_at_target=_age_after(age_now, my_months),
        shortfall_today=max(0.0, target_today - pv_today),
        projection=projection,
        chart_values=chart_values,
        scenario_comparison=compare_scenarios(
            pv_today=pv_today,
            target_today=target_today,
            months=horizon,
            age_now=age_now,
            tax_rate=tax_rate,
            inflation_monthly_rate=inflation_monthly_rate,
            policy=policy,
        ),
    )


__all__ = [
    "BenchmarkKey",
    "ScenarioKey",
    "DisplayMode",
    "Benchmark",
    "ReturnScenario",
    "BENCHMARKS",
    "SCENARIOS",
    "GoalInputs",
    "GoalPlan",
    "ScenarioComparison",
    "compare_scenarios",
    "months_until",
    "plan_goal",
    "resolve_target_age",
    "round_half_up",
]
