from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple

from first_million.core.numbers import growth_factor, safe_divide
from first_million.core.rates import MONTHS_PER_YEAR


class ContributionIndexation(str, Enum):
    # real contribution constant, nominal grows with inflation
    INFLATION_ADJUSTED = "inflationAdjusted"
    # nominal contribution constant, real value erodes
    FIXED_NOMINAL = "fixedNominal"


class ContributionTiming(str, Enum):
    BEGIN = "begin"
    END = "end"


@dataclass(frozen=True)
class ContributionPolicy:
    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED
    timing: ContributionTiming = ContributionTiming.END


@dataclass(frozen=True)
class SimulationPoint:
    month: int
    age: float
    infl_factor: float
    balance_real: float
    balance_nominal: float
    contribution_real: float
    contribution_nominal: float


def contribution_for_month(
    pmt0: float, infl_factor: float, indexation: ContributionIndexation
) -> Tuple[float, float]:
    """Return ``(real, nominal)`` contribution for a month with this price level."""
    if indexation == ContributionIndexation.INFLATION_ADJUSTED:
        return pmt0, pmt0 * infl_factor
    return safe_divide(pmt0, infl_factor), pmt0


def advance_balance(
    balance_real: float,
    contribution_real: float,
    real_monthly_rate: float,
    timing: ContributionTiming,
) -> float:
    """Move a real balance forward by one month."""
    if timing == ContributionTiming.BEGIN:
        # contribution earns this month's return
        return (balance_real + contribution_real) * (1.0 + real_monthly_rate)
    return balance_real * (1.0 + real_monthly_rate) + contribution_real


def _iter_months(
    pv_today: float,
    pmt0: float,
    months: int,
    real_monthly_rate: float,
    inflation_monthly_rate: float,
    indexation: ContributionIndexation,
    timing: ContributionTiming,
) -> Iterator[Tuple[int, float, float, float, float]]:
    """
    Yield ``(month, infl_factor, balance_real, contribution_real,
    contribution_nominal)`` for months 0..months, balance taken before the
    month's flow. Stops early once the balance is no longer finite.
    """
    balance_real = max(0.0, pv_today)

    for month in range(months + 1):
        infl_factor = growth_factor(inflation_monthly_rate, month)
        contribution_real, contribution_nominal = contribution_for_month(
            pmt0, infl_factor, indexation
        )

        yield month, infl_factor, balance_real, contribution_real, contribution_nominal

        # last point is a snapshot only
        if month == months:
            break

        balance_real = advance_balance(
            balance_real, contribution_real, real_monthly_rate, timing
        )
        if not math.isfinite(balance_real):
            break


def simulate_projection(
    pv_today: float,
    pmt0: float,
    months: int,
    age_now: float,
    real_monthly_rate: float,
    inflation_monthly_rate: float,
    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED,
    timing: ContributionTiming = ContributionTiming.END,
) -> List[SimulationPoint]:
    """
    Project the balance month by month, in today's money.

    The balance is tracked in real terms; nominal figures are derived from the
    cumulative inflation factor. The trajectory has ``months + 1`` points (month 0
    is the starting snapshot) unless the balance overflows, in which case it ends
    at the last finite point.
    """
    return [
        SimulationPoint(
            month=month,
            age=age_now + month / MONTHS_PER_YEAR,
            infl_factor=infl_factor,
            balance_real=balance_real,
            balance_nominal=balance_real * infl_factor,
            contribution_real=contribution_real,
            contribution_nominal=contribution_nominal,
        )
        for month, infl_factor, balance_real, contribution_real, contribution_nominal in _iter_months(
            pv_today,
            pmt0,
            months,
            real_monthly_rate,
            inflation_monthly_rate,
            indexation,
            timing,
        )
    ]


def final_balance_real(
    pv_today: float,
    pmt0: float,
    months: int,
    real_monthly_rate: float,
    inflation_monthly_rate: float,
    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED,
    timing: ContributionTiming = ContributionTiming.END,
) -> float:
    """Real balance of the last point :func:`simulate_projection` would return."""
    final = math.nan
    for _, _, balance_real, _, _ in _iter_months(
        pv_today,
        pmt0,
        months,
        real_monthly_rate,
        inflation_monthly_rate,
        indexation,
        timing,
    ):
        final = balance_real
    return final


__all__ = [
    "ContributionIndexation",
    "ContributionTiming",
    "ContributionPolicy",
    "SimulationPoint",
    "contribution_for_month",
    "advance_balance",
    "simulate_projection",
    "final_balance_real",
]
