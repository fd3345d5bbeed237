"""
Goal solvers built on the projection engine.

- months_to_target: how many months until a contribution reaches the goal.
- solve_required_contribution: which contribution reaches the goal by a horizon.

Both return ``None`` when the goal cannot be reached within their search
bounds; that is an ordinary outcome, not an error.
"""

from __future__ import annotations

import math
from typing import Optional

from loguru import logger

from first_million.core.numbers import growth_factor
from first_million.core.projection import (
    ContributionIndexation,
    ContributionTiming,
    advance_balance,
    contribution_for_month,
    final_balance_real,
)

DEFAULT_MAX_MONTHS = 2400  # 200 years

MAX_DOUBLINGS = 60
CONTRIBUTION_CEILING = 1e9
BISECTION_STEPS = 70


def months_to_target(
    pv_today: float,
    pmt0: float,
    target_today: float,
    age_now: float,
    real_monthly_rate: float,
    inflation_monthly_rate: float,
    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED,
    timing: ContributionTiming = ContributionTiming.END,
    max_months: Optional[int] = None,
) -> Optional[int]:
    """
    First month whose real balance is at least ``target_today``.

    Runs its own loop so a long search does not keep a trajectory in memory.
    Month ``m`` applies the contribution priced at the inflation factor of month
    ``m - 1``, which is the same flow the projection applies when stepping from
    snapshot ``m - 1`` to snapshot ``m``.

    ``age_now`` does not change the result; it is accepted so every engine entry
    point takes the same parameters.
    """
    if max_months is None:
        max_months = DEFAULT_MAX_MONTHS
    if target_today <= pv_today:
        return 0

    balance_real = max(0.0, pv_today)
    for month in range(1, max_months + 1):
        infl_factor_prev = growth_factor(inflation_monthly_rate, month - 1)
        contribution_real, _ = contribution_for_month(pmt0, infl_factor_prev, indexation)

        balance_real = advance_balance(
            balance_real, contribution_real, real_monthly_rate, timing
        )

        if not math.isfinite(balance_real):
            logger.debug(f"Balance diverged at month {month}; target {target_today:,.2f} not reached.")
            return None
        if balance_real >= target_today:
            return month

    logger.debug(f"Target {target_today:,.2f} not reached within {max_months} months.")
    return None


def solve_required_contribution(
    pv_today: float,
    target_today: float,
    months: int,
    age_now: float,
    real_monthly_rate: float,
    inflation_monthly_rate: float,
    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED,
    timing: ContributionTiming = ContributionTiming.END,
) -> Optional[float]:
    """
    Smallest base contribution whose projection ends at or above the target.

    The final balance grows with the contribution, so the answer is bracketed
    by doubling an upper bound and then bisected. The doubling stops after
    ``MAX_DOUBLINGS`` steps or once the bound passes ``CONTRIBUTION_CEILING``;
    either way the goal is reported as unreachable. The ceiling is a practical
    limit, not a proof that no contribution could work.
    """
    if months <= 0:
        return None
    if target_today <= pv_today:
        return 0.0

    def reaches(pmt0: float) -> bool:
        end = final_balance_real(
            pv_today=pv_today,
            pmt0=pmt0,
            months=months,
            real_monthly_rate=real_monthly_rate,
            inflation_monthly_rate=inflation_monthly_rate,
            indexation=indexation,
            timing=timing,
        )
        return math.isfinite(end) and end >= target_today

    low = 0.0
    high = max(1.0, (target_today - pv_today) / months)

    # high starts at 1 or more, so the ceiling ends the search long before
    # MAX_DOUBLINGS; the iteration cap is only a backstop
    for _ in range(MAX_DOUBLINGS):
        if reaches(high):
            break
        high *= 2
        if high > CONTRIBUTION_CEILING:
            logger.debug(f"Required contribution exceeds {CONTRIBUTION_CEILING:,.0f}; target unreachable.")
            return None
    else:
        if not reaches(high):
            logger.debug(f"No bracket found after {MAX_DOUBLINGS} doublings; target unreachable.")
            return None

    for _ in range(BISECTION_STEPS):
        mid = (low + high) / 2
        if reaches(mid):
            high = mid
        else:
            low = mid

    return max(0.0, high)
