"""Rate conversions: annual to monthly, and gross nominal to net real."""

from __future__ import annotations

from dataclasses import dataclass

from first_million.core.numbers import clamp, safe_divide

MONTHS_PER_YEAR = 12

# (1 + a) ** (1/12) has no real value for a <= -1
MONTHLY_RATE_FLOOR = -0.999999

REAL_RATE_MIN = -0.99
REAL_RATE_MAX = 10.0


def annual_to_monthly_rate(annual_rate: float) -> float:
    """Convert an annual rate to the equivalent compounded monthly rate."""
    if annual_rate <= -1:
        return MONTHLY_RATE_FLOOR
    return (1.0 + annual_rate) ** (1.0 / MONTHS_PER_YEAR) - 1.0


def real_monthly_rate_from_gross(
    gross_monthly_rate: float,
    tax_on_gains_rate: float,
    inflation_monthly_rate: float,
) -> float:
    """
    Net real monthly rate from a gross nominal monthly return.

    The tax is taken as a flat share of the gross monthly gain and the net
    nominal factor is then deflated by monthly inflation. Taxing before
    deflating is an approximation, not a model of tax on real gains.

    The result is clamped to [-0.99, 10] so downstream compounding stays finite.
    """
    tax = clamp(tax_on_gains_rate, 0.0, 1.0)
    net_nominal = 1.0 + gross_monthly_rate * (1.0 - tax)
    real = safe_divide(net_nominal, 1.0 + inflation_monthly_rate) - 1.0
    return clamp(real, REAL_RATE_MIN, REAL_RATE_MAX)


@dataclass(frozen=True)
class RateAssumptions:
    gross_monthly_rate: float
    tax_on_gains_rate: float
    inflation_monthly_rate: float

    @property
    def net_nominal_monthly_rate(self) -> float:
        return self.gross_monthly_rate * (1.0 - self.tax_on_gains_rate)

    @property
    def real_monthly_rate(self) -> float:
        return real_monthly_rate_from_gross(
            gross_monthly_rate=self.gross_monthly_rate,
            tax_on_gains_rate=self.tax_on_gains_rate,
            inflation_monthly_rate=self.inflation_monthly_rate,
        )
