"""Small numeric helpers shared by the projection engine."""

from __future__ import annotations

import math
import re
from typing import Union

_NON_NUMERIC = re.compile(r"[^\d.-]")


def parse_number_br(value: Union[str, float, int]) -> float:
    """Parse a pt-BR formatted amount such as ``"R$ 1.234,56"``.

    Dots are thousands separators and the first comma is the decimal mark.
    Anything that does not parse becomes ``0.0``.
    """
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = value.strip().replace(".", "").replace(",", ".", 1)
    cleaned = _NON_NUMERIC.sub("", cleaned)
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def clamp(n: float, lo: float, hi: float) -> float:
    # NaN collapses to lo
    return min(hi, max(lo, n))


def growth_factor(rate: float, periods: int) -> float:
    """Return ``(1 + rate) ** periods``, saturating to ``inf`` on overflow."""
    try:
        return (1.0 + rate) ** periods
    except OverflowError:
        return math.inf
    except ZeroDivisionError:
        # 0.0 ** negative
        return math.inf


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide like IEEE floats do: ``x/0 -> ±inf`` and ``0/0 -> nan``."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator
