"""CSV export of a projection trajectory."""

from __future__ import annotations

import csv
import io
from typing import Iterable

from first_million.core.projection import SimulationPoint

CSV_COLUMNS = [
    "month",
    "age",
    "inflFactor",
    "balanceReal",
    "balanceNominal",
    "contributionReal",
    "contributionNominal",
]

CSV_FILENAME = "projection_first_million.csv"


def trajectory_to_csv(points: Iterable[SimulationPoint]) -> str:
    """Render a trajectory as CSV: age to 4 places, inflation factor to 8, money to 2."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for point in points:
        writer.writerow(
            [
                point.month,
                f"{point.age:.4f}",
                f"{point.infl_factor:.8f}",
                f"{point.balance_real:.2f}",
                f"{point.balance_nominal:.2f}",
                f"{point.contribution_real:.2f}",
                f"{point.contribution_nominal:.2f}",
            ]
        )
    return buffer.getvalue()
