"""Data contracts for the projection and solver endpoints."""

from __future__ import annotations

from typing import Annotated, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationInfo,
)
from pydantic.alias_generators import to_camel

from first_million.core.numbers import parse_number_br
from first_million.core.projection import (
    ContributionIndexation,
    ContributionTiming,
    SimulationPoint,
)


def _coerce_locale_number(value: object) -> object:
    if isinstance(value, str):
        return parse_number_br(value)
    return value


# accepts 1234.56 as well as "R$ 1.234,56"
LocaleFloat = Annotated[float, BeforeValidator(_coerce_locale_number)]


def horizon_limit(info: ValidationInfo) -> Optional[int]:
    """Longest horizon the caller allows, passed as ``context={"max_months": ...}``."""
    if not info.context:
        return None
    return info.context.get("max_months")


def _check_horizon(months: int, info: ValidationInfo) -> int:
    limit = horizon_limit(info)
    if limit is not None and months > limit:
        raise ValueError(f"horizon of {months} months exceeds the limit of {limit}")
    return months


HorizonMonths = Annotated[int, AfterValidator(_check_horizon)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
        # browsers reject NaN and Infinity tokens
        ser_json_inf_nan="null",
    )


class AnnualRateRequest(CamelModel):
    annual_rate: LocaleFloat = Field(..., description="Annual rate as a decimal (0.045 for 4.5%).")


class MonthlyRateResponse(CamelModel):
    monthly_rate: float


class RealRateRequest(CamelModel):
    gross_monthly_rate: LocaleFloat
    tax_on_gains_rate: LocaleFloat = 0.0
    inflation_monthly_rate: LocaleFloat = 0.0


class RealRateResponse(CamelModel):
    real_monthly_rate: float
    net_nominal_monthly_rate: float


class PolicyFields(CamelModel):
    real_monthly_rate: LocaleFloat
    inflation_monthly_rate: LocaleFloat = 0.0
    indexation: ContributionIndexation = ContributionIndexation.INFLATION_ADJUSTED
    timing: ContributionTiming = ContributionTiming.END


class ProjectionRequest(PolicyFields):
    pv_today: LocaleFloat = 0.0
    pmt0: LocaleFloat = 0.0
    months: HorizonMonths = Field(..., ge=0)
    age_now: LocaleFloat = 0.0


class MonthsToTargetRequest(PolicyFields):
    pv_today: LocaleFloat = 0.0
    pmt0: LocaleFloat = 0.0
    target_today: LocaleFloat
    age_now: LocaleFloat = 0.0
    max_months: Optional[HorizonMonths] = Field(default=None, ge=0)


class MonthsToTargetResponse(CamelModel):
    months: Optional[int]
    age_at_target: Optional[float]


class RequiredContributionRequest(PolicyFields):
    pv_today: LocaleFloat = 0.0
    target_today: LocaleFloat
    months: HorizonMonths
    age_now: LocaleFloat = 0.0


class RequiredContributionResponse(CamelModel):
    contribution: Optional[float]


class SimulationPointOut(CamelModel):
    """One month of a projection as sent to the chart and CSV export."""

    month: int = Field(..., ge=0)
    age: float
    infl_factor: float
    balance_real: float
    balance_nominal: float
    contribution_real: float
    contribution_nominal: float

    @classmethod
    def from_point(cls, point: SimulationPoint) -> "SimulationPointOut":
        return cls(
            month=point.month,
            age=point.age,
            infl_factor=point.infl_factor,
            balance_real=point.balance_real,
            balance_nominal=point.balance_nominal,
            contribution_real=point.contribution_real,
            contribution_nominal=point.contribution_nominal,
        )


class ProjectionResponse(CamelModel):
    points: List[SimulationPointOut]
    final_balance_real: Optional[float]
