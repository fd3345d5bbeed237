"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict, Type, TypeVar

from flask import Blueprint, Response, current_app, jsonify, request
from loguru import logger
from pydantic import BaseModel, ValidationError

from first_million import __version__
from first_million.core.projection import simulate_projection
from first_million.core.rates import (
    MONTHS_PER_YEAR,
    RateAssumptions,
    annual_to_monthly_rate,
)
from first_million.core.solvers import months_to_target, solve_required_contribution
from first_million.domain.planner import GoalInputs, plan_goal
from first_million.export import CSV_FILENAME, trajectory_to_csv
from first_million.schemas.health import HealthResponse
from first_million.schemas.projection import (
    AnnualRateRequest,
    MonthlyRateResponse,
    MonthsToTargetRequest,
    MonthsToTargetResponse,
    ProjectionRequest,
    ProjectionResponse,
    RealRateRequest,
    RealRateResponse,
    RequiredContributionRequest,
    RequiredContributionResponse,
    SimulationPointOut,
)
from first_million.storage import ScenarioNotFoundError, ScenarioStore

api_bp = Blueprint("api", __name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning(f"Rejected payload for {request.path}: {exc.error_count()} error(s)")
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.BAD_REQUEST,
    )


@api_bp.errorhandler(ScenarioNotFoundError)
def _handle_missing_scenario(exc: ScenarioNotFoundError):
    return jsonify({"detail": f"scenario '{exc.name}' not found"}), HTTPStatus.NOT_FOUND


def _payload() -> Dict[str, Any]:
    return request.get_json(force=True, silent=False)


def _max_months() -> int:
    return current_app.config["SETTINGS"].max_months


def _validate(model_cls: Type[ModelT]) -> ModelT:
    """Parse the request body, holding every horizon to the configured limit."""
    return model_cls.model_validate(_payload(), context={"max_months": _max_months()})


def _respond(model: BaseModel) -> Response:
    # non-finite floats go out as null
    return current_app.response_class(
        model.model_dump_json(by_alias=True), mimetype="application/json"
    )


def _store() -> ScenarioStore:
    return current_app.extensions["scenario_store"]


def _projection_points(req: ProjectionRequest):
    return simulate_projection(
        pv_today=req.pv_today,
        pmt0=req.pmt0,
        months=req.months,
        age_now=req.age_now,
        real_monthly_rate=req.real_monthly_rate,
        inflation_monthly_rate=req.inflation_monthly_rate,
        indexation=req.indexation,
        timing=req.timing,
    )


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    return jsonify(HealthResponse(status="ok", version=__version__).model_dump())


@api_bp.post("/rates/monthly")
def monthly_rate() -> Any:
    req = _validate(AnnualRateRequest)
    return _respond(MonthlyRateResponse(monthly_rate=annual_to_monthly_rate(req.annual_rate)))


@api_bp.post("/rates/real")
def real_rate() -> Any:
    req = _validate(RealRateRequest)
    rates = RateAssumptions(
        gross_monthly_rate=req.gross_monthly_rate,
        tax_on_gains_rate=req.tax_on_gains_rate,
        inflation_monthly_rate=req.inflation_monthly_rate,
    )
    return _respond(
        RealRateResponse(
            real_monthly_rate=rates.real_monthly_rate,
            net_nominal_monthly_rate=rates.net_nominal_monthly_rate,
        )
    )


@api_bp.post("/projection")
def projection() -> Any:
    """Month-by-month trajectory for a fixed contribution."""
    req = _validate(ProjectionRequest)
    points = _projection_points(req)
    return _respond(
        ProjectionResponse(
            points=[SimulationPointOut.from_point(point) for point in points],
            final_balance_real=points[-1].balance_real if points else None,
        )
    )


@api_bp.post("/projection/csv")
def projection_csv() -> Response:
    req = _validate(ProjectionRequest)
    points = _projection_points(req)
    logger.info(f"Exporting {len(points)} projection rows as CSV")
    return Response(
        trajectory_to_csv(points),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )


@api_bp.post("/months-to-target")
def months_to_target_route() -> Any:
    req = _validate(MonthsToTargetRequest)
    months = months_to_target(
        pv_today=req.pv_today,
        pmt0=req.pmt0,
        target_today=req.target_today,
        age_now=req.age_now,
        real_monthly_rate=req.real_monthly_rate,
        inflation_monthly_rate=req.inflation_monthly_rate,
        indexation=req.indexation,
        timing=req.timing,
        max_months=(
            req.max_months
            if req.max_months is not None
            else _max_months()
        ),
    )
    return _respond(
        MonthsToTargetResponse(
            months=months,
            age_at_target=req.age_now + months / MONTHS_PER_YEAR if months is not None else None,
        )
    )


@api_bp.post("/required-contribution")
def required_contribution() -> Any:
    req = _validate(RequiredContributionRequest)
    contribution = solve_required_contribution(
        pv_today=req.pv_today,
        target_today=req.target_today,
        months=req.months,
        age_now=req.age_now,
        real_monthly_rate=req.real_monthly_rate,
        inflation_monthly_rate=req.inflation_monthly_rate,
        indexation=req.indexation,
        timing=req.timing,
    )
    return _respond(RequiredContributionResponse(contribution=contribution))


@api_bp.post("/plan")
def plan() -> Any:
    """Full goal plan: benchmark pace, required contribution, projection, presets."""
    inputs = _validate(GoalInputs)
    return _respond(plan_goal(inputs, max_months=_max_months()))


@api_bp.get("/scenarios")
def list_scenarios() -> Any:
    return jsonify({"names": _store().list_names()})


@api_bp.get("/scenarios/<name>")
def load_scenario(name: str) -> Any:
    return _respond(_store().load(name))


@api_bp.put("/scenarios/<name>")
def save_scenario(name: str) -> Any:
    inputs = _validate(GoalInputs)
    _store().save(name, inputs)
    return _respond(inputs)


@api_bp.delete("/scenarios/<name>")
def delete_scenario(name: str) -> Any:
    _store().delete(name)
    return "", HTTPStatus.NO_CONTENT
