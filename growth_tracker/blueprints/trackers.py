"""
Tracker analytics blueprint.

This module exposes the projection and analytics engine over JSON. Every
endpoint is a pure computation over the request body; nothing is stored.
"""

from datetime import date
from typing import Any, List, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, Field, ValidationError, model_validator

from growth_tracker.models.actual_performance import calculate_actual_average_increase
from growth_tracker.models.projection import calculate_projected_values
from growth_tracker.models.tracker import (
    ActualDataPoint,
    CashFlow,
    ProjectionScenario,
    Tracker,
)
from growth_tracker.services.tracker_service import TrackerService

trackers_bp = Blueprint("trackers", __name__, url_prefix="/api")


class ProjectionRequest(BaseModel):
    """Request body for a single projection."""

    scenario: ProjectionScenario
    start_date: date
    starting_amount: float
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_span(self) -> "ProjectionRequest":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must be >= start date")
        return self


class ActualRateRequest(BaseModel):
    """Request body for the realized growth rate."""

    actual_data: List[ActualDataPoint] = Field(default_factory=list)
    interval_days: int = Field(..., ge=1)
    cash_flows: List[CashFlow] = Field(default_factory=list)


def _validation_error(e: ValidationError) -> Any:
    return (
        jsonify(
            {
                "error": "Invalid request body",
                "details": e.errors(include_url=False, include_context=False),
            }
        ),
        400,
    )


@trackers_bp.route("/trackers/report", methods=["POST"])
def tracker_report() -> Any:
    """Build the full analytics report for a tracker.

    Returns:
        JSON report with projections, comparisons and risk metrics
    """
    try:
        tracker = Tracker.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    try:
        service = TrackerService(current_app.config["ANALYTICS"])
        report = service.build_report(tracker)
    except ValueError as e:
        current_app.logger.error(f"Error building tracker report: {str(e)}")
        return jsonify({"error": str(e)}), 400

    return jsonify(report.model_dump(mode="json"))


@trackers_bp.route("/projections", methods=["POST"])
def projection() -> Any:
    """Generate the dense daily projection of one scenario.

    Returns:
        JSON list of projected data points
    """
    try:
        body = ProjectionRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    points = calculate_projected_values(
        body.scenario, body.start_date, body.starting_amount, body.end_date
    )
    return jsonify([p.model_dump(mode="json") for p in points])


@trackers_bp.route("/trackers/actual-rate", methods=["POST"])
def actual_rate() -> Any:
    """Estimate the realized growth rate from actual snapshots.

    Returns:
        JSON growth rate, or {"result": null} when there is not enough data
    """
    try:
        body = ActualRateRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    result = calculate_actual_average_increase(
        body.actual_data, body.interval_days, body.cash_flows
    )
    return jsonify({"result": result.model_dump(mode="json") if result else None})
