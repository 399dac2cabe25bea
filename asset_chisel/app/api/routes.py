"""HTTP routes for the Flask API."""

import math
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from asset_chisel.core.aggregation import aggregate_portfolio
from asset_chisel.log import get_logger
from asset_chisel.schemas.projection import PortfolioProjection, ProjectionRequest

logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


class ProjectionOverflow(ValueError):
    """Raised when a projected figure leaves the finite float range."""


@api_bp.app_errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False, include_input=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@api_bp.app_errorhandler(ProjectionOverflow)
def _handle_overflow(exc: ProjectionOverflow):
    return jsonify({"detail": str(exc)}), HTTPStatus.UNPROCESSABLE_ENTITY


def _ensure_finite(result: PortfolioProjection) -> None:
    # the engine lets balances overflow to inf/nan; JSON cannot carry them
    for row in result.combined:
        if not all(math.isfinite(value) for value in (row.total, row.principal, row.profit)):
            raise ProjectionOverflow(f"projection overflowed in year {row.year}")


def run_projection(payload: ProjectionRequest) -> PortfolioProjection:
    logger.debug(
        "projecting assets=%d years=%d", len(payload.assets), payload.simulationYears
    )
    result = aggregate_portfolio(payload.assets, payload.simulationYears)
    _ensure_finite(result)
    return result


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    return jsonify({"message": "pong"})


@api_bp.post("/projection")
def projection() -> Any:
    """Project every asset and return per-asset and combined series."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    result = run_projection(payload)
    return jsonify(result.model_dump())
