"""HTTP routes for saved scenarios."""

import io
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request, send_file

from asset_chisel.app.api.routes import run_projection
from asset_chisel.schemas.projection import ProjectionRequest
from asset_chisel.schemas.scenario import CurrentScenario, ScenarioCreate, ScenarioUpdate
from asset_chisel.storage.scenarios import (
    InvalidScenarioFormat,
    ScenarioNotFound,
    ScenarioStorageError,
    ScenarioStore,
    default_scenario_data,
    export_scenario,
    import_scenario,
)

scenarios_bp = Blueprint("scenarios", __name__)


def _store() -> ScenarioStore:
    return current_app.extensions["scenario_store"]


def _get_or_404(scenario_id: str):
    scenario = _store().get(scenario_id)
    if scenario is None:
        raise ScenarioNotFound(scenario_id)
    return scenario


@scenarios_bp.errorhandler(InvalidScenarioFormat)
def _handle_invalid_format(exc: InvalidScenarioFormat):
    return jsonify({"error": "invalid scenario format", "detail": exc.reason}), HTTPStatus.BAD_REQUEST


@scenarios_bp.errorhandler(ScenarioNotFound)
def _handle_not_found(exc: ScenarioNotFound):
    return jsonify({"error": str(exc)}), HTTPStatus.NOT_FOUND


@scenarios_bp.errorhandler(ScenarioStorageError)
def _handle_storage_error(exc: ScenarioStorageError):
    return jsonify({"error": str(exc)}), HTTPStatus.INTERNAL_SERVER_ERROR


@scenarios_bp.get("")
def list_scenarios() -> Any:
    return jsonify([scenario.model_dump() for scenario in _store().list()])


@scenarios_bp.post("")
def create_scenario() -> Any:
    payload = ScenarioCreate.model_validate(request.get_json(force=True, silent=False))
    data = payload.data if payload.data is not None else default_scenario_data()
    store = _store()
    saved = store.save(store.create(payload.name, data))
    return jsonify(saved.model_dump()), HTTPStatus.CREATED


@scenarios_bp.delete("")
def clear_scenarios() -> Any:
    _store().clear()
    return "", HTTPStatus.NO_CONTENT


@scenarios_bp.get("/current")
def get_current() -> Any:
    return jsonify(CurrentScenario(id=_store().current_id()).model_dump())


@scenarios_bp.put("/current")
def set_current() -> Any:
    payload = CurrentScenario.model_validate(request.get_json(force=True, silent=False))
    if payload.id is None:
        return jsonify({"error": "id is required"}), HTTPStatus.BAD_REQUEST
    _get_or_404(payload.id)
    _store().set_current_id(payload.id)
    return jsonify(payload.model_dump())


@scenarios_bp.post("/import")
def import_from_json() -> Any:
    """Store an exported scenario as a new one; the body is the exported JSON text."""
    imported = import_scenario(request.get_data(as_text=True))
    saved = _store().save(imported)
    return jsonify(saved.model_dump()), HTTPStatus.CREATED


@scenarios_bp.get("/<scenario_id>")
def get_scenario(scenario_id: str) -> Any:
    return jsonify(_get_or_404(scenario_id).model_dump())


@scenarios_bp.put("/<scenario_id>")
def update_scenario(scenario_id: str) -> Any:
    payload = ScenarioUpdate.model_validate(request.get_json(force=True, silent=False))
    scenario = _get_or_404(scenario_id)
    saved = _store().save(scenario.model_copy(update=payload.model_dump(exclude_none=True)))
    return jsonify(saved.model_dump())


@scenarios_bp.delete("/<scenario_id>")
def delete_scenario(scenario_id: str) -> Any:
    remaining = _store().delete(scenario_id)
    return jsonify([scenario.model_dump() for scenario in remaining])


@scenarios_bp.get("/<scenario_id>/export")
def export_to_json(scenario_id: str) -> Any:
    filename, text = export_scenario(_get_or_404(scenario_id))
    return send_file(
        io.BytesIO(text.encode("utf-8")),
        mimetype="application/json",
        as_attachment=True,
        download_name=filename,
    )


@scenarios_bp.get("/<scenario_id>/projection")
def project_scenario(scenario_id: str) -> Any:
    payload = ProjectionRequest.model_validate(_get_or_404(scenario_id).data)
    return jsonify(run_projection(payload).model_dump())
