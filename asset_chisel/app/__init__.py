"""Application factory and app-wide configuration."""

from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS

from asset_chisel.app.api.routes import api_bp
from asset_chisel.app.api.scenarios import scenarios_bp
from asset_chisel.config import Settings, load_settings
from asset_chisel.storage.scenarios import ScenarioStore

STORE_EXTENSION = "scenario_store"


def create_app(settings: Optional[Settings] = None, store: Optional[ScenarioStore] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings

    CORS(
        app,
        resources={r"/api/*": {"origins": list(settings.cors_origins)}},
        supports_credentials=True,
    )

    app.extensions[STORE_EXTENSION] = store or ScenarioStore(settings.db_path)

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(scenarios_bp, url_prefix="/api/scenarios")
    return app
