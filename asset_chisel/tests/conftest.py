from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from asset_chisel.app import create_app
from asset_chisel.config import Settings
from asset_chisel.storage.scenarios import ScenarioStore


@pytest.fixture()
def store(tmp_path) -> ScenarioStore:
    return ScenarioStore(str(tmp_path / "scenarios.db"))


@pytest.fixture()
def flask_app(tmp_path, store):
    settings = Settings(env="test", db_path=str(tmp_path / "scenarios.db"))
    return create_app(settings, store=store)


@pytest.fixture()
def client(flask_app) -> FlaskClient:
    with flask_app.test_client() as test_client:
        yield test_client
