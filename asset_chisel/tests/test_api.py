from __future__ import annotations

import json

from flask.testing import FlaskClient


def projection_payload() -> dict:
    return {
        "simulationYears": 3,
        "assets": [
            {
                "id": 1,
                "name": "Cash",
                "initialAmount": 1000000,
                "returnRates": [{"id": 1, "startYear": 1, "endYear": 30, "ratePercent": 0}],
                "contributions": [],
                "events": [],
                "cap": {"enabled": False, "limit": 0},
            },
            {
                "id": 2,
                "name": "Fund",
                "initialAmount": 0,
                "returnRates": [{"id": 1, "startYear": 1, "endYear": 10, "ratePercent": 5}],
                "contributions": [{"id": 1, "startYear": 1, "endYear": 10, "monthlyAmount": 50000}],
                "events": [],
                "cap": {"enabled": True, "limit": 1000000},
            },
        ],
    }


def test_ping_returns_pong(client: FlaskClient):
    response = client.get("/api/ping")

    assert response.status_code == 200
    assert response.json == {"message": "pong"}


def test_projection_endpoint_returns_series(client: FlaskClient):
    resp = client.post("/api/projection", json=projection_payload())

    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["combined"]) == 4
    assert [p["asset"]["name"] for p in body["perAsset"]] == ["Cash", "Fund"]

    fund_rows = body["perAsset"][1]["data"]
    assert fund_rows[1]["total"] == 600000
    # second year only 400k of the planned 600k fits under the cap
    assert fund_rows[2]["cumulativeContribution"] == 1000000
    assert fund_rows[2]["total"] == 1030000
    assert fund_rows[2]["contributionStopped"] is True

    year_two = body["combined"][2]
    assert year_two["total"] == 2030000
    assert year_two["Cash_total"] == 1000000
    assert year_two["Fund_total"] == 1030000
    assert body["summary"]["assets"][1]["capReached"] is True


def test_projection_rejects_negative_horizon(client: FlaskClient):
    payload = projection_payload()
    payload["simulationYears"] = -2

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 422
    assert "detail" in resp.get_json()


def test_scenario_lifecycle(client: FlaskClient):
    created = client.post("/api/scenarios", json={"name": "Mine", "data": projection_payload()})
    assert created.status_code == 201
    scenario = created.get_json()

    listed = client.get("/api/scenarios").get_json()
    assert [s["id"] for s in listed] == [scenario["id"]]
    assert client.get("/api/scenarios/current").get_json() == {"id": scenario["id"]}

    renamed = client.put(f"/api/scenarios/{scenario['id']}", json={"name": "Renamed"})
    assert renamed.status_code == 200
    assert renamed.get_json()["name"] == "Renamed"
    assert renamed.get_json()["data"] == projection_payload()

    projected = client.get(f"/api/scenarios/{scenario['id']}/projection")
    assert projected.status_code == 200
    assert projected.get_json()["combined"][2]["total"] == 2030000

    deleted = client.delete(f"/api/scenarios/{scenario['id']}")
    assert deleted.status_code == 200
    assert deleted.get_json() == []
    assert client.get("/api/scenarios/current").get_json() == {"id": None}


def test_scenario_created_without_data_uses_defaults(client: FlaskClient):
    resp = client.post("/api/scenarios", json={"name": "Starter"})

    assert resp.status_code == 201
    assert resp.get_json()["data"]["simulationYears"] == 30

    projected = client.get(f"/api/scenarios/{resp.get_json()['id']}/projection").get_json()
    assert len(projected["combined"]) == 31


def test_unknown_scenario_returns_404(client: FlaskClient):
    assert client.get("/api/scenarios/nope").status_code == 404
    assert client.delete("/api/scenarios/nope").status_code == 404
    assert client.put("/api/scenarios/current", json={"id": "nope"}).status_code == 404


def test_export_then_import(client: FlaskClient):
    scenario = client.post("/api/scenarios", json={"name": "Plan", "data": projection_payload()}).get_json()

    exported = client.get(f"/api/scenarios/{scenario['id']}/export")
    assert exported.status_code == 200
    assert "attachment" in exported.headers["Content-Disposition"]
    assert "Plan_" in exported.headers["Content-Disposition"]

    imported = client.post(
        "/api/scenarios/import",
        data=exported.get_data(as_text=True),
        content_type="application/json",
    )
    assert imported.status_code == 201
    body = imported.get_json()
    assert body["id"] != scenario["id"]
    assert body["name"] == "Plan (imported)"
    assert body["data"] == scenario["data"]
    assert client.get("/api/scenarios/current").get_json() == {"id": body["id"]}


def test_invalid_import_is_rejected_and_state_kept(client: FlaskClient):
    scenario = client.post("/api/scenarios", json={"name": "Keep", "data": {"assets": []}}).get_json()

    resp = client.post(
        "/api/scenarios/import",
        data=json.dumps({"name": "no data here"}),
        content_type="application/json",
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid scenario format"
    assert [s["id"] for s in client.get("/api/scenarios").get_json()] == [scenario["id"]]
    assert client.get("/api/scenarios/current").get_json() == {"id": scenario["id"]}


def test_clear_all_scenarios(client: FlaskClient):
    client.post("/api/scenarios", json={"name": "One", "data": {}})
    client.post("/api/scenarios", json={"name": "Two", "data": {}})

    resp = client.delete("/api/scenarios")

    assert resp.status_code == 204
    assert client.get("/api/scenarios").get_json() == []


def test_projection_overflow_is_rejected(client: FlaskClient):
    payload = {
        "simulationYears": 3,
        "assets": [
            {
                "name": "Huge",
                "initialAmount": 1e300,
                "returnRates": [{"startYear": 1, "endYear": 5, "ratePercent": 1e10}],
            }
        ],
    }

    resp = client.post("/api/projection", json=payload)

    assert resp.status_code == 422
    assert "overflowed" in resp.get_json()["detail"]


def test_projection_rejects_nan_tokens(client: FlaskClient):
    resp = client.post(
        "/api/projection",
        data='{"simulationYears": 1, "assets": [{"name": "X", "initialAmount": NaN}]}',
        content_type="application/json",
    )

    assert resp.status_code == 422
