"""
HTTP API tests using FastAPI's TestClient.
"""
import uuid
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fastapi.testclient import TestClient

import wellness_pricing.config.settings as settings_module
from wellness_pricing.api.main import app
from wellness_pricing.api.schemas import CalculationRequest
from wellness_pricing.config.settings import Settings


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


MASSAGE = {
    "service_type": "massage/spa",
    "total_hours": 4,
    "appointment_minutes": 20,
    "num_professionals": 2,
    "professional_hourly_rate": 50,
    "customer_hourly_rate": 135,
    "early_arrival_fee": 100,
}

HEADSHOT = {
    "service_type": "headshot",
    "total_hours": 5,
    "appointment_minutes": 12,
    "num_professionals": 2,
    "professional_hourly_rate": 400,
    "discount_percent": 10,
}


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_calculate(client):
    response = client.post("/calculate", json=MASSAGE)
    assert response.status_code == 200

    data = response.json()
    assert data["total_appointments"] == 24
    assert data["customer_total_cost"] == 1080
    assert data["net_profit"] == 580
    assert data["profit_margin_percent"] == pytest.approx(53.70)
    assert data["trace"]


def test_calculate_validation_error(client):
    response = client.post("/calculate", json={**MASSAGE, "total_hours": 0})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidDuration"
    assert response.json()["field"] == "total_hours"


def test_calculate_division_by_zero(client):
    response = client.post("/calculate", json={**MASSAGE, "discount_percent": 100})
    assert response.status_code == 400
    assert response.json()["error"] == "DivisionByZero"


def test_calculate_multiple(client):
    response = client.post("/calculate/multiple", json={
        "configurations": [MASSAGE, HEADSHOT],
        "events_per_year": 12,
    })
    assert response.status_code == 200

    data = response.json()
    assert data["customer_total_cost"] == 5580
    assert data["profit_margin_percent"] == pytest.approx(26.52)
    assert set(data["location_results"]) == {"Location 1", "Location 2"}


def test_calculate_multiple_empty(client):
    response = client.post("/calculate/multiple", json={"configurations": []})
    assert response.status_code == 400
    assert response.json()["error"] == "EmptyConfigurationList"


def test_presets(client):
    response = client.get("/presets", params={"service_type": "headshot", "size": "small"})
    assert response.status_code == 200
    assert response.json()["expected_appointments"] == 30

    response = client.get("/presets", params={"service_type": "massage/spa"})
    assert [p["size"] for p in response.json()] == ["small", "medium", "large"]


def test_presets_not_found(client):
    assert client.get("/presets", params={"service_type": "headshot", "size": "xl"}).status_code == 404
    assert client.get("/presets", params={"service_type": "nope"}).status_code == 404


def test_register_service_type(client):
    name = f"yoga-{uuid.uuid4().hex[:6]}"
    response = client.post("/service-types", json={"name": name, "margin": 30})
    assert response.status_code == 201
    assert response.json()["margin"] == 30

    response = client.post("/calculate", json={**MASSAGE, "service_type": name})
    assert response.status_code == 200
    assert name in [st["name"] for st in client.get("/service-types").json()]


def test_register_builtin_name_rejected(client):
    response = client.post("/service-types", json={"name": "headshot", "margin": 10})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidServiceType"


def test_history_flow(client):
    response = client.post("/api/history", json={"input": MASSAGE, "client_name": "Acme"})
    assert response.status_code == 201
    entry_id = response.json()["entry_id"]
    assert response.json()["result"]["customer_total_cost"] == 1080

    assert client.get(f"/api/history/{entry_id}").status_code == 200
    recalculated = client.post(f"/api/history/{entry_id}/recalculate").json()
    assert recalculated["result"]["net_profit"] == 580
    assert recalculated["updated_at"] is not None

    assert client.delete(f"/api/history/{entry_id}").status_code == 200
    assert client.get(f"/api/history/{entry_id}").status_code == 404


def test_proposal_flow(client):
    response = client.post("/api/proposals", json={"calculator_state": MASSAGE, "client_info": {"name": "Acme"}})
    assert response.status_code == 201
    created = response.json()
    proposal_id, code = created["proposal_id"], created["access_code"]
    assert created["client_summary"]["customer_total_cost"] == 1080

    response = client.get(f"/api/proposals/{proposal_id}", params={"access_code": code})
    assert response.status_code == 200
    assert response.json()["calculator_state"] == MASSAGE
    assert "access_code" not in response.json()

    assert client.get(f"/api/proposals/{proposal_id}", params={"access_code": "bad"}).status_code == 403
    assert client.get("/api/proposals/missing", params={"access_code": code}).status_code == 404

    response = client.put(f"/api/proposals/{proposal_id}",
                          json={"access_code": code, "updates": {"total_hours": 6}})
    assert response.status_code == 200
    assert response.json()["client_summary"]["customer_total_cost"] == 1620

    response = client.put(f"/api/proposals/{proposal_id}",
                          json={"access_code": code, "updates": {"customer_hourly_rate": 1}})
    assert response.status_code == 400


def test_system_status(client):
    data = client.get("/system/status").json()
    assert data["engine_active"] is True
    assert "headshot" in data["service_types"]


def test_request_defaults_follow_settings(client, monkeypatch):
    monkeypatch.setattr(settings_module, "_settings",
                        Settings(default_events_per_year=4, default_retouching_cost=0.0))

    assert CalculationRequest(**HEADSHOT).to_input().retouching_cost_per_appointment == 0.0

    response = client.post("/calculate", json=MASSAGE)
    assert response.status_code == 200
    assert response.json()["annualized_cost"] == 4320

    response = client.post("/calculate/multiple", json={"configurations": [MASSAGE]})
    assert response.json()["annualized_cost"] == 4320


@pytest.mark.parametrize("bad_state", [
    {"days": ["x"]},
    {"days": "x"},
    {"days": [MASSAGE, 5]},
])
def test_proposal_rejects_malformed_state(client, bad_state):
    response = client.post("/api/proposals", json={"calculator_state": bad_state})
    assert response.status_code == 400


def test_rejected_request_is_logged(client, caplog):
    with caplog.at_level("WARNING", logger="wellness_pricing.api.main"):
        client.post("/calculate", json={**MASSAGE, "num_professionals": 0})
    assert any("/calculate rejected" in r.getMessage() for r in caplog.records)
