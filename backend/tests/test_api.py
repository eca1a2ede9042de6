"""
PregnancyForecast API tests.

Exercises the FastAPI routes through TestClient.
Run with: pytest backend/tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

import app as api
from pregnancy_forecast.config.settings import Settings


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(api.app)


@pytest.fixture
def seeded(monkeypatch):
    """Pin projection jitter to a fixed seed."""
    monkeypatch.setattr(api, "settings", Settings(projection_seed=11))


class TestHealthEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        data = client.get("/api/v1/health").json()
        assert data["status"] == "ok"
        assert data["engine"] == "rule-based"


class TestOngoingProgression:

    def test_personalized_prediction_with_averages(self, client, high_risk_visits, high_risk_patient):
        response = client.post("/api/v1/ongoing-progression",
                               json={"visits": high_risk_visits, "patient": high_risk_patient})
        assert response.status_code == 200
        data = response.json()

        assert data["success"] is True
        assert "isFallback" not in data
        assert data["deliveryMode"] == {"Normal": 0.3, "CSection": 0.7}
        assert data["metadata"]["source"] == "rule-based-engine"
        assert set(data["averages"]) == {
            "averageWeight", "averageFundal", "averageHemoglobin", "averageBloodPressure"
        }
        # Obese reference table
        assert data["averages"]["averageWeight"][0]["AVG_WEIGHT"] == 75

    def test_empty_request_returns_fallback(self, client):
        data = client.post("/api/v1/ongoing-progression", json={}).json()
        assert data["success"] is True
        assert data["isFallback"] is True
        assert data["expectedBirthWeight"] == 3.2
        assert len(data["progression"]["weight"]) == 28
        assert data["averages"]["averageWeight"][0]["AVG_WEIGHT"] == 55

    def test_past_term_request(self, client):
        data = client.post("/api/v1/ongoing-progression",
                           json={"visits": [{"GESTATIONAL_AGE_WEEKS": 41}], "patient": {}}).json()
        assert data["isFallback"] is True
        assert data["progression"] == {}

    def test_engine_failure_returns_fallback_with_error(self, client, monkeypatch, low_risk_visit):
        def explode(*args, **kwargs):
            raise RuntimeError("engine exploded")

        monkeypatch.setattr(api, "generate_prediction", explode)
        response = client.post("/api/v1/ongoing-progression",
                               json={"visits": [low_risk_visit], "patient": {}})

        assert response.status_code == 200
        data = response.json()
        assert data["isFallback"] is True
        assert data["error"] == "engine exploded"
        assert data["averages"]["averageWeight"] == []

    def test_fixed_seed_is_reproducible(self, client, seeded, high_risk_visits):
        body = {"visits": high_risk_visits, "patient": {}}
        first = client.post("/api/v1/ongoing-progression", json=body).json()
        second = client.post("/api/v1/ongoing-progression", json=body).json()
        assert first["progression"] == second["progression"]

    def test_request_derived_seed_is_reproducible(self, client, monkeypatch, high_risk_visits):
        monkeypatch.setattr(api, "settings", Settings(deterministic_projection=True))
        body = {"visits": high_risk_visits, "patient": {"AGE": 30}}
        first = client.post("/api/v1/ongoing-progression", json=body).json()
        second = client.post("/api/v1/ongoing-progression", json=body).json()
        assert first["progression"] == second["progression"]

    def test_malformed_body_is_rejected(self, client):
        response = client.post("/api/v1/ongoing-progression", json={"visits": "not-a-list"})
        assert response.status_code == 422


class TestReferenceEndpoints:

    def test_bmi_averages(self, client):
        data = client.get("/api/v1/bmi-averages/Underweight").json()
        assert data["averageWeight"][0] == {"GESTATIONAL_AGE_WEEKS": 10, "AVG_WEIGHT": 50}

    def test_unknown_bmi_status_uses_normal(self, client):
        data = client.get("/api/v1/bmi-averages/Unknown").json()
        assert data["averageWeight"][0]["AVG_WEIGHT"] == 55

    def test_bmi_deviation(self, client):
        response = client.post("/api/v1/bmi-deviation", json={
            "bmiStatus": "Normal",
            "metric": "weight",
            "patientSeries": [
                {"GESTATIONAL_AGE_WEEKS": 10, "MATERNAL_WEIGHT": 60},
                {"GESTATIONAL_AGE_WEEKS": 12, "MATERNAL_WEIGHT": 0},
            ],
        })
        assert response.status_code == 200
        deviations = response.json()["deviations"]
        assert len(deviations) == 1
        assert deviations[0]["deviation"] == 5

    def test_bmi_deviation_unknown_metric(self, client):
        response = client.post("/api/v1/bmi-deviation",
                               json={"metric": "height", "patientSeries": []})
        assert response.status_code == 400


class TestSeedDerivation:

    def test_derive_seed_is_stable(self):
        body = {"visits": [{"GESTATIONAL_AGE_WEEKS": 20}], "patient": {}}
        assert api.derive_seed(body) == api.derive_seed(dict(body))

    def test_derive_seed_depends_on_content(self):
        assert api.derive_seed({"visits": [1]}) != api.derive_seed({"visits": [2]})


class TestRequestModels:

    def test_schema_examples_are_published(self, client):
        schemas = client.get("/openapi.json").json()["components"]["schemas"]
        assert schemas["ProgressionRequest"]["example"]["patient"]["PATIENT_ID"] == "P-0042"
        assert schemas["DeviationRequest"]["example"]["metric"] == "weight"

    def test_deviation_request_accepts_field_names(self):
        request = api.DeviationRequest(patient_series=[{"MATERNAL_WEIGHT": 60}], bmi_status="Obese", metric="weight")
        assert request.bmi_status == "Obese"
        assert len(request.patient_series) == 1
