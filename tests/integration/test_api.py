"""
Integration Tests for the FastAPI Application

Tests for API endpoints: assessment, differentials, reference catalogues,
health checks.  Uses async httpx for ASGI app testing.
"""
import pytest
import httpx

from resus.main import app


@pytest.fixture
async def async_client():
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert response.json()["uptime_seconds"] >= 0


@pytest.mark.asyncio
class TestAssessmentEndpoint:
    """Tests for the full assessment pipeline."""

    async def test_dka_assessment(self, async_client, scenario_payloads):
        response = await async_client.post("/api/v1/assessments/analyze", json=scenario_payloads["dka"])
        assert response.status_code == 200

        data = response.json()
        assert data["top_differential"]["id"] == "dka"
        assert data["bundled"] is True
        assert data["immediate_interventions"][0]["id"] == "dka_fluid_bolus"
        assert data["protocol_recommendation"] == "dka"

    async def test_sepsis_dka_assessment(self, async_client, scenario_payloads):
        response = await async_client.post(
            "/api/v1/assessments/analyze", json=scenario_payloads["sepsis_dka"]
        )
        assert response.status_code == 200

        data = response.json()
        assert [i["id"] for i in data["immediate_interventions"]][:2] == [
            "sepsis_dka_integrated", "sepsis_fluid_bolus",
        ]
        assert data["dangerous_overlaps"][0]["name"] == "Sepsis + DKA"
        assert data["conflict_resolutions"] == ["Fluids first (shock takes priority), then insulin (DKA)"]

    async def test_eclampsia_assessment(self, async_client, scenario_payloads):
        response = await async_client.post(
            "/api/v1/assessments/analyze", json=scenario_payloads["eclampsia"]
        )
        assert response.status_code == 200

        names = [i["name"] for i in response.json()["immediate_interventions"]]
        assert any(name.startswith("Magnesium Sulfate Loading: 2800 mg") for name in names)

    async def test_no_differential(self, async_client, scenario_payloads):
        """A well patient is a 422 with a machine-readable code, never a partial result."""
        response = await async_client.post(
            "/api/v1/assessments/analyze", json=scenario_payloads["well_child"]
        )
        assert response.status_code == 422

        data = response.json()
        assert data["error"] == "NO_DIFFERENTIAL"
        assert data["details"]["threshold"] == 0.3

    async def test_invalid_payload(self, async_client, payload_factory):
        payload = payload_factory(disability={"avpu": "drowsy"})
        response = await async_client.post("/api/v1/assessments/analyze", json=payload)
        assert response.status_code == 422
        assert "detail" in response.json()

    async def test_missing_required_section(self, async_client, payload_factory):
        payload = payload_factory()
        del payload["breathing"]
        response = await async_client.post("/api/v1/assessments/analyze", json=payload)
        assert response.status_code == 422


@pytest.mark.asyncio
class TestDifferentialsEndpoint:
    """Tests for ranked differentials only."""

    async def test_hypoglycemia(self, async_client, scenario_payloads):
        response = await async_client.post("/api/v1/differentials", json=scenario_payloads["hypoglycemia"])
        assert response.status_code == 200

        data = response.json()
        assert data["top"] == "hypoglycemia"
        assert data["total"] == len(data["differentials"])

    async def test_empty_list_is_valid(self, async_client, scenario_payloads):
        response = await async_client.post("/api/v1/differentials", json=scenario_payloads["well_child"])
        assert response.status_code == 200
        assert response.json() == {
            "total": 0, "top": None, "immediate_threat_count": 0, "differentials": [],
        }


@pytest.mark.asyncio
class TestReferenceEndpoints:
    """Tests for catalogue listings."""

    async def test_list_diagnoses(self, async_client):
        response = await async_client.get("/api/v1/diagnoses")
        assert response.status_code == 200

        diagnoses = {d["id"]: d for d in response.json()["diagnoses"]}
        assert len(diagnoses) == 31
        assert diagnoses["dka"]["bundled"] is True
        assert diagnoses["croup"]["bundled"] is False
        assert diagnoses["eclampsia"]["patient_types"] == ["pregnant_postpartum"]
        assert diagnoses["dka"]["patient_types"] is None

    async def test_list_overlaps(self, async_client):
        response = await async_client.get("/api/v1/overlaps")
        assert response.status_code == 200

        data = response.json()
        assert data["threshold"] == 0.6
        assert len(data["overlaps"]) == 7
