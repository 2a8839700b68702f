"""
Tests for FastAPI endpoints.

Uses TestClient to test API endpoints without running a server.
"""

import pytest
from fastapi.testclient import TestClient

from cranksmith.api.server import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def example_input(road_setup):
    """Road setup as a JSON body."""
    return road_setup.model_dump(mode="json")


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestExampleEndpoint:
    """Tests for /example endpoint."""

    def test_example_returns_valid_setup(self, client):
        """The example setup can be posted straight back for analysis."""
        response = client.get("/example")

        assert response.status_code == 200
        data = response.json()
        assert data["crankset"]["component_type"] == "crankset"
        assert data["crankset"]["chainrings"] == [50, 34]

        analyze = client.post("/analyze", json=data)
        assert analyze.status_code == 200
        assert analyze.json()["total_gears"] == 22


class TestCompatibilityEndpoint:
    """Tests for /compatibility endpoint."""

    def test_compatible_setup(self, client, example_input):
        response = client.post("/compatibility", json=example_input)

        assert response.status_code == 200
        data = response.json()
        assert data["compatible"] is True
        assert data["warnings"] == []
        assert len(data["notes"]) > 0

    def test_incompatible_setup(self, client, example_input):
        example_input["shifter_brand"] = "campagnolo"
        response = client.post("/compatibility", json=example_input)

        assert response.status_code == 200
        data = response.json()
        assert data["compatible"] is False
        assert data["warnings"][0]["severity"] == "critical"
        assert data["warnings"][0]["component"] == "rear_derailleur"

    def test_missing_component_rejected(self, client, example_input):
        del example_input["chain"]
        response = client.post("/compatibility", json=example_input)
        assert response.status_code == 422


class TestAnalyzeEndpoint:
    """Tests for /analyze endpoint."""

    def test_analyze_returns_gears(self, client, example_input):
        response = client.post("/analyze", json=example_input)

        assert response.status_code == 200
        data = response.json()
        assert data["total_gears"] == 22
        assert len(data["gears"]) == 22
        assert data["speed_unit"] == "km/h"
        assert data["compatibility"]["compatible"] is True

        first = data["gears"][0]
        assert first["chainring"] == 50
        assert first["cog"] == 11
        assert first["ratio"] == pytest.approx(50 / 11)
        assert set(first["speed_at_cadence"]) == {"rpm60", "rpm80", "rpm90", "rpm100", "rpm120"}

    def test_analyze_in_mph(self, client, example_input):
        kmh = client.post("/analyze", json=example_input).json()
        mph = client.post("/analyze", params={"speed_unit": "mph"}, json=example_input).json()

        assert mph["speed_unit"] == "mph"
        assert mph["gears"][0]["speed_at_cadence"]["rpm90"] == pytest.approx(
            kmh["gears"][0]["speed_at_cadence"]["rpm90"] / 1.609344
        )

    def test_zero_tooth_cog_rejected(self, client, example_input):
        example_input["cassette"]["cogs"][0] = 0
        response = client.post("/analyze", json=example_input)
        assert response.status_code == 422

    def test_front_derailleur_on_single_ring_rejected(self, client, eagle_setup, road_front_derailleur):
        body = eagle_setup.model_dump(mode="json")
        body["front_derailleur"] = road_front_derailleur.model_dump(mode="json")
        response = client.post("/analyze", json=body)
        assert response.status_code == 422


class TestSuggestGearEndpoint:
    """Tests for /suggest-gear endpoint."""

    def test_suggests_efficient_gear(self, client, example_input):
        response = client.post("/suggest-gear", params={"target_speed": 30}, json=example_input)

        assert response.status_code == 200
        data = response.json()
        gear = data["gear"]
        assert data["label"] == f"{gear['chainring']}x{gear['cog']}"
        assert gear["efficiency"] > 0.975

    def test_target_speed_required(self, client, example_input):
        response = client.post("/suggest-gear", json=example_input)
        assert response.status_code == 422

    def test_non_positive_speed_rejected(self, client, example_input):
        response = client.post("/suggest-gear", params={"target_speed": 0}, json=example_input)
        assert response.status_code == 422


class TestIdealChainlineEndpoint:
    """Tests for /ideal-chainline endpoint."""

    def test_boost_hub(self, client):
        response = client.get("/ideal-chainline", params={"speeds": 12, "hub_spacing_mm": 148})

        assert response.status_code == 200
        data = response.json()
        assert data["front_chain_line_mm"] == 52.0
        assert "12-speed cassette" in data["reasoning"]


class TestReferenceEndpoints:
    """Tests for /bike-types and /catalog."""

    def test_bike_types(self, client):
        response = client.get("/bike-types")

        assert response.status_code == 200
        data = response.json()
        assert "road" in data["bike_types"]
        assert data["standard_chain_line_mm"]["mtb"] == 52.0
        assert data["chainstay_length_mm"]["hybrid"] == 410.0

    def test_catalog(self, client):
        response = client.get("/catalog")

        assert response.status_code == 200
        data = response.json()
        assert len(data) > 0
        assert all("component_type" in c for c in data)

    def test_catalog_by_kind(self, client):
        response = client.get("/catalog", params={"kind": "cassette"})

        assert response.status_code == 200
        data = response.json()
        assert len(data) > 0
        assert {c["component_type"] for c in data} == {"cassette"}

    def test_catalog_unknown_kind(self, client):
        response = client.get("/catalog", params={"kind": "saddle"})
        assert response.status_code == 422
