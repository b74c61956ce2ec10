"""Integration tests for API endpoints."""
import pytest
from fastapi.testclient import TestClient
import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chemformula.api.main import app
from chemformula.config import settings

client = TestClient(app)


class TestAPIEndpoints:
    """Test cases for API endpoints."""

    def test_root_endpoint(self):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "version" in data

    def test_health_check(self):
        """Test health check endpoint."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data

    def test_elements(self):
        """Test the supported element listing."""
        response = client.get("/api/v1/elements")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 118
        assert data[0]["symbol"] == "H"
        assert data[0]["atomic_number"] == 1
        assert data[0]["atomic_weight"] == pytest.approx(1.008, abs=1e-3)

    def test_convert_endpoint(self):
        """Test converting a supported catalyst."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "Pt5wt%/SiO2"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["composition"] == {"molar": {"Si": 1.0, "O": 2.0}, "mass_fraction": {"Pt": 5.0}}
        assert data["weight_percent"]["Pt"] == pytest.approx(5.0)
        assert data["weight_percent"]["Si"] == pytest.approx(44.41, abs=0.01)
        assert data["molecular_weight"] == pytest.approx(60.08 / 0.95, abs=0.01)
        assert data["view_errors"] is None

    def test_convert_selected_views(self):
        """Test only requested views are filled."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "SiO2", "views": ["molar"]}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["molar"] == {"Si": 1.0, "O": 2.0}
        assert data["weight_percent"] is None

    def test_convert_composite_view_errors(self):
        """Test views without molar scale are reported per view."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "(Pt5wt%/SiO2)50wt%(CeO2)50wt%"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["weight_percent"]["Pt"] == pytest.approx(2.5)
        assert data["molar"] is None
        assert "molar" in data["view_errors"]

    def test_convert_invalid_formula(self):
        """Test conversion with a malformed formula."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "InvalidFormula@#$"}
        )
        assert response.status_code == 422  # Validation error

    def test_convert_empty_formula(self):
        """Test conversion with empty formula."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": ""}
        )
        assert response.status_code == 422

    def test_convert_unknown_view(self):
        """Test conversion with an unknown view."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "SiO2", "views": ["density"]}
        )
        assert response.status_code == 422

    def test_convert_unknown_element(self):
        """Test unknown elements are rejected in strict mode."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "XxO2"}
        )
        assert response.status_code == 400
        assert "Unsupported element: Xx" in response.json()["detail"]

    def test_convert_unknown_element_lenient(self):
        """Test unknown elements map to NONE in lenient mode."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "XxO2", "views": ["molar"], "strict_elements": False}
        )
        assert response.status_code == 200
        assert response.json()["molar"] == {"NONE": 1.0, "O": 2.0}

    def test_convert_overflow(self):
        """Test an overflowing nested group is rejected."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "(Pt60wt%Pd50wt%/SiO2)50wt%"}
        )
        assert response.status_code == 400
        assert "overflow" in response.json()["detail"]

    def test_convert_deep_nesting(self):
        """Test deeply nested formulas are rejected as bad requests."""
        response = client.post(
            "/api/v1/convert",
            json={"formula": "(" * 500 + "H" + ")" * 500}
        )
        assert response.status_code == 400
        assert "nested too deeply" in response.json()["detail"]

    def test_batch_convert(self):
        """Test batch conversion reports failures per formula."""
        response = client.post(
            "/api/v1/batch-convert",
            json={"formulas": ["SiO2", "XxO2", "Fe2O3"], "views": ["molar"]}
        )
        assert response.status_code == 200
        results = response.json()["results"]
        assert [result["success"] for result in results] == [True, False, True]
        assert results[1]["error_type"] == "UnrecognizedElementError"

    def test_batch_convert_empty(self):
        """Test batch conversion without formulas."""
        response = client.post(
            "/api/v1/batch-convert",
            json={"formulas": []}
        )
        assert response.status_code == 422

    def test_batch_convert_too_many(self):
        """Test batch conversion over the size limit."""
        response = client.post(
            "/api/v1/batch-convert",
            json={"formulas": ["SiO2"] * (settings.max_batch_size + 1)}
        )
        assert response.status_code == 422
