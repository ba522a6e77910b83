"""
Tests for the calculation API endpoints.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(fastapi_app):
    """Create test client."""
    return TestClient(fastapi_app)


# ============================================================================
# IRR / XIRR TESTS
# ============================================================================

class TestRateOfReturnAPI:
    """Test IRR and XIRR endpoints."""

    def test_calculate_irr(self, client):
        """Test IRR endpoint."""
        response = client.post(
            "/api/calculate/irr",
            json={"cash_flows": [-1000, 1200]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["irr"] == pytest.approx(20.0, abs=1e-4)
        assert data["multiple"] == pytest.approx(1.2)
        assert data["profit"] == 200

    def test_calculate_irr_with_budget(self, client):
        response = client.post(
            "/api/calculate/irr",
            json={"cash_flows": [-6, 297, 307], "max_evaluations": 10000},
        )
        assert response.status_code == 200
        assert 4951 <= response.json()["irr"] <= 4952

    def test_calculate_irr_invalid_cash_flows(self, client):
        """Test IRR endpoint with one-sided cash flows."""
        response = client.post(
            "/api/calculate/irr",
            json={"cash_flows": [100, 200, 300]},
        )
        assert response.status_code == 400
        assert "positive" in response.json()["detail"]

    def test_calculate_irr_budget_exceeded(self, client):
        response = client.post(
            "/api/calculate/irr",
            json={"cash_flows": [100, -150], "max_evaluations": 50},
        )
        assert response.status_code == 400

    def test_calculate_xirr(self, client):
        """Test XIRR endpoint."""
        response = client.post(
            "/api/calculate/xirr",
            json={
                "cash_flows": [-1000, -100, 1200],
                "dates": ["2015-12-01", "2016-08-01", "2016-08-19"],
            },
        )
        assert response.status_code == 200
        assert response.json() == {"xirr": 14.11, "converged": True}

    def test_calculate_xirr_with_guess(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={
                "cash_flows": [-10000, 2000, 2500, 3000, 4000],
                "dates": ["2020-01-01", "2020-04-01", "2020-07-01", "2020-10-01", "2021-01-01"],
                "guess": 0.1,
            },
        )
        assert response.status_code == 200
        assert 22 <= response.json()["xirr"] <= 23

    def test_calculate_xirr_no_convergence(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={"cash_flows": [-1000, 1000], "dates": ["2020-01-01", "2020-01-01"]},
        )
        assert response.status_code == 200
        assert response.json() == {"xirr": None, "converged": False}

    def test_calculate_xirr_mismatched_lengths(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={"cash_flows": [-1000, 1200], "dates": ["2020-01-01"]},
        )
        assert response.status_code == 400

    def test_calculate_xirr_bad_date(self, client):
        response = client.post(
            "/api/calculate/xirr",
            json={"cash_flows": [-1000, 1200], "dates": ["2020-01-01", "not-a-date"]},
        )
        assert response.status_code == 422


# ============================================================================
# CLOSED-FORM FORMULA TESTS
# ============================================================================

class TestFormulaAPI:
    """Test NPV, PV, FV, PMT and amortization endpoints."""

    def test_calculate_npv(self, client):
        response = client.post(
            "/api/calculate/npv",
            json={"rate": 10, "cash_flows": [-500000, 200000, 300000, 200000]},
        )
        assert response.status_code == 200
        assert response.json()["npv"] == 80015.03

    def test_calculate_pv(self, client):
        response = client.post(
            "/api/calculate/pv",
            json={"rate": 5, "cash_flow": 100, "num_periods": 5},
        )
        assert response.json()["pv"] == 78.35

    def test_calculate_fv(self, client):
        response = client.post(
            "/api/calculate/fv",
            json={"rate": 0.5, "cash_flow": 1000, "num_periods": 12},
        )
        assert response.json()["fv"] == 1061.68

    def test_calculate_pmt(self, client):
        response = client.post(
            "/api/calculate/pmt",
            json={"rate": 2, "num_payments": 36, "principal": -1000000},
        )
        assert response.json()["pmt"] == 39232.85

    def test_calculate_pmt_invalid(self, client):
        response = client.post(
            "/api/calculate/pmt",
            json={"rate": 2, "num_payments": 0, "principal": 1000},
        )
        assert response.status_code == 400

    def test_calculate_amortization(self, client):
        """Test amortization schedule endpoint."""
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 20000,
                "annual_rate": 7.5,
                "term_months": 60,
                "start_date": "2025-01-01",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["payment"] == 400.76
        assert len(data["schedule"]) == 60
        assert data["schedule"][0]["date"] == "2025-01-01"
        assert data["total_principal"] == pytest.approx(20000, abs=0.5)


# ============================================================================
# HEALTH CHECK TESTS
# ============================================================================

class TestHealthCheck:
    """Test health check endpoint."""

    def test_health_check(self, client):
        """Test health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
