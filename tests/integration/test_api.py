"""Integration tests for service endpoints and plan preview"""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "clinic_plans_created_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_preview_credit_card_plan(client: TestClient):
    """Friday 2024-03-01, 300.00 in 3x: first due date moves off the Sunday"""
    response = client.post(
        "/v1/schedule/preview",
        json={"procedure_date": "2024-03-01", "total_value": "300.00", "installments": 3},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["payment_method"] == "credit_card"
    assert [i["due_date"] for i in data["installments"]] == ["2024-04-01", "2024-05-01", "2024-05-31"]
    assert data["installments"][0]["due_at"] == "2024-04-01T12:00:00-03:00"
    assert [i["amount"] for i in data["installments"]] == ["100.00", "100.00", "100.00"]
    assert data["installments"][0]["amount_display"] == "R$ 100,00"
    assert all(i["status"] == "pending" for i in data["installments"])
    assert data["drift"] == "0.00"


def test_preview_reports_rounding_drift(client: TestClient):
    response = client.post(
        "/v1/schedule/preview",
        json={"procedure_date": "2024-03-01", "total_value": "100.00", "installments": 3},
    )

    data = response.json()
    assert [i["amount"] for i in data["installments"]] == ["33.33", "33.33", "33.33"]
    assert data["drift"] == "0.01"


def test_preview_pix_ignores_installment_count(client: TestClient):
    response = client.post(
        "/v1/schedule/preview",
        json={
            "procedure_date": "2024-03-02",
            "total_value": "250.00",
            "installments": 5,
            "payment_method": "pix",
        },
    )

    data = response.json()
    assert len(data["installments"]) == 1
    assert data["installments"][0]["amount"] == "250.00"
    assert data["installments"][0]["status"] == "paid"
    assert data["installments"][0]["due_date"] == "2024-03-02"


def test_preview_rejects_invalid_input(client: TestClient):
    for body in (
        {"procedure_date": "2024-03-01", "total_value": "100.00", "installments": 0},
        {"procedure_date": "2024-03-01", "total_value": "-1.00", "installments": 1},
        {"procedure_date": "2024-02-30", "total_value": "100.00", "installments": 1},
        {"procedure_date": "2024-03-01", "total_value": "100.00", "payment_method": "boleto"},
    ):
        response = client.post("/v1/schedule/preview", json=body)
        assert response.status_code == 422, body


def test_preview_rejects_plan_past_calendar_end(client: TestClient):
    for body in (
        {"procedure_date": "2024-03-01", "total_value": "1.00", "installments": 200000},
        {"procedure_date": "9999-12-15", "total_value": "100.00", "installments": 1},
    ):
        response = client.post("/v1/schedule/preview", json=body)
        assert response.status_code == 422, body
