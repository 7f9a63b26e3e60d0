"""Integration tests for /v1/analytics"""

import pytest
from fastapi.testclient import TestClient


def _post(client: TestClient, amount: float, category: str, type: str, transaction_date: str, user_id: str = "user_1"):
    response = client.post(
        "/v1/transactions",
        json={
            "user_id": user_id,
            "amount": amount,
            "category": category,
            "type": type,
            "transaction_date": transaction_date,
        },
    )
    assert response.status_code == 201, response.text


@pytest.fixture
def seeded(client: TestClient) -> TestClient:
    """Three months of activity ending in January 2024"""
    _post(client, 3000000, "salary", "income", "2024-01-05")
    _post(client, 30000, "food", "expense", "2024-01-03")
    _post(client, 20000, "food", "expense", "2024-01-10")
    _post(client, 800000, "rent", "expense", "2024-01-10")
    _post(client, 5000, "coffee", "expense", "2023-12-20")
    _post(client, 100000, "food", "expense", "2023-11-02")
    _post(client, 999999, "food", "expense", "2024-01-04", user_id="user_2")
    return client


def test_summary_of_current_month(seeded: TestClient):
    response = seeded.get("/v1/analytics/summary", params={"user_id": "user_1"})

    assert response.status_code == 200
    data = response.json()
    assert data["month"] == "2024-01"
    assert data["period_start"] == "2024-01-01"
    assert data["period_end"] == "2024-01-31"
    assert data["total_income"] == 3000000
    assert data["total_expenses"] == 850000
    assert data["net"] == 2150000
    assert data["savings_rate"] == pytest.approx(71.67)
    assert data["transaction_count"] == 4
    assert data["top_category"] == "rent"
    assert data["top_category_name"] == "Rent"


def test_summary_of_selected_month(seeded: TestClient):
    data = seeded.get("/v1/analytics/summary", params={"user_id": "user_1", "month": "2023-12"}).json()

    assert data["net"] == -5000
    assert data["savings_rate"] == 0.0
    assert data["top_category"] == "coffee"


def test_summary_of_empty_month(client: TestClient):
    data = client.get("/v1/analytics/summary", params={"user_id": "user_1"}).json()

    assert data["transaction_count"] == 0
    assert data["top_category"] is None
    assert data["top_category_name"] is None


def test_category_breakdown(seeded: TestClient):
    response = seeded.get("/v1/analytics/breakdown", params={"user_id": "user_1"})

    assert response.status_code == 200
    data = response.json()
    assert data["total_expenses"] == 850000
    assert [c["category"] for c in data["categories"]] == ["rent", "food"]
    assert [c["percentage"] for c in data["categories"]] == [94.12, 5.88]
    assert data["categories"][1]["transaction_count"] == 2
    assert data["categories"][1]["amount"] == 50000


def test_spending_trend(seeded: TestClient):
    response = seeded.get("/v1/analytics/trends", params={"user_id": "user_1", "months": 3})

    assert response.status_code == 200
    data = response.json()
    assert [m["month"] for m in data["months"]] == ["2023-11", "2023-12", "2024-01"]
    assert [m["total_expenses"] for m in data["months"]] == [100000, 5000, 850000]
    assert data["average_monthly_expense"] == pytest.approx(318333.33)


def test_spending_trend_default_window(seeded: TestClient):
    data = seeded.get("/v1/analytics/trends", params={"user_id": "user_1"}).json()

    assert len(data["months"]) == 6
    assert data["months"][0]["month"] == "2023-08"
    assert data["months"][0]["total_expenses"] == 0


def test_analytics_parameter_validation(client: TestClient):
    assert client.get("/v1/analytics/summary", params={"user_id": "user_1", "month": "2024-13"}).status_code == 422
    assert client.get("/v1/analytics/breakdown", params={"user_id": "user_1", "month": "January"}).status_code == 422
    assert client.get("/v1/analytics/trends", params={"user_id": "user_1", "months": 0}).status_code == 422
    assert client.get("/v1/analytics/summary").status_code == 422
