"""Integration tests for /v1/budgets"""

from fastapi.testclient import TestClient


def _put_budget(client: TestClient, **overrides):
    payload = {"user_id": "user_1", "category": "food", "limit": 100000}
    payload.update(overrides)
    return client.put("/v1/budgets", json=payload)


def test_create_budget_with_defaults(client: TestClient):
    """Omitted threshold and currency come from configuration"""
    response = _put_budget(client)

    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "food"
    assert data["category_name"] == "Food"
    assert data["limit"] == 100000
    assert data["spent"] == 0
    assert data["remaining"] == 100000
    assert data["percentage_used"] == 0.0
    assert data["warning_threshold"] == 80.0
    assert data["currency"] == "KRW"
    assert data["status"] == "safe"
    assert data["is_over_budget"] is False
    assert data["period_start"] == "2024-01-01"
    assert data["period_end"] == "2024-01-31"


def test_upsert_replaces_existing_budget(client: TestClient):
    _put_budget(client)
    response = _put_budget(client, limit=50000, warning_threshold=60, currency="USD")

    assert response.status_code == 200
    assert response.json()["limit"] == 50000
    assert response.json()["warning_threshold"] == 60
    assert response.json()["currency"] == "USD"

    budgets = client.get("/v1/budgets", params={"user_id": "user_1"}).json()["budgets"]
    assert len(budgets) == 1


def test_budget_rejects_income_category(client: TestClient):
    response = _put_budget(client, category="salary")
    assert response.status_code == 422
    assert "expense categories" in response.json()["detail"]


def test_budget_rejects_unknown_category(client: TestClient):
    assert _put_budget(client, category="mystery").status_code == 422


def test_budget_rejects_unsupported_currency(client: TestClient):
    response = _put_budget(client, currency="XYZ")
    assert response.status_code == 422
    assert response.json()["detail"] == "Unsupported currency: XYZ"


def test_budget_validation(client: TestClient):
    """Limit must be positive and the threshold a percentage"""
    assert _put_budget(client, limit=0).status_code == 422
    assert _put_budget(client, warning_threshold=150).status_code == 422


def test_get_budget_reflects_monthly_spend(client: TestClient):
    _put_budget(client)
    client.post(
        "/v1/transactions",
        json={"user_id": "user_1", "amount": 120000, "category": "food", "type": "expense"},
    )

    response = client.get("/v1/budgets/food", params={"user_id": "user_1"})

    assert response.status_code == 200
    data = response.json()
    assert data["spent"] == 120000
    assert data["remaining"] == 0
    assert data["percentage_used"] == 120.0
    assert data["status"] == "danger"
    assert data["is_over_budget"] is True


def test_get_missing_budget(client: TestClient):
    response = client.get("/v1/budgets/coffee", params={"user_id": "user_1"})
    assert response.status_code == 404


def test_list_budgets_with_summary(client: TestClient):
    _put_budget(client, category="food", limit=100000)
    _put_budget(client, category="coffee", limit=20000)
    for category, amount in (("food", 50000), ("coffee", 25000)):
        client.post(
            "/v1/transactions",
            json={"user_id": "user_1", "amount": amount, "category": category, "type": "expense"},
        )

    response = client.get("/v1/budgets", params={"user_id": "user_1"})

    assert response.status_code == 200
    data = response.json()
    assert [b["category"] for b in data["budgets"]] == ["coffee", "food"]
    summary = data["summary"]
    assert summary["total_budget"] == 120000
    assert summary["total_spent"] == 75000
    assert summary["total_remaining"] == 45000
    assert summary["overall_percentage"] == 62.5
    assert summary["over_budget_count"] == 1
    assert summary["budget_count"] == 2


def test_delete_budget(client: TestClient):
    _put_budget(client)

    response = client.delete("/v1/budgets/food", params={"user_id": "user_1"})
    assert response.status_code == 204

    assert client.get("/v1/budgets/food", params={"user_id": "user_1"}).status_code == 404
    assert client.delete("/v1/budgets/food", params={"user_id": "user_1"}).status_code == 404
