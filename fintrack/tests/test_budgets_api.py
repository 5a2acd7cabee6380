from datetime import date

import pytest

from fintrack.domains.finance.models.notification_models import Notification
from fintrack.domains.finance.services import budget_service

pytestmark = pytest.mark.integration


def _expense(client, headers, amount, category="Food", day=None):
    return client.post(
        "/api/transactions",
        json={
            "title": "Spend",
            "amount": amount,
            "type": "expense",
            "category": category,
            "date": (day or date.today()).isoformat(),
        },
        headers=headers,
    )


def test_upsert_creates_then_replaces(client, auth_headers):
    first = client.post(
        "/api/budgets", json={"category": "Food", "amount": 300, "year": 2024, "month": 5}, headers=auth_headers
    )
    assert first.status_code == 201
    assert first.get_json()["created"] is True
    budget_id = first.get_json()["budget"]["id"]

    second = client.post(
        "/api/budgets", json={"category": "Food", "amount": 450, "year": 2024, "month": 5}, headers=auth_headers
    )
    assert second.status_code == 200
    body = second.get_json()
    assert body["created"] is False
    assert body["budget"]["id"] == budget_id
    assert body["budget"]["amount"] == 450


def test_budget_usage_counts_only_window_and_category(client, auth_headers):
    client.post(
        "/api/budgets", json={"category": "Food", "amount": 200, "year": 2024, "month": 5}, headers=auth_headers
    )
    _expense(client, auth_headers, 50, day=date(2024, 5, 1))
    _expense(client, auth_headers, 25, day=date(2024, 5, 31))
    _expense(client, auth_headers, 500, day=date(2024, 6, 1))
    _expense(client, auth_headers, 70, category="Transport", day=date(2024, 5, 15))

    items = client.get("/api/budgets?year=2024&month=5", headers=auth_headers).get_json()["items"]
    assert len(items) == 1
    assert items[0]["spent"] == 75
    assert items[0]["remaining"] == 125
    assert items[0]["percentage"] == 37.5
    assert items[0]["exceeded"] is False


def test_percentage_is_capped(client, auth_headers):
    client.post(
        "/api/budgets", json={"category": "Food", "amount": 100, "year": 2024, "month": 5}, headers=auth_headers
    )
    _expense(client, auth_headers, 250, day=date(2024, 5, 2))
    item = client.get("/api/budgets", headers=auth_headers).get_json()["items"][0]
    assert item["percentage"] == 100
    assert item["remaining"] == -150
    assert item["exceeded"] is True


def test_exceeding_budget_raises_one_alert_per_day(client, auth_headers, user):
    client.post("/api/budgets", json={"category": "Food", "amount": 100}, headers=auth_headers)
    _expense(client, auth_headers, 80)
    assert Notification.query.filter_by(user_id=user.id, type="budget_alert").count() == 0

    _expense(client, auth_headers, 40)
    _expense(client, auth_headers, 10)
    alerts = Notification.query.filter_by(user_id=user.id, type="budget_alert").all()
    assert len(alerts) == 1
    assert alerts[0].priority == "high"
    assert alerts[0].extra["spent"] == 120


def test_update_delete_and_ownership(client, auth_headers, other_headers):
    budget_id = client.post(
        "/api/budgets", json={"category": "Bills", "amount": 100}, headers=auth_headers
    ).get_json()["budget"]["id"]

    assert client.put(f"/api/budgets/{budget_id}", json={"amount": 5}, headers=other_headers).status_code == 404
    resp = client.put(f"/api/budgets/{budget_id}", json={"amount": 150}, headers=auth_headers)
    assert resp.get_json()["budget"]["amount"] == 150

    assert client.delete(f"/api/budgets/{budget_id}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/budgets/{budget_id}", headers=auth_headers).status_code == 200
    assert client.get("/api/budgets", headers=auth_headers).get_json()["items"] == []


def test_budget_validation(client, auth_headers):
    resp = client.post("/api/budgets", json={"category": "Food", "amount": -1}, headers=auth_headers)
    assert resp.status_code == 400
    resp = client.post("/api/budgets", json={"category": "Food", "amount": 10, "period": "daily"}, headers=auth_headers)
    assert resp.status_code == 400


def test_monthly_summary(client, auth_headers):
    for category, amount in (("Food", 200), ("Transport", 100)):
        client.post(
            "/api/budgets",
            json={"category": category, "amount": amount, "year": 2024, "month": 5},
            headers=auth_headers,
        )
    _expense(client, auth_headers, 60, day=date(2024, 5, 3))

    summary = client.get("/api/budgets/summary?year=2024&month=5", headers=auth_headers).get_json()["summary"]
    assert summary["totalBudgeted"] == 300
    assert summary["totalSpent"] == 60
    assert summary["totalRemaining"] == 240
    assert summary["percentage"] == 20
    assert {row["category"] for row in summary["budgets"]} == {"Food", "Transport"}

    assert client.get("/api/budgets/summary?month=13", headers=auth_headers).status_code == 400


@pytest.mark.unit
def test_budget_windows():
    assert budget_service.budget_window("monthly", 2024, 12) == (date(2024, 12, 1), date(2025, 1, 1))
    assert budget_service.budget_window("yearly", 2024) == (date(2024, 1, 1), date(2025, 1, 1))
    assert budget_service.budget_window("weekly", 2024, week=2) == (date(2024, 1, 8), date(2024, 1, 15))
    assert budget_service.week_of_year(date(2024, 1, 7)) == 1
    assert budget_service.week_of_year(date(2024, 1, 8)) == 2
