import pytest

pytestmark = pytest.mark.integration


def _add(client, headers, amount, txn_type, day):
    client.post(
        "/api/transactions",
        json={"title": "Entry", "amount": amount, "type": txn_type, "category": "Other", "date": day},
        headers=headers,
    )


def test_forecast_uses_history_and_balance_as_of(client, auth_headers):
    _add(client, auth_headers, 1000, "income", "2024-01-15")
    _add(client, auth_headers, 2000, "income", "2024-02-15")
    _add(client, auth_headers, 3000, "income", "2024-03-15")

    resp = client.post("/api/finance/forecast", json={"forecastPeriod": 2, "asOf": "2024-03-31"}, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["currentBalance"] == 6000
    assert body["averageMonthlyIncome"] == 2000
    assert body["averageMonthlyExpense"] == 0
    assert body["trends"] == {"incomeTrend": 1000, "expenseTrend": 0, "savingsRate": 100}
    assert body["projections"] == [
        {"period": 1, "projectedIncome": 2150, "projectedExpense": 0, "projectedBalance": 8150},
        {"period": 2, "projectedIncome": 2300, "projectedExpense": 0, "projectedBalance": 10450},
    ]


def test_forecast_ignores_transactions_outside_lookback(client, auth_headers):
    _add(client, auth_headers, 900, "expense", "2023-01-10")
    _add(client, auth_headers, 1000, "income", "2024-03-10")

    body = client.post(
        "/api/finance/forecast", json={"forecastPeriod": 1, "asOf": "2024-03-31"}, headers=auth_headers
    ).get_json()
    assert body["currentBalance"] == 100
    assert body["averageMonthlyExpense"] == 0
    assert body["projections"][0]["projectedBalance"] == 1100


def test_forecast_ignores_transactions_after_as_of(client, auth_headers):
    _add(client, auth_headers, 1000, "income", "2024-03-10")
    _add(client, auth_headers, 50000, "income", "2024-09-10")
    _add(client, auth_headers, 700, "expense", "2024-04-01")

    body = client.post(
        "/api/finance/forecast", json={"forecastPeriod": 1, "asOf": "2024-03-31"}, headers=auth_headers
    ).get_json()
    assert body["currentBalance"] == 1000
    assert body["averageMonthlyIncome"] == 1000
    assert body["averageMonthlyExpense"] == 0
    assert body["trends"]["incomeTrend"] == 0
    assert body["projections"] == [
        {"period": 1, "projectedIncome": 1000, "projectedExpense": 0, "projectedBalance": 2000},
    ]


def test_forecast_defaults_to_six_periods(client, auth_headers):
    body = client.post("/api/finance/forecast", json={}, headers=auth_headers).get_json()
    assert [p["period"] for p in body["projections"]] == [1, 2, 3, 4, 5, 6]
    assert body["projections"][-1]["projectedBalance"] == 0


@pytest.mark.parametrize("period", [0, -3, 37, "six"])
def test_forecast_rejects_bad_periods(client, auth_headers, period):
    resp = client.post("/api/finance/forecast", json={"forecastPeriod": period}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_forecast_requires_token(client):
    assert client.post("/api/finance/forecast", json={}).status_code == 401
