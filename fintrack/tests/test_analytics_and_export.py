import csv
import io
from datetime import date

import pytest

from fintrack.domains.finance.services import analytics_service

pytestmark = pytest.mark.integration


def _add(client, headers, title, amount, txn_type="expense", category="Food", day="2024-05-10", reference=None):
    payload = {"title": title, "amount": amount, "type": txn_type, "category": category, "date": day}
    if reference:
        payload["reference"] = reference
    resp = client.post("/api/transactions", json=payload, headers=headers)
    assert resp.status_code == 201
    return resp.get_json()["transaction"]


def test_year_over_year(client, auth_headers):
    _add(client, auth_headers, "Pay", 1000, "income", "Salary", "2024-03-01")
    _add(client, auth_headers, "Lunch", 20, day="2024-03-02")
    _add(client, auth_headers, "Old", 50, day="2023-07-01")

    body = client.get("/api/analytics/year-over-year?year=2024", headers=auth_headers).get_json()
    assert body["currentYear"]["year"] == 2024
    assert body["currentYear"]["total"] == 1020
    assert {(m["month"], m["type"]) for m in body["currentYear"]["months"]} == {(3, "income"), (3, "expense")}
    assert body["previousYear"]["months"] == [{"month": 7, "type": "expense", "total": 50, "count": 1}]

    assert client.get("/api/analytics/year-over-year?year=abc", headers=auth_headers).status_code == 400


def test_custom_range(client, auth_headers):
    _add(client, auth_headers, "Pay", 1000, "income", "Salary", "2024-05-01")
    _add(client, auth_headers, "Lunch", 20, day="2024-05-02")
    _add(client, auth_headers, "Dinner", 30, day="2024-05-03")
    _add(client, auth_headers, "Outside", 99, day="2024-06-01")

    resp = client.get("/api/analytics/custom-range?startDate=2024-05-01&endDate=2024-05-31", headers=auth_headers)
    report = resp.get_json()["report"]
    assert report["summary"] == {
        "income": 1000,
        "expense": 50,
        "balance": 950,
        "incomeCount": 1,
        "expenseCount": 2,
    }
    assert report["categories"][0] == {"category": "Salary", "type": "income", "total": 1000, "count": 1}

    bad = client.get("/api/analytics/custom-range?startDate=2024-05-31&endDate=2024-05-01", headers=auth_headers)
    assert bad.status_code == 400
    missing = client.get("/api/analytics/custom-range?startDate=2024-05-31", headers=auth_headers)
    assert missing.status_code == 400


def test_trends_group_expenses_by_month_and_category(client, auth_headers):
    today = date.today().isoformat()
    _add(client, auth_headers, "Lunch", 20, day=today)
    _add(client, auth_headers, "Dinner", 30, day=today)
    _add(client, auth_headers, "Pay", 500, "income", "Salary", today)

    trends = client.get("/api/analytics/trends?months=3", headers=auth_headers).get_json()["trends"]
    assert len(trends) == 1
    assert trends[0]["category"] == "Food"
    assert trends[0]["total"] == 50
    assert trends[0]["count"] == 2

    assert client.get("/api/analytics/trends?months=0", headers=auth_headers).status_code == 400


def test_projections_are_straight_line(client, auth_headers):
    today = date.today().isoformat()
    _add(client, auth_headers, "Pay", 600, "income", "Salary", today)
    _add(client, auth_headers, "Rent", 300, day=today)

    body = client.get("/api/analytics/projections?months=2", headers=auth_headers).get_json()
    assert body["currentBalance"] == 300
    assert body["averageMonthlyIncome"] == 600
    assert body["averageMonthlyExpense"] == 300
    assert body["projections"] == [
        {"month": 1, "projectedIncome": 900, "projectedExpense": 300, "projectedBalance": 600},
        {"month": 2, "projectedIncome": 1500, "projectedExpense": 600, "projectedBalance": 900},
    ]


def test_linear_projections_with_no_history(app, user):
    result = analytics_service.linear_projections(user.id, months=1, as_of=date(2024, 5, 1))
    assert result["projections"] == [
        {"month": 1, "projectedIncome": 0, "projectedExpense": 0, "projectedBalance": 0}
    ]


def test_csv_export(client, auth_headers):
    _add(client, auth_headers, "Pay", 1000, "income", "Salary", "2024-05-01", reference="May")
    _add(client, auth_headers, "Lunch, with friends", 20.5, day="2024-05-02")

    resp = client.get("/api/transactions/export/csv", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
    assert rows[0] == ["Date", "Type", "Category", "Title", "Amount", "Reference"]
    assert rows[1] == ["2024-05-02", "expense", "Food", "Lunch, with friends", "20.50", ""]
    assert rows[2] == ["2024-05-01", "income", "Salary", "Pay", "1000.00", "May"]


def test_csv_export_honours_filters(client, auth_headers):
    _add(client, auth_headers, "Pay", 1000, "income", "Salary", "2024-05-01")
    _add(client, auth_headers, "Lunch", 20, day="2024-05-02")
    resp = client.get("/api/transactions/export/csv?type=income", headers=auth_headers)
    rows = list(csv.reader(io.StringIO(resp.get_data(as_text=True))))
    assert len(rows) == 2
    assert rows[1][3] == "Pay"


def test_json_export(client, auth_headers, other_headers):
    _add(client, auth_headers, "Pay", 1000, "income", "Salary", "2024-05-01")
    _add(client, auth_headers, "Lunch", 20, day="2024-05-09")

    body = client.get("/api/transactions/export/data", headers=auth_headers).get_json()
    assert body["summary"] == {"income": 1000, "expense": 20, "balance": 980, "totalTransactions": 2}
    assert body["dateRange"] == {"start": "2024-05-01", "end": "2024-05-09"}
    assert len(body["transactions"]) == 2

    empty = client.get("/api/transactions/export/data", headers=other_headers).get_json()
    assert empty["transactions"] == []
    assert empty["dateRange"] == {"start": None, "end": None}
