from datetime import date

import pytest

from fintrack.domains.finance.models.notification_models import Notification
from fintrack.domains.finance.models.transaction_models import Transaction
from fintrack.domains.finance.services import recurring_service
from fintrack.domains.finance.tasks.process_recurring import process_recurring_command

pytestmark = pytest.mark.integration


def _create(client, headers, **overrides):
    payload = {
        "title": "Rent",
        "amount": 1200,
        "type": "expense",
        "category": "Bills",
        "frequency": "monthly",
        "startDate": "2024-01-31",
    }
    payload.update(overrides)
    return client.post("/api/recurring", json=payload, headers=headers)


def test_create_schedules_first_due_one_period_after_start(client, auth_headers):
    resp = _create(client, auth_headers)
    assert resp.status_code == 201
    item = resp.get_json()["recurring"]
    assert item["nextDueDate"] == "2024-02-29"
    assert item["isActive"] is True
    assert item["reminderDays"] == 3


def test_end_date_before_start_rejected(client, auth_headers):
    resp = _create(client, auth_headers, endDate="2023-12-31")
    assert resp.status_code == 400


def test_process_materialises_one_period_per_run(client, auth_headers, user):
    _create(client, auth_headers)

    first = client.post("/api/recurring/process", json={"asOf": "2024-04-15"}, headers=auth_headers).get_json()
    assert first["processed"] == 1
    txn = first["transactions"][0]
    assert txn["date"] == "2024-02-29"
    assert txn["reference"] == "Recurring: monthly"

    item = client.get("/api/recurring", headers=auth_headers).get_json()["items"][0]
    assert item["nextDueDate"] == "2024-03-29"
    assert item["lastProcessed"] is not None

    second = client.post("/api/recurring/process", json={"asOf": "2024-04-15"}, headers=auth_headers).get_json()
    assert second["transactions"][0]["date"] == "2024-03-29"
    third = client.post("/api/recurring/process", json={"asOf": "2024-04-15"}, headers=auth_headers).get_json()
    assert third["processed"] == 0
    assert Transaction.query.filter_by(user_id=user.id).count() == 2


def test_ended_items_are_not_processed(client, auth_headers):
    _create(client, auth_headers, endDate="2024-02-15")
    body = client.post("/api/recurring/process", json={"asOf": "2024-03-01"}, headers=auth_headers).get_json()
    assert body["processed"] == 0


def test_frequency_change_recomputes_next_due(client, auth_headers):
    item_id = _create(client, auth_headers).get_json()["recurring"]["id"]
    resp = client.put(f"/api/recurring/{item_id}", json={"frequency": "weekly"}, headers=auth_headers)
    assert resp.get_json()["recurring"]["nextDueDate"] == "2024-02-07"


def test_deactivated_items_drop_out_of_list(client, auth_headers, other_headers):
    item_id = _create(client, auth_headers).get_json()["recurring"]["id"]
    assert client.put(f"/api/recurring/{item_id}", json={"isActive": False}, headers=other_headers).status_code == 404
    client.put(f"/api/recurring/{item_id}", json={"isActive": False}, headers=auth_headers)
    assert client.get("/api/recurring", headers=auth_headers).get_json()["items"] == []
    assert client.delete(f"/api/recurring/{item_id}", headers=auth_headers).status_code == 200


def test_bill_reminders_are_created_once(client, auth_headers, user):
    _create(client, auth_headers, frequency="weekly", startDate="2024-05-01")  # due 2024-05-08

    assert client.post("/api/recurring/reminders", json={"asOf": "2024-05-01"}, headers=auth_headers).get_json()[
        "remindersCreated"
    ] == 0
    body = client.post("/api/recurring/reminders", json={"asOf": "2024-05-06"}, headers=auth_headers).get_json()
    assert body["remindersCreated"] == 1
    again = client.post("/api/recurring/reminders", json={"asOf": "2024-05-06"}, headers=auth_headers).get_json()
    assert again["remindersCreated"] == 0

    note = Notification.query.filter_by(user_id=user.id, type="bill_reminder").one()
    assert note.priority == "high"
    assert "in 2 days" in note.message
    assert note.extra["due_date"] == "2024-05-08"


def test_process_recurring_cli(app, client, auth_headers):
    _create(client, auth_headers, startDate="2024-01-01")
    runner = app.test_cli_runner()
    result = runner.invoke(process_recurring_command, ["--as-of", "2024-02-01"])
    assert result.exit_code == 0
    assert "Processed 1 recurring transaction(s)" in result.output


@pytest.mark.unit
def test_add_months_clamps_to_month_end():
    assert recurring_service.add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert recurring_service.add_months(date(2023, 11, 30), 3) == date(2024, 2, 29)
    assert recurring_service.add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)


@pytest.mark.unit
@pytest.mark.parametrize(
    "frequency,expected",
    [
        ("daily", date(2024, 3, 2)),
        ("weekly", date(2024, 3, 8)),
        ("biweekly", date(2024, 3, 15)),
        ("monthly", date(2024, 4, 1)),
        ("quarterly", date(2024, 6, 1)),
        ("yearly", date(2025, 3, 1)),
    ],
)
def test_advance(frequency, expected):
    assert recurring_service.advance(date(2024, 3, 1), frequency) == expected
