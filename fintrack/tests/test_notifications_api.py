from datetime import datetime, timedelta

import pytest

from fintrack.core.events.event_bus import EventBus
from fintrack.core.events.event_models import EventRecord
from fintrack.domains.finance.services import notification_service

pytestmark = pytest.mark.integration


def _add_transaction(client, headers, title="Taxi"):
    return client.post(
        "/api/transactions",
        json={"title": title, "amount": 12.5, "type": "expense", "category": "Transport", "date": "2024-05-01"},
        headers=headers,
    )


def test_transaction_writes_create_system_notifications(client, auth_headers):
    txn_id = _add_transaction(client, auth_headers).get_json()["transaction"]["id"]
    client.delete(f"/api/transactions/{txn_id}", headers=auth_headers)

    body = client.get("/api/notifications", headers=auth_headers).get_json()
    titles = [n["title"] for n in body["items"]]
    assert "Transaction Added" in titles
    assert "Transaction Deleted" in titles
    assert body["unreadCount"] == 2
    added = next(n for n in body["items"] if n["title"] == "Transaction Added")
    assert added["priority"] == "low"
    assert added["type"] == "system"
    assert added["message"] == "Added Taxi for 12.50"
    assert added["metadata"]["transaction_id"] == txn_id


def test_mark_read_and_unread_filter(client, auth_headers):
    _add_transaction(client, auth_headers, title="A")
    _add_transaction(client, auth_headers, title="B")
    items = client.get("/api/notifications", headers=auth_headers).get_json()["items"]

    resp = client.put(f"/api/notifications/{items[0]['id']}/read", headers=auth_headers)
    assert resp.get_json()["notification"]["isRead"] is True

    unread = client.get("/api/notifications?unread_only=true", headers=auth_headers).get_json()
    assert len(unread["items"]) == 1
    assert unread["unreadCount"] == 1

    assert client.put("/api/notifications/read-all", headers=auth_headers).get_json()["updated"] == 1
    assert client.get("/api/notifications", headers=auth_headers).get_json()["unreadCount"] == 0


def test_notifications_are_owned(client, auth_headers, other_headers):
    _add_transaction(client, auth_headers)
    note_id = client.get("/api/notifications", headers=auth_headers).get_json()["items"][0]["id"]
    assert client.put(f"/api/notifications/{note_id}/read", headers=other_headers).status_code == 404
    assert client.delete(f"/api/notifications/{note_id}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/notifications/{note_id}", headers=auth_headers).status_code == 200
    assert client.get("/api/notifications", headers=auth_headers).get_json()["items"] == []


def test_exists_since_matches_metadata(app, user):
    notification_service.create_notification(
        user.id, type="bill_reminder", title="t", message="m", metadata={"recurring_id": 7}
    )
    since = datetime.utcnow() - timedelta(minutes=1)
    assert notification_service.exists_since(user.id, "bill_reminder", since, recurring_id=7)
    assert not notification_service.exists_since(user.id, "bill_reminder", since, recurring_id=8)
    assert not notification_service.exists_since(user.id, "budget_alert", since)


def test_failed_notification_does_not_raise(app, user, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(notification_service, "create_notification", boom)
    event = EventRecord(
        event_type="finance.transaction.created",
        payload={"user_id": user.id, "title": "x", "amount": 1},
        user_id=user.id,
    )
    notification_service.on_transaction_event(event)


@pytest.mark.unit
def test_event_bus_subscriptions_are_idempotent():
    bus = EventBus()
    seen = []

    def handler(event):
        seen.append(event.event_type)

    bus.subscribe("demo", handler)
    bus.subscribe("demo", handler)
    bus.publish(EventRecord(event_type="demo", payload={}))
    assert seen == ["demo"]

    bus.unsubscribe("demo", handler)
    bus.publish(EventRecord(event_type="demo", payload={}))
    assert seen == ["demo"]
