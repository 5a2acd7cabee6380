"""Notifications and the event subscriptions that create them."""

from __future__ import annotations

import datetime as dt
import logging
from typing import List, Optional, Tuple

from fintrack.core.events.event_bus import EventBus
from fintrack.core.events.event_models import EventRecord
from fintrack.domains.finance.events import (
    FINANCE_TRANSACTION_CREATED,
    FINANCE_TRANSACTION_DELETED,
    FINANCE_TRANSACTION_UPDATED,
)
from fintrack.domains.finance.models.notification_models import Notification
from fintrack.extensions import db

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


def create_notification(
    user_id: int,
    *,
    type: str,
    title: str,
    message: str,
    priority: str = "medium",
    action_url: str | None = None,
    metadata: dict | None = None,
) -> Notification:
    note = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        priority=priority,
        action_url=action_url,
        extra=metadata or {},
    )
    db.session.add(note)
    db.session.commit()
    return note


def list_notifications(
    user_id: int, unread_only: bool = False, limit: int = DEFAULT_LIST_LIMIT
) -> Tuple[List[Notification], int]:
    """Latest notifications plus the user's total unread count."""
    query = Notification.query.filter_by(user_id=user_id)
    if unread_only:
        query = query.filter_by(is_read=False)
    items = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()
    unread = Notification.query.filter_by(user_id=user_id, is_read=False).count()
    return items, unread


def mark_read(user_id: int, notification_id: int) -> Notification | None:
    note = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if not note:
        return None
    note.is_read = True
    db.session.commit()
    return note


def mark_all_read(user_id: int) -> int:
    updated = (
        Notification.query.filter_by(user_id=user_id, is_read=False)
        .update({"is_read": True}, synchronize_session=False)
    )
    db.session.commit()
    return updated


def delete_notification(user_id: int, notification_id: int) -> bool:
    note = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if not note:
        return False
    db.session.delete(note)
    db.session.commit()
    return True


def exists_since(user_id: int, type: str, since: dt.datetime, **match) -> bool:
    """True if a notification of ``type`` whose metadata contains ``match`` exists since ``since``."""
    candidates = Notification.query.filter(
        Notification.user_id == user_id,
        Notification.type == type,
        Notification.created_at >= since,
    ).all()
    return any(all((note.extra or {}).get(k) == v for k, v in match.items()) for note in candidates)


def start_of_day(day: Optional[dt.date] = None) -> dt.datetime:
    return dt.datetime.combine(day or dt.datetime.utcnow().date(), dt.time.min)


# --- event subscriptions ---

_TRANSACTION_MESSAGES = {
    FINANCE_TRANSACTION_CREATED: ("Transaction Added", "Added {title} for {amount:,.2f}"),
    FINANCE_TRANSACTION_UPDATED: ("Transaction Updated", "Updated {title}"),
    FINANCE_TRANSACTION_DELETED: ("Transaction Deleted", "Deleted {title} ({amount:,.2f})"),
}


def on_transaction_event(event: EventRecord) -> None:
    payload = event.payload or {}
    user_id = payload.get("user_id") or event.user_id
    title, template = _TRANSACTION_MESSAGES[event.event_type]
    try:
        create_notification(
            user_id,
            type="system",
            title=title,
            message=template.format(title=payload.get("title", ""), amount=float(payload.get("amount") or 0)),
            priority="low",
            action_url="/transactions",
            metadata={"transaction_id": payload.get("transaction_id"), "event": event.event_type},
        )
    except Exception:
        db.session.rollback()
        logger.exception("Failed to create notification for %s", event.event_type)


def on_expense_recorded(event: EventRecord) -> None:
    payload = event.payload or {}
    if payload.get("type") != "expense":
        return
    from fintrack.domains.finance.services.budget_service import check_budget_alert

    try:
        check_budget_alert(
            payload["user_id"],
            payload["category"],
            dt.date.fromisoformat(payload["occurred_on"]),
        )
    except Exception:
        db.session.rollback()
        logger.exception("Budget alert check failed for transaction %s", payload.get("transaction_id"))


def register_subscriptions(bus: EventBus) -> None:
    for event_type in _TRANSACTION_MESSAGES:
        bus.subscribe(event_type, on_transaction_event)
    bus.subscribe(FINANCE_TRANSACTION_CREATED, on_expense_recorded)
