"""Recurring transactions: scheduling, materialisation, and bill reminders."""

from __future__ import annotations

import calendar
import datetime as dt
import logging
from typing import List, Optional

from fintrack.core.events.event_service import log_event
from fintrack.domains.finance.events import FINANCE_RECURRING_PROCESSED
from fintrack.domains.finance.models.recurring_models import RecurringTransaction
from fintrack.domains.finance.services import notification_service, transaction_service
from fintrack.extensions import db

logger = logging.getLogger(__name__)

_DAY_STEPS = {"daily": 1, "weekly": 7, "biweekly": 14}
_MONTH_STEPS = {"monthly": 1, "quarterly": 3, "yearly": 12}


def add_months(day: dt.date, months: int) -> dt.date:
    """Shift by calendar months, clamping to the target month's last day."""
    index = day.year * 12 + (day.month - 1) + months
    year, month0 = divmod(index, 12)
    month = month0 + 1
    return dt.date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def advance(day: dt.date, frequency: str) -> dt.date:
    if frequency in _DAY_STEPS:
        return day + dt.timedelta(days=_DAY_STEPS[frequency])
    if frequency in _MONTH_STEPS:
        return add_months(day, _MONTH_STEPS[frequency])
    raise ValueError(f"unknown_frequency:{frequency}")


def list_recurring(user_id: int) -> List[RecurringTransaction]:
    return (
        RecurringTransaction.query.filter_by(user_id=user_id, is_active=True)
        .order_by(RecurringTransaction.next_due_date.asc())
        .all()
    )


def create_recurring(
    user_id: int,
    *,
    title: str,
    amount: float,
    type: str,
    category: str,
    frequency: str,
    start_date: dt.date,
    end_date: dt.date | None = None,
    reminder_days: int = 3,
    reference: str | None = None,
) -> RecurringTransaction:
    item = RecurringTransaction(
        user_id=user_id,
        title=title,
        amount=amount,
        type=type,
        category=category,
        frequency=frequency,
        start_date=start_date,
        end_date=end_date,
        next_due_date=advance(start_date, frequency),
        reminder_days=reminder_days,
        reference=reference or None,
    )
    db.session.add(item)
    db.session.commit()
    return item


def update_recurring(user_id: int, recurring_id: int, **fields) -> RecurringTransaction | None:
    item = RecurringTransaction.query.filter_by(id=recurring_id, user_id=user_id).first()
    if not item:
        return None
    for key in ("title", "amount", "is_active", "reminder_days"):
        if key in fields and fields[key] is not None:
            setattr(item, key, fields[key])
    frequency = fields.get("frequency")
    if frequency and frequency != item.frequency:
        item.frequency = frequency
        item.next_due_date = advance(item.start_date, frequency)
    db.session.commit()
    return item


def delete_recurring(user_id: int, recurring_id: int) -> bool:
    item = RecurringTransaction.query.filter_by(id=recurring_id, user_id=user_id).first()
    if not item:
        return False
    db.session.delete(item)
    db.session.commit()
    return True


def _due_query(as_of: dt.date, user_id: Optional[int] = None):
    query = RecurringTransaction.query.filter(
        RecurringTransaction.is_active.is_(True),
        RecurringTransaction.next_due_date <= as_of,
        (RecurringTransaction.end_date.is_(None)) | (RecurringTransaction.end_date >= as_of),
    )
    if user_id is not None:
        query = query.filter(RecurringTransaction.user_id == user_id)
    return query.order_by(RecurringTransaction.next_due_date.asc())


def process_due(as_of: dt.date | None = None, user_id: Optional[int] = None) -> List[dict]:
    """Materialise one transaction per due item and advance its schedule.

    Items several periods behind catch up one period per run.
    """
    as_of = as_of or dt.date.today()
    processed = []
    for item in _due_query(as_of, user_id).all():
        due_date = item.next_due_date
        txn = transaction_service.create_transaction(
            item.user_id,
            title=item.title,
            amount=float(item.amount),
            type=item.type,
            category=item.category,
            occurred_on=due_date,
            reference=item.reference or f"Recurring: {item.frequency}",
        )
        item.next_due_date = advance(due_date, item.frequency)
        item.last_processed_at = dt.datetime.utcnow()
        db.session.commit()
        log_event(
            FINANCE_RECURRING_PROCESSED,
            {
                "recurring_id": item.id,
                "transaction_id": txn.id,
                "user_id": item.user_id,
                "due_date": due_date.isoformat(),
                "next_due_date": item.next_due_date.isoformat(),
            },
            user_id=item.user_id,
        )
        logger.info("Processed recurring %s for user %s (due %s)", item.id, item.user_id, due_date)
        processed.append({"recurring": item, "transaction": txn})
    return processed


def send_reminders(user_id: int, as_of: dt.date | None = None) -> int:
    """Create bill reminders for items due within their reminder window."""
    as_of = as_of or dt.date.today()
    created = 0
    for item in list_recurring(user_id):
        days_until_due = (item.next_due_date - as_of).days
        if not 0 <= days_until_due <= item.reminder_days:
            continue
        if notification_service.exists_since(
            user_id,
            "bill_reminder",
            notification_service.start_of_day(),
            recurring_id=item.id,
        ):
            continue
        when = "today" if days_until_due == 0 else f"in {days_until_due} day{'s' if days_until_due != 1 else ''}"
        notification_service.create_notification(
            user_id,
            type="bill_reminder",
            title=f"Upcoming {item.type}: {item.title}",
            message=f"{item.title} of {float(item.amount):,.2f} is due {when}.",
            priority="urgent" if days_until_due == 0 else "high",
            action_url="/recurring",
            metadata={
                "recurring_id": item.id,
                "due_date": item.next_due_date.isoformat(),
                "amount": float(item.amount),
            },
        )
        created += 1
    return created
