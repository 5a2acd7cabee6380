"""Model to JSON mappers for the finance domain."""

from __future__ import annotations

from fintrack.domains.finance.models.budget_models import Budget
from fintrack.domains.finance.models.notification_models import Notification
from fintrack.domains.finance.models.recurring_models import RecurringTransaction
from fintrack.domains.finance.models.transaction_models import Transaction


def _money(value) -> float:
    return float(value or 0)


def map_transaction(txn: Transaction) -> dict:
    return {
        "id": txn.id,
        "title": txn.title,
        "amount": _money(txn.amount),
        "type": txn.type,
        "category": txn.category,
        "necessity": txn.necessity,
        "date": txn.occurred_on.isoformat(),
        "reference": txn.reference,
        "vendor": txn.vendor,
        "paymentMethod": txn.payment_method,
        "notes": txn.notes,
        "createdAt": txn.created_at.isoformat() if txn.created_at else None,
    }


def map_budget(budget: Budget, usage: dict | None = None) -> dict:
    data = {
        "id": budget.id,
        "category": budget.category,
        "amount": _money(budget.amount),
        "period": budget.period,
        "year": budget.year,
        "month": budget.month,
        "week": budget.week,
    }
    if usage is not None:
        data.update(usage)
    return data


def map_recurring(item: RecurringTransaction) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "amount": _money(item.amount),
        "type": item.type,
        "category": item.category,
        "frequency": item.frequency,
        "startDate": item.start_date.isoformat(),
        "endDate": item.end_date.isoformat() if item.end_date else None,
        "nextDueDate": item.next_due_date.isoformat(),
        "isActive": item.is_active,
        "reminderDays": item.reminder_days,
        "lastProcessed": item.last_processed_at.isoformat() if item.last_processed_at else None,
        "reference": item.reference,
    }


def map_notification(note: Notification) -> dict:
    return {
        "id": note.id,
        "type": note.type,
        "title": note.title,
        "message": note.message,
        "priority": note.priority,
        "isRead": note.is_read,
        "actionUrl": note.action_url,
        "metadata": note.extra or {},
        "createdAt": note.created_at.isoformat() if note.created_at else None,
    }
