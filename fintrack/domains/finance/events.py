"""Finance domain event catalog."""

from __future__ import annotations

FINANCE_TRANSACTION_CREATED = "finance.transaction.created"
FINANCE_TRANSACTION_UPDATED = "finance.transaction.updated"
FINANCE_TRANSACTION_DELETED = "finance.transaction.deleted"
FINANCE_RECURRING_PROCESSED = "finance.recurring.processed"

EVENT_CATALOG = {
    FINANCE_TRANSACTION_CREATED: {
        "version": "v1",
        "payload": {
            "transaction_id": "int",
            "user_id": "int",
            "title": "str",
            "amount": "decimal",
            "type": "str",  # 'income' | 'expense'
            "category": "str",
            "occurred_on": "date",
        },
    },
    FINANCE_TRANSACTION_UPDATED: {
        "version": "v1",
        "payload": {
            "transaction_id": "int",
            "user_id": "int",
            "title": "str",
            "amount": "decimal",
            "fields": "list[str]",
        },
    },
    FINANCE_TRANSACTION_DELETED: {
        "version": "v1",
        "payload": {
            "transaction_id": "int",
            "user_id": "int",
            "title": "str",
            "amount": "decimal",
        },
    },
    FINANCE_RECURRING_PROCESSED: {
        "version": "v1",
        "payload": {
            "recurring_id": "int",
            "transaction_id": "int",
            "user_id": "int",
            "due_date": "date",
            "next_due_date": "date",
        },
    },
}

__all__ = [
    "EVENT_CATALOG",
    "FINANCE_TRANSACTION_CREATED",
    "FINANCE_TRANSACTION_UPDATED",
    "FINANCE_TRANSACTION_DELETED",
    "FINANCE_RECURRING_PROCESSED",
]
