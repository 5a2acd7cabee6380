"""CSV and JSON exports of filtered transactions."""

from __future__ import annotations

import csv
import io
from typing import List

from fintrack.domains.finance.models.transaction_models import Transaction
from fintrack.domains.finance.services import transaction_service

CSV_HEADER = ["Date", "Type", "Category", "Title", "Amount", "Reference"]


def export_rows(user_id: int, **filters) -> List[Transaction]:
    return transaction_service.filtered_query(user_id, **filters).all()


def to_csv(transactions: List[Transaction]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for txn in transactions:
        writer.writerow(
            [
                txn.occurred_on.isoformat(),
                txn.type,
                txn.category,
                txn.title,
                f"{float(txn.amount):.2f}",
                txn.reference or "",
            ]
        )
    return buffer.getvalue()


def export_payload(user_id: int, **filters) -> dict:
    rows = export_rows(user_id, **filters)
    income = sum(float(t.amount) for t in rows if t.type == "income")
    expense = sum(float(t.amount) for t in rows if t.type == "expense")
    dates = [t.occurred_on for t in rows]
    return {
        "transactions": rows,
        "summary": {
            "income": round(income, 2),
            "expense": round(expense, 2),
            "balance": round(income - expense, 2),
            "totalTransactions": len(rows),
        },
        "dateRange": {
            "start": min(dates).isoformat() if dates else None,
            "end": max(dates).isoformat() if dates else None,
        },
    }
