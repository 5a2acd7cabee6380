"""Transaction CRUD and summary statistics."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Tuple

from sqlalchemy import extract, func
from sqlalchemy.orm import Query

from fintrack.core.events.event_service import log_event
from fintrack.core.utils.pagination import paginate
from fintrack.domains.finance.events import (
    FINANCE_TRANSACTION_CREATED,
    FINANCE_TRANSACTION_DELETED,
    FINANCE_TRANSACTION_UPDATED,
)
from fintrack.domains.finance.models.transaction_models import Transaction
from fintrack.extensions import db

AI_DATA_TRANSACTION_LIMIT = 100
_UPDATABLE_FIELDS = ("title", "amount", "type", "category", "occurred_on", "reference", "necessity")


def filtered_query(
    user_id: int,
    *,
    txn_type: str | None = None,
    category: str | None = None,
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
) -> Query:
    """Owned transactions matching the filters, newest first."""
    query = Transaction.query.filter(Transaction.user_id == user_id)
    if txn_type:
        query = query.filter(Transaction.type == txn_type)
    if category:
        query = query.filter(Transaction.category == category)
    if start_date:
        query = query.filter(Transaction.occurred_on >= start_date)
    if end_date:
        query = query.filter(Transaction.occurred_on <= end_date)
    return query.order_by(Transaction.occurred_on.desc(), Transaction.id.desc())


def list_transactions(
    user_id: int,
    *,
    page: int = 1,
    per_page: int = 50,
    **filters,
) -> Tuple[List[Transaction], int]:
    return paginate(filtered_query(user_id, **filters), page=page, per_page=per_page)


def get_transaction(user_id: int, transaction_id: int) -> Transaction | None:
    return Transaction.query.filter_by(id=transaction_id, user_id=user_id).first()


def create_transaction(
    user_id: int,
    *,
    title: str,
    amount: float,
    type: str,
    category: str,
    occurred_on: dt.date | None = None,
    reference: str | None = None,
    necessity: str = "Want",
    vendor: str | None = None,
    payment_method: str = "other",
    notes: str | None = None,
) -> Transaction:
    txn = Transaction(
        user_id=user_id,
        title=title,
        amount=amount,
        type=type,
        category=category,
        occurred_on=occurred_on or dt.date.today(),
        reference=reference or None,
        necessity=necessity,
        vendor=vendor or None,
        payment_method=payment_method,
        notes=notes or None,
    )
    db.session.add(txn)
    db.session.commit()
    log_event(
        FINANCE_TRANSACTION_CREATED,
        {
            "transaction_id": txn.id,
            "user_id": user_id,
            "title": txn.title,
            "amount": float(amount),
            "type": txn.type,
            "category": txn.category,
            "occurred_on": txn.occurred_on.isoformat(),
        },
        user_id=user_id,
    )
    return txn


def update_transaction(user_id: int, transaction_id: int, **fields) -> Transaction | None:
    txn = get_transaction(user_id, transaction_id)
    if not txn:
        return None
    changed = []
    for key in _UPDATABLE_FIELDS:
        if key in fields and fields[key] is not None:
            setattr(txn, key, fields[key])
            changed.append(key)
    db.session.commit()
    log_event(
        FINANCE_TRANSACTION_UPDATED,
        {
            "transaction_id": txn.id,
            "user_id": user_id,
            "title": txn.title,
            "amount": float(txn.amount),
            "fields": changed,
        },
        user_id=user_id,
    )
    return txn


def delete_transaction(user_id: int, transaction_id: int) -> bool:
    txn = get_transaction(user_id, transaction_id)
    if not txn:
        return False
    payload = {"transaction_id": txn.id, "user_id": user_id, "title": txn.title, "amount": float(txn.amount)}
    db.session.delete(txn)
    db.session.commit()
    log_event(FINANCE_TRANSACTION_DELETED, payload, user_id=user_id)
    return True


def totals_by_type(user_id: int, start_date: dt.date | None = None, end_date: dt.date | None = None) -> Dict[str, float]:
    query = db.session.query(Transaction.type, func.sum(Transaction.amount), func.count(Transaction.id)).filter(
        Transaction.user_id == user_id
    )
    if start_date:
        query = query.filter(Transaction.occurred_on >= start_date)
    if end_date:
        query = query.filter(Transaction.occurred_on <= end_date)
    totals = {"income": 0.0, "expense": 0.0, "income_count": 0, "expense_count": 0}
    for txn_type, total, count in query.group_by(Transaction.type).all():
        if txn_type in ("income", "expense"):
            totals[txn_type] = float(total or 0)
            totals[f"{txn_type}_count"] = int(count or 0)
    return totals


def _category_totals(user_id: int, txn_type: str, limit: Optional[int] = None) -> List[dict]:
    total_col = func.sum(Transaction.amount).label("total")
    query = (
        db.session.query(Transaction.category, total_col, func.count(Transaction.id))
        .filter(Transaction.user_id == user_id, Transaction.type == txn_type)
        .group_by(Transaction.category)
        .order_by(total_col.desc())
    )
    if limit:
        query = query.limit(limit)
    return [{"category": cat, "total": float(total or 0), "count": int(count)} for cat, total, count in query.all()]


def get_stats(user_id: int, category_limit: Optional[int] = None) -> dict:
    """Totals, balance, and breakdowns across the user's whole history."""
    totals = totals_by_type(user_id)

    year_col = extract("year", Transaction.occurred_on)
    month_col = extract("month", Transaction.occurred_on)
    monthly_rows = (
        db.session.query(year_col, month_col, Transaction.type, func.sum(Transaction.amount))
        .filter(Transaction.user_id == user_id)
        .group_by(year_col, month_col, Transaction.type)
        .order_by(year_col, month_col)
        .all()
    )
    monthly = [
        {"year": int(year), "month": int(month), "type": txn_type, "total": float(total or 0)}
        for year, month, txn_type, total in monthly_rows
    ]

    title_total = func.sum(Transaction.amount).label("total")
    title_rows = (
        db.session.query(Transaction.title, title_total, func.count(Transaction.id))
        .filter(Transaction.user_id == user_id, Transaction.type == "expense")
        .group_by(Transaction.title)
        .order_by(title_total.desc())
        .all()
    )

    return {
        "totalIncome": totals["income"],
        "totalExpense": totals["expense"],
        "balance": totals["income"] - totals["expense"],
        "monthlyData": monthly,
        "expensesByTitle": [
            {"title": title, "total": float(total or 0), "count": int(count)} for title, total, count in title_rows
        ],
        "expensesByCategory": _category_totals(user_id, "expense", category_limit),
        "incomeByCategory": _category_totals(user_id, "income", category_limit),
    }


def recent_transactions(user_id: int, limit: int = AI_DATA_TRANSACTION_LIMIT) -> List[Transaction]:
    """Latest ``limit`` transactions in chronological order."""
    rows = filtered_query(user_id).limit(limit).all()
    return list(reversed(rows))


def history_since(user_id: int, start_date: dt.date, end_date: dt.date | None = None) -> List[Transaction]:
    query = Transaction.query.filter(Transaction.user_id == user_id, Transaction.occurred_on >= start_date)
    if end_date:
        query = query.filter(Transaction.occurred_on <= end_date)
    return query.order_by(Transaction.occurred_on.asc(), Transaction.id.asc()).all()
