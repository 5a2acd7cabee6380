"""Reporting aggregations over a user's transactions."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List

from sqlalchemy import extract, func

from fintrack.domains.finance.forecast.aggregator import aggregate_monthly, months_before
from fintrack.domains.finance.forecast.projection import round_money
from fintrack.domains.finance.models.transaction_models import Transaction
from fintrack.domains.finance.services import transaction_service
from fintrack.extensions import db

PROJECTION_LOOKBACK_MONTHS = 6


def _monthly_by_type(user_id: int, year: int) -> List[dict]:
    month_col = extract("month", Transaction.occurred_on)
    rows = (
        db.session.query(month_col, Transaction.type, func.sum(Transaction.amount), func.count(Transaction.id))
        .filter(Transaction.user_id == user_id, extract("year", Transaction.occurred_on) == year)
        .group_by(month_col, Transaction.type)
        .order_by(month_col)
        .all()
    )
    return [
        {"month": int(month), "type": txn_type, "total": float(total or 0), "count": int(count)}
        for month, txn_type, total, count in rows
    ]


def year_over_year(user_id: int, year: int) -> dict:
    current = _monthly_by_type(user_id, year)
    previous = _monthly_by_type(user_id, year - 1)
    return {
        "currentYear": {"year": year, "months": current, "total": sum(r["total"] for r in current)},
        "previousYear": {"year": year - 1, "months": previous, "total": sum(r["total"] for r in previous)},
    }


def spending_trends(user_id: int, months: int = 6, as_of: dt.date | None = None) -> List[dict]:
    start = months_before(as_of or dt.date.today(), months)
    year_col = extract("year", Transaction.occurred_on)
    month_col = extract("month", Transaction.occurred_on)
    rows = (
        db.session.query(year_col, month_col, Transaction.category, func.sum(Transaction.amount), func.count(Transaction.id))
        .filter(
            Transaction.user_id == user_id,
            Transaction.type == "expense",
            Transaction.occurred_on >= start,
        )
        .group_by(year_col, month_col, Transaction.category)
        .order_by(year_col, month_col)
        .all()
    )
    return [
        {"year": int(y), "month": int(m), "category": cat, "total": float(total or 0), "count": int(count)}
        for y, m, cat, total, count in rows
    ]


def custom_range(user_id: int, start_date: dt.date, end_date: dt.date) -> dict:
    totals = transaction_service.totals_by_type(user_id, start_date, end_date)
    total_col = func.sum(Transaction.amount).label("total")
    rows = (
        db.session.query(Transaction.category, Transaction.type, total_col, func.count(Transaction.id))
        .filter(
            Transaction.user_id == user_id,
            Transaction.occurred_on >= start_date,
            Transaction.occurred_on <= end_date,
        )
        .group_by(Transaction.category, Transaction.type)
        .order_by(total_col.desc())
        .all()
    )
    return {
        "startDate": start_date.isoformat(),
        "endDate": end_date.isoformat(),
        "summary": {
            "income": totals["income"],
            "expense": totals["expense"],
            "balance": totals["income"] - totals["expense"],
            "incomeCount": totals["income_count"],
            "expenseCount": totals["expense_count"],
        },
        "categories": [
            {"category": cat, "type": txn_type, "total": float(total or 0), "count": int(count)}
            for cat, txn_type, total, count in rows
        ],
    }


def linear_projections(user_id: int, months: int = 3, as_of: dt.date | None = None) -> Dict[str, object]:
    """Straight-line projection without trend adjustment."""
    as_of = as_of or dt.date.today()
    history = transaction_service.history_since(user_id, months_before(as_of, PROJECTION_LOOKBACK_MONTHS), as_of)
    buckets = aggregate_monthly(history, as_of=as_of, lookback_months=PROJECTION_LOOKBACK_MONTHS)
    income_months = [b.income for b in buckets if b.income]
    expense_months = [b.expense for b in buckets if b.expense]
    avg_income = sum(income_months) / len(income_months) if income_months else 0.0
    avg_expense = sum(expense_months) / len(expense_months) if expense_months else 0.0
    totals = transaction_service.totals_by_type(user_id, end_date=as_of)
    balance = totals["income"] - totals["expense"]

    projections = []
    for i in range(1, months + 1):
        projected_income = balance + avg_income * i
        projected_expense = avg_expense * i
        projections.append(
            {
                "month": i,
                "projectedIncome": round_money(projected_income),
                "projectedExpense": round_money(projected_expense),
                "projectedBalance": round_money(projected_income - projected_expense),
            }
        )
    return {
        "currentBalance": round_money(balance),
        "averageMonthlyIncome": round_money(avg_income),
        "averageMonthlyExpense": round_money(avg_expense),
        "projections": projections,
    }
