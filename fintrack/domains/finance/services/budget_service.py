"""Budgets, their spending windows, and overspend alerts."""

from __future__ import annotations

import datetime as dt
from typing import List, Optional, Tuple

from sqlalchemy import func

from fintrack.domains.finance.models.budget_models import Budget
from fintrack.domains.finance.models.transaction_models import Transaction
from fintrack.domains.finance.services import notification_service
from fintrack.extensions import db


def week_of_year(day: dt.date) -> int:
    """1-based week counted in 7-day blocks from 1 January."""
    return (day.timetuple().tm_yday - 1) // 7 + 1


def budget_window(period: str, year: int, month: int | None = None, week: int | None = None) -> Tuple[dt.date, dt.date]:
    """Half-open ``[start, end)`` date range a budget covers."""
    if period == "weekly":
        start = dt.date(year, 1, 1) + dt.timedelta(days=((week or 1) - 1) * 7)
        return start, start + dt.timedelta(days=7)
    if period == "yearly":
        return dt.date(year, 1, 1), dt.date(year + 1, 1, 1)
    month = month or 1
    start = dt.date(year, month, 1)
    end = dt.date(year + 1, 1, 1) if month == 12 else dt.date(year, month + 1, 1)
    return start, end


def spent_in_window(user_id: int, category: str, start: dt.date, end: dt.date) -> float:
    total = (
        db.session.query(func.sum(Transaction.amount))
        .filter(
            Transaction.user_id == user_id,
            Transaction.type == "expense",
            Transaction.category == category,
            Transaction.occurred_on >= start,
            Transaction.occurred_on < end,
        )
        .scalar()
    )
    return float(total or 0)


def budget_usage(budget: Budget) -> dict:
    start, end = budget_window(budget.period, budget.year, budget.month, budget.week)
    spent = spent_in_window(budget.user_id, budget.category, start, end)
    amount = float(budget.amount or 0)
    if amount > 0:
        percentage = min(spent / amount * 100, 100.0)
    else:
        percentage = 100.0 if spent > 0 else 0.0
    return {
        "spent": round(spent, 2),
        "remaining": round(amount - spent, 2),
        "percentage": round(percentage, 2),
        "exceeded": spent > amount,
    }


def list_budgets(
    user_id: int, period: Optional[str] = None, year: Optional[int] = None, month: Optional[int] = None
) -> List[Tuple[Budget, dict]]:
    query = Budget.query.filter_by(user_id=user_id)
    if period:
        query = query.filter_by(period=period)
    if year:
        query = query.filter_by(year=year)
    if month:
        query = query.filter_by(month=month)
    budgets = query.order_by(Budget.year.desc(), Budget.category.asc()).all()
    return [(budget, budget_usage(budget)) for budget in budgets]


def upsert_budget(
    user_id: int,
    *,
    category: str,
    amount: float,
    period: str = "monthly",
    year: int | None = None,
    month: int | None = None,
    week: int | None = None,
    today: dt.date | None = None,
) -> Tuple[Budget, bool]:
    """Create a budget or replace the amount of the matching one.

    Returns ``(budget, created)``.
    """
    today = today or dt.date.today()
    year = year or today.year
    if period == "monthly":
        month, week = month or today.month, None
    elif period == "weekly":
        month, week = None, week or week_of_year(today)
    else:
        month, week = None, None

    budget = Budget.query.filter_by(
        user_id=user_id, category=category, period=period, year=year, month=month, week=week
    ).first()
    created = budget is None
    if created:
        budget = Budget(user_id=user_id, category=category, period=period, year=year, month=month, week=week)
        db.session.add(budget)
    budget.amount = amount
    db.session.commit()
    return budget, created


def update_budget(user_id: int, budget_id: int, amount: float) -> Budget | None:
    budget = Budget.query.filter_by(id=budget_id, user_id=user_id).first()
    if not budget:
        return None
    budget.amount = amount
    db.session.commit()
    return budget


def delete_budget(user_id: int, budget_id: int) -> bool:
    budget = Budget.query.filter_by(id=budget_id, user_id=user_id).first()
    if not budget:
        return False
    db.session.delete(budget)
    db.session.commit()
    return True


def monthly_summary(user_id: int, year: int, month: int) -> dict:
    rows = []
    budgeted = spent = 0.0
    for budget, usage in list_budgets(user_id, period="monthly", year=year, month=month):
        budgeted += float(budget.amount or 0)
        spent += usage["spent"]
        rows.append({"category": budget.category, "budgeted": float(budget.amount or 0), **usage})
    return {
        "year": year,
        "month": month,
        "totalBudgeted": round(budgeted, 2),
        "totalSpent": round(spent, 2),
        "totalRemaining": round(budgeted - spent, 2),
        "percentage": round(spent / budgeted * 100, 2) if budgeted > 0 else 0.0,
        "budgets": rows,
    }


def check_budget_alert(user_id: int, category: str, occurred_on: dt.date) -> bool:
    """Raise a budget_alert when the month's budget for ``category`` is exceeded.

    At most one alert per budget per day. Returns True when an alert was created.
    """
    budget = Budget.query.filter_by(
        user_id=user_id, category=category, period="monthly", year=occurred_on.year, month=occurred_on.month
    ).first()
    if not budget:
        return False
    usage = budget_usage(budget)
    if not usage["exceeded"]:
        return False
    if notification_service.exists_since(
        user_id, "budget_alert", notification_service.start_of_day(), budget_id=budget.id
    ):
        return False
    notification_service.create_notification(
        user_id,
        type="budget_alert",
        title=f"Budget exceeded: {category}",
        message=f"You have spent {usage['spent']:,.2f} of your {float(budget.amount):,.2f} {category} budget.",
        priority="high",
        action_url="/budgets",
        metadata={"budget_id": budget.id, "spent": usage["spent"], "amount": float(budget.amount)},
    )
    return True
