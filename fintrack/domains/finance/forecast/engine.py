"""Forecast projection engine: aggregate, estimate trends, project forward."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, List

from fintrack.domains.finance.forecast.aggregator import (
    DEFAULT_LOOKBACK_MONTHS,
    MonthlyBucket,
    aggregate_monthly,
)
from fintrack.domains.finance.forecast.projection import (
    Projection,
    require_finite,
    project_balances,
    round_money,
)
from fintrack.domains.finance.forecast.trend import ols_slope

DEFAULT_FORECAST_PERIOD = 6
# Months the fallback averages are spread over when no bucket has data.
FALLBACK_DIVISOR = 6


@dataclass(frozen=True)
class ForecastResult:
    current_balance: float
    average_income: float
    average_expense: float
    income_trend: float
    expense_trend: float
    savings_rate: float
    projections: List[Projection] = field(default_factory=list)
    buckets: List[MonthlyBucket] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "currentBalance": round_money(self.current_balance),
            "averageMonthlyIncome": round_money(self.average_income),
            "averageMonthlyExpense": round_money(self.average_expense),
            "projections": [p.to_dict() for p in self.projections],
            "trends": {
                "incomeTrend": round_money(self.income_trend),
                "expenseTrend": round_money(self.expense_trend),
                "savingsRate": round_money(self.savings_rate),
            },
        }


def savings_rate(average_income: float, average_expense: float) -> float:
    if average_income <= 0:
        return 0.0
    return (average_income - average_expense) / average_income * 100


def build_forecast(
    transactions: Iterable[Any],
    *,
    as_of: date,
    current_balance: float,
    forecast_period: int = DEFAULT_FORECAST_PERIOD,
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
    fallback_income_total: float = 0.0,
    fallback_expense_total: float = 0.0,
) -> ForecastResult:
    """Run the full pipeline over a user's transaction history.

    ``fallback_*_total`` are trailing totals used only when no transaction
    falls inside the lookback window; they are spread evenly over six months.
    """
    buckets = aggregate_monthly(transactions, as_of=as_of, lookback_months=lookback_months)
    incomes = [b.income for b in buckets]
    expenses = [b.expense for b in buckets]

    if buckets:
        avg_income = sum(incomes) / len(incomes)
        avg_expense = sum(expenses) / len(expenses)
    else:
        avg_income = require_finite("fallback_income_total", fallback_income_total) / FALLBACK_DIVISOR
        avg_expense = require_finite("fallback_expense_total", fallback_expense_total) / FALLBACK_DIVISOR

    income_trend = ols_slope(incomes)
    expense_trend = ols_slope(expenses)
    projections = project_balances(
        current_balance=current_balance,
        average_income=avg_income,
        average_expense=avg_expense,
        income_trend=income_trend,
        expense_trend=expense_trend,
        periods=forecast_period,
    )
    return ForecastResult(
        current_balance=float(current_balance),
        average_income=avg_income,
        average_expense=avg_expense,
        income_trend=income_trend,
        expense_trend=expense_trend,
        savings_rate=savings_rate(avg_income, avg_expense),
        projections=projections,
        buckets=buckets,
    )
