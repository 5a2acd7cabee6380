"""Forward balance projection with a damped, ramped trend."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from fintrack.domains.finance.forecast.errors import InvalidInputError

TREND_DAMPING = 0.3
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Projection:
    period: int
    projected_income: float
    projected_expense: float
    projected_balance: float

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "projectedIncome": self.projected_income,
            "projectedExpense": self.projected_expense,
            "projectedBalance": self.projected_balance,
        }


def round_money(value: float) -> float:
    """Round to cents, halves away from zero."""
    return float(Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def require_finite(field: str, value: object) -> float:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidInputError(field, value)
    number = float(value)
    if not math.isfinite(number):
        raise InvalidInputError(field, value)
    return number


def _trend_factor(trend: float, average: float, period: int, horizon: int) -> float:
    if average == 0:
        return 1.0
    return 1 + (trend / average) * (period / horizon) * TREND_DAMPING


def project_balances(
    *,
    current_balance: float,
    average_income: float,
    average_expense: float,
    income_trend: float,
    expense_trend: float,
    periods: int,
) -> List[Projection]:
    """Walk ``periods`` months forward from ``current_balance``.

    Raises :class:`InvalidInputError` for non-finite numbers, a horizon
    that is not a positive integer, or a projection that overflows.
    """
    balance = require_finite("current_balance", current_balance)
    avg_income = require_finite("average_income", average_income)
    avg_expense = require_finite("average_expense", average_expense)
    inc_trend = require_finite("income_trend", income_trend)
    exp_trend = require_finite("expense_trend", expense_trend)
    if isinstance(periods, bool) or not isinstance(periods, int) or periods < 1:
        raise InvalidInputError("periods", periods)

    projections: List[Projection] = []
    for period in range(1, periods + 1):
        income = avg_income * _trend_factor(inc_trend, avg_income, period, periods)
        expense = avg_expense * _trend_factor(exp_trend, avg_expense, period, periods)
        balance += income - expense
        # finite inputs can still overflow through trend / average
        checks = (("projected_income", income), ("projected_expense", expense), ("projected_balance", balance))
        for field, value in checks:
            if not math.isfinite(value):
                raise InvalidInputError(field, value)
        projections.append(
            Projection(
                period=period,
                projected_income=round_money(income),
                projected_expense=round_money(expense),
                projected_balance=round_money(balance),
            )
        )
    return projections
