"""Balance forecast for a user's stored transactions."""

from __future__ import annotations

import datetime as dt

from fintrack.domains.finance.forecast import ForecastResult, build_forecast
from fintrack.domains.finance.forecast.aggregator import months_before
from fintrack.domains.finance.services import transaction_service


def generate_forecast(
    user_id: int,
    forecast_period: int = 6,
    *,
    as_of: dt.date | None = None,
    lookback_months: int = 6,
) -> ForecastResult:
    """Project the user's balance ``forecast_period`` months past ``as_of``.

    The current balance is all income minus all expense dated on or before
    ``as_of``; later transactions take no part in the forecast.
    """
    as_of = as_of or dt.date.today()
    history = transaction_service.history_since(user_id, months_before(as_of, lookback_months), as_of)
    totals = transaction_service.totals_by_type(user_id, end_date=as_of)
    return build_forecast(
        history,
        as_of=as_of,
        current_balance=totals["income"] - totals["expense"],
        forecast_period=forecast_period,
        lookback_months=lookback_months,
        fallback_income_total=totals["income"],
        fallback_expense_total=totals["expense"],
    )
