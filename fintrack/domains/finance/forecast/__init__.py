from fintrack.domains.finance.forecast.aggregator import MonthlyBucket, aggregate_monthly
from fintrack.domains.finance.forecast.engine import ForecastResult, build_forecast
from fintrack.domains.finance.forecast.errors import ForecastError, InvalidInputError
from fintrack.domains.finance.forecast.projection import Projection, project_balances
from fintrack.domains.finance.forecast.trend import ols_slope

__all__ = [
    "ForecastError",
    "ForecastResult",
    "InvalidInputError",
    "MonthlyBucket",
    "Projection",
    "aggregate_monthly",
    "build_forecast",
    "ols_slope",
    "project_balances",
]
