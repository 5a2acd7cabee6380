from fintrack.domains.finance.services import (
    analytics_service,
    budget_service,
    export_service,
    notification_service,
    recurring_service,
    transaction_service,
)
from fintrack.domains.finance.services.forecast_service import generate_forecast

__all__ = [
    "analytics_service",
    "budget_service",
    "export_service",
    "generate_forecast",
    "notification_service",
    "recurring_service",
    "transaction_service",
]
