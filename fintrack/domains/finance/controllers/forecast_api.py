"""Balance forecast API."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.utils.validation import jsonable_errors
from fintrack.domains.finance.forecast import InvalidInputError
from fintrack.domains.finance.schemas.finance_schemas import ForecastRequest
from fintrack.domains.finance.services.forecast_service import generate_forecast

forecast_api_bp = Blueprint("finance_forecast_api", __name__)


@forecast_api_bp.post("/forecast")
@jwt_required()
def post_forecast():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    payload.setdefault("forecastPeriod", current_app.config.get("FORECAST_DEFAULT_PERIOD", 6))
    try:
        params = ForecastRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    if params.forecast_period > current_app.config.get("FORECAST_MAX_PERIOD", 36):
        return jsonify({"ok": False, "error": "validation_error", "details": "forecastPeriod too large"}), 400
    try:
        result = generate_forecast(
            int(get_jwt_identity()),
            params.forecast_period,
            as_of=params.as_of,
            lookback_months=current_app.config.get("FORECAST_LOOKBACK_MONTHS", 6),
        )
    except InvalidInputError as exc:
        return jsonify({"ok": False, "error": "invalid_forecast_input", "details": exc.field}), 422
    return jsonify({"ok": True, **result.to_dict()})
