"""Analytics and reporting API controllers."""

from __future__ import annotations

import datetime as dt

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.utils.validation import jsonable_errors, query_int
from fintrack.domains.finance.schemas.finance_schemas import DateRangeParams
from fintrack.domains.finance.services import analytics_service

analytics_api_bp = Blueprint("finance_analytics_api", __name__)

MAX_TREND_MONTHS = 60


@analytics_api_bp.get("/year-over-year")
@jwt_required()
def year_over_year():
    try:
        year = query_int(request.args.get("year"), dt.date.today().year)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, **analytics_service.year_over_year(int(get_jwt_identity()), year)})


@analytics_api_bp.get("/trends")
@jwt_required()
def spending_trends():
    try:
        months = query_int(request.args.get("months"), 6)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    if not 1 <= months <= MAX_TREND_MONTHS:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "trends": analytics_service.spending_trends(int(get_jwt_identity()), months)})


@analytics_api_bp.get("/custom-range")
@jwt_required()
def custom_range():
    try:
        params = DateRangeParams.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    report = analytics_service.custom_range(int(get_jwt_identity()), params.start_date, params.end_date)
    return jsonify({"ok": True, "report": report})


@analytics_api_bp.get("/projections")
@jwt_required()
def projections():
    try:
        months = query_int(request.args.get("months"), 3)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    if not 1 <= months <= MAX_TREND_MONTHS:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, **analytics_service.linear_projections(int(get_jwt_identity()), months)})
