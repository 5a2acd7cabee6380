"""Budget API controllers."""

from __future__ import annotations

import datetime as dt

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.utils.decorators import require_roles
from fintrack.core.utils.validation import jsonable_errors, query_int
from fintrack.domains.finance.mappers import map_budget
from fintrack.domains.finance.schemas.finance_schemas import BudgetCreate, BudgetFilters, BudgetUpdate
from fintrack.domains.finance.services import budget_service

budget_api_bp = Blueprint("finance_budget_api", __name__)


@budget_api_bp.get("")
@jwt_required()
def list_budgets():
    try:
        filters = BudgetFilters.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    rows = budget_service.list_budgets(
        int(get_jwt_identity()), period=filters.period, year=filters.year, month=filters.month
    )
    return jsonify({"ok": True, "items": [map_budget(b, usage) for b, usage in rows]})


@budget_api_bp.post("")
@require_roles({"finance:write"})
def upsert_budget():
    payload = request.get_json(silent=True) or {}
    try:
        data = BudgetCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    budget, created = budget_service.upsert_budget(int(get_jwt_identity()), **data.model_dump())
    return (
        jsonify({"ok": True, "created": created, "budget": map_budget(budget, budget_service.budget_usage(budget))}),
        201 if created else 200,
    )


@budget_api_bp.put("/<int:budget_id>")
@require_roles({"finance:write"})
def update_budget(budget_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = BudgetUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    budget = budget_service.update_budget(int(get_jwt_identity()), budget_id, data.amount)
    if not budget:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "budget": map_budget(budget, budget_service.budget_usage(budget))})


@budget_api_bp.delete("/<int:budget_id>")
@require_roles({"finance:write"})
def delete_budget(budget_id: int):
    if not budget_service.delete_budget(int(get_jwt_identity()), budget_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@budget_api_bp.get("/summary")
@jwt_required()
def summary():
    today = dt.date.today()
    try:
        month = query_int(request.args.get("month"), today.month)
        year = query_int(request.args.get("year"), today.year)
    except ValueError:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    if not 1 <= month <= 12:
        return jsonify({"ok": False, "error": "validation_error"}), 400
    return jsonify({"ok": True, "summary": budget_service.monthly_summary(int(get_jwt_identity()), year, month)})
