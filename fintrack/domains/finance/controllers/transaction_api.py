"""Transaction API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.utils.decorators import require_roles
from fintrack.core.utils.pagination import page_meta
from fintrack.core.utils.validation import jsonable_errors
from fintrack.domains.finance.constants import CATEGORIES
from fintrack.domains.finance.mappers import map_transaction
from fintrack.domains.finance.schemas.finance_schemas import (
    TransactionCreate,
    TransactionFilters,
    TransactionUpdate,
)
from fintrack.domains.finance.services import transaction_service

transaction_api_bp = Blueprint("finance_transaction_api", __name__)

AI_DATA_CATEGORY_LIMIT = 10


def _filter_kwargs(filters: TransactionFilters) -> dict:
    return {
        "txn_type": filters.type,
        "category": filters.category,
        "start_date": filters.start_date,
        "end_date": filters.end_date,
    }


@transaction_api_bp.get("")
@jwt_required()
def list_transactions():
    try:
        filters = TransactionFilters.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user_id = int(get_jwt_identity())
    items, total = transaction_service.list_transactions(
        user_id, page=filters.page, per_page=filters.limit, **_filter_kwargs(filters)
    )
    return jsonify(
        {
            "ok": True,
            "items": [map_transaction(t) for t in items],
            "pagination": page_meta(filters.page, filters.limit, total),
        }
    )


@transaction_api_bp.post("")
@require_roles({"finance:write"})
def create_transaction():
    payload = request.get_json(silent=True) or {}
    try:
        data = TransactionCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    txn = transaction_service.create_transaction(int(get_jwt_identity()), **data.model_dump())
    return jsonify({"ok": True, "transaction": map_transaction(txn)}), 201


@transaction_api_bp.get("/categories")
@jwt_required()
def list_categories():
    return jsonify({"ok": True, "categories": CATEGORIES})


@transaction_api_bp.get("/stats")
@jwt_required()
def stats():
    return jsonify({"ok": True, "stats": transaction_service.get_stats(int(get_jwt_identity()))})


@transaction_api_bp.get("/ai-data")
@jwt_required()
def ai_data():
    """Recent history plus summary statistics, as consumed by the advisor."""
    user_id = int(get_jwt_identity())
    recent = transaction_service.recent_transactions(user_id)
    return jsonify(
        {
            "ok": True,
            "transactions": [map_transaction(t) for t in recent],
            "stats": transaction_service.get_stats(user_id, category_limit=AI_DATA_CATEGORY_LIMIT),
        }
    )


@transaction_api_bp.get("/<int:transaction_id>")
@jwt_required()
def get_transaction(transaction_id: int):
    txn = transaction_service.get_transaction(int(get_jwt_identity()), transaction_id)
    if not txn:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "transaction": map_transaction(txn)})


@transaction_api_bp.put("/<int:transaction_id>")
@require_roles({"finance:write"})
def update_transaction(transaction_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = TransactionUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    txn = transaction_service.update_transaction(
        int(get_jwt_identity()),
        transaction_id,
        **{k: v for k, v in data.model_dump().items() if v is not None},
    )
    if not txn:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "transaction": map_transaction(txn)})


@transaction_api_bp.delete("/<int:transaction_id>")
@require_roles({"finance:write"})
def delete_transaction(transaction_id: int):
    if not transaction_service.delete_transaction(int(get_jwt_identity()), transaction_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
