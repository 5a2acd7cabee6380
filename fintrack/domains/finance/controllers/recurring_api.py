"""Recurring transaction API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.utils.decorators import require_roles
from fintrack.core.utils.validation import jsonable_errors
from fintrack.domains.finance.mappers import map_recurring, map_transaction
from fintrack.domains.finance.schemas.finance_schemas import AsOfParams, RecurringCreate, RecurringUpdate
from fintrack.domains.finance.services import recurring_service

recurring_api_bp = Blueprint("finance_recurring_api", __name__)


@recurring_api_bp.get("")
@jwt_required()
def list_recurring():
    items = recurring_service.list_recurring(int(get_jwt_identity()))
    return jsonify({"ok": True, "items": [map_recurring(i) for i in items]})


@recurring_api_bp.post("")
@require_roles({"finance:write"})
def create_recurring():
    payload = request.get_json(silent=True) or {}
    try:
        data = RecurringCreate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    item = recurring_service.create_recurring(int(get_jwt_identity()), **data.model_dump())
    return jsonify({"ok": True, "recurring": map_recurring(item)}), 201


@recurring_api_bp.put("/<int:recurring_id>")
@require_roles({"finance:write"})
def update_recurring(recurring_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = RecurringUpdate.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    item = recurring_service.update_recurring(
        int(get_jwt_identity()),
        recurring_id,
        **{k: v for k, v in data.model_dump().items() if v is not None},
    )
    if not item:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "recurring": map_recurring(item)})


@recurring_api_bp.delete("/<int:recurring_id>")
@require_roles({"finance:write"})
def delete_recurring(recurring_id: int):
    if not recurring_service.delete_recurring(int(get_jwt_identity()), recurring_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@recurring_api_bp.post("/process")
@require_roles({"finance:write"})
def process_recurring():
    try:
        params = AsOfParams.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    processed = recurring_service.process_due(as_of=params.as_of, user_id=int(get_jwt_identity()))
    return jsonify(
        {
            "ok": True,
            "processed": len(processed),
            "transactions": [map_transaction(row["transaction"]) for row in processed],
        }
    )


@recurring_api_bp.post("/reminders")
@require_roles({"finance:write"})
def send_reminders():
    try:
        params = AsOfParams.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    created = recurring_service.send_reminders(int(get_jwt_identity()), as_of=params.as_of)
    return jsonify({"ok": True, "remindersCreated": created})
