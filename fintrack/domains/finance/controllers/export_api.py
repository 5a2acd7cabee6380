"""Transaction export API controllers."""

from __future__ import annotations

import datetime as dt

from flask import Blueprint, Response, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.utils.validation import jsonable_errors
from fintrack.domains.finance.mappers import map_transaction
from fintrack.domains.finance.schemas.finance_schemas import TransactionFilters
from fintrack.domains.finance.services import export_service

export_api_bp = Blueprint("finance_export_api", __name__)


def _filters() -> dict:
    filters = TransactionFilters.model_validate(request.args.to_dict())
    return {
        "txn_type": filters.type,
        "category": filters.category,
        "start_date": filters.start_date,
        "end_date": filters.end_date,
    }


@export_api_bp.get("/csv")
@jwt_required()
def export_csv():
    try:
        filters = _filters()
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    rows = export_service.export_rows(int(get_jwt_identity()), **filters)
    filename = f"transactions-{dt.date.today().isoformat()}.csv"
    return Response(
        export_service.to_csv(rows),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@export_api_bp.get("/data")
@jwt_required()
def export_data():
    try:
        filters = _filters()
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    payload = export_service.export_payload(int(get_jwt_identity()), **filters)
    payload["transactions"] = [map_transaction(t) for t in payload["transactions"]]
    return jsonify({"ok": True, **payload})
