"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import ValidationError

from fintrack.core.auth.auth_service import authenticate_user, issue_access_token, register_user
from fintrack.core.auth.schemas import RegisterRequest
from fintrack.core.users.models import User
from fintrack.core.users.schemas import LoginRequest, serialize_user
from fintrack.core.utils.validation import jsonable_errors
from fintrack.extensions import db, limiter

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.post("/register")
@limiter.limit("10/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    try:
        user = register_user(data)
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return (
        jsonify({"ok": True, "user": serialize_user(user).model_dump(), "access_token": issue_access_token(user)}),
        201,
    )


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    user = authenticate_user(data.email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return jsonify({"ok": True, "access_token": issue_access_token(user), "user": serialize_user(user).model_dump()})


@auth_bp.get("/me")
@jwt_required()
def me():
    user = db.session.get(User, int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})
