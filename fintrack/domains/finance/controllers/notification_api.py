"""Notification API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from fintrack.domains.finance.mappers import map_notification
from fintrack.domains.finance.services import notification_service

notification_api_bp = Blueprint("notification_api", __name__)


@notification_api_bp.get("")
@jwt_required()
def list_notifications():
    unread_only = (request.args.get("unread_only") or request.args.get("unreadOnly") or "").lower() in (
        "1",
        "true",
        "yes",
    )
    items, unread = notification_service.list_notifications(int(get_jwt_identity()), unread_only=unread_only)
    return jsonify({"ok": True, "items": [map_notification(n) for n in items], "unreadCount": unread})


@notification_api_bp.put("/<int:notification_id>/read")
@jwt_required()
def mark_read(notification_id: int):
    note = notification_service.mark_read(int(get_jwt_identity()), notification_id)
    if not note:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "notification": map_notification(note)})


@notification_api_bp.put("/read-all")
@jwt_required()
def mark_all_read():
    updated = notification_service.mark_all_read(int(get_jwt_identity()))
    return jsonify({"ok": True, "updated": updated})


@notification_api_bp.delete("/<int:notification_id>")
@jwt_required()
def delete_notification(notification_id: int):
    if not notification_service.delete_notification(int(get_jwt_identity()), notification_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
