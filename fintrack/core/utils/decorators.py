"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Iterable, TypeVar

from flask import jsonify
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException

F = TypeVar("F", bound=Callable)


def require_roles(required_roles: Iterable[str]):
    """Enforce that the current JWT includes the given roles."""

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            try:
                verify_jwt_in_request()
            except JWTExtendedException:
                return jsonify({"ok": False, "error": "unauthorized"}), 401
            roles = set((get_jwt() or {}).get("roles") or [])
            if "admin" in roles or set(required_roles).issubset(roles):
                return fn(*args, **kwargs)
            return jsonify({"ok": False, "error": "forbidden"}), 403

        return wrapper  # type: ignore[return-value]

    return decorator
