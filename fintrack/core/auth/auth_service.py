"""Authentication service layer."""

from __future__ import annotations

from typing import Optional

from flask_jwt_extended import create_access_token
from sqlalchemy import func

from fintrack.core.auth.models import Role
from fintrack.core.auth.password import hash_password, verify_password
from fintrack.core.auth.schemas import RegisterRequest
from fintrack.core.events.event_service import log_event
from fintrack.core.users.models import User
from fintrack.extensions import db

AUTH_USER_REGISTERED = "auth.user.registered"
# Roles granted to every new account by default.
DEFAULT_REGISTER_ROLES = ("user", "finance:write")


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid."""
    user = User.query.filter(func.lower(User.email) == email.strip().lower()).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_access_token(user: User) -> str:
    return create_access_token(identity=str(user.id), additional_claims={"roles": user.role_codes})


def register_user(payload: RegisterRequest) -> User:
    """Create a user with the default roles."""
    normalized_email = payload.email.strip().lower()
    existing = User.query.filter(func.lower(User.email) == normalized_email).first()
    if existing:
        raise ValueError("email_already_exists")

    user = User(
        email=normalized_email,
        full_name=payload.full_name,
        currency=payload.currency.upper(),
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    _assign_default_roles(user)
    db.session.commit()
    log_event(AUTH_USER_REGISTERED, {"user_id": user.id, "email": user.email}, user_id=user.id)
    return user


def _assign_default_roles(user: User) -> None:
    for code in DEFAULT_REGISTER_ROLES:
        role = Role.query.filter_by(name=code).first()
        if not role:
            role = Role(name=code, description=f"Auto-created role {code}")
            db.session.add(role)
        if role not in user.roles:
            user.roles.append(role)
