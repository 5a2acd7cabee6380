import sys
from pathlib import Path

import pytest
from flask_jwt_extended import create_access_token

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fintrack import create_app
from fintrack.extensions import db
from fintrack.core.auth import models as auth_models
from fintrack.core.users import models as user_models
from fintrack.core.events import event_models
from fintrack.domains.finance.models import (
    budget_models,
    notification_models,
    recurring_models,
    transaction_models,
)
from fintrack.core.auth.auth_service import register_user
from fintrack.core.auth.schemas import RegisterRequest
from fintrack.domains.ai.client import ERROR_UNAVAILABLE, GenerationResult


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


class StubGenerator:
    """Structured generator that replays queued results and records prompts."""

    def __init__(self):
        self.responses = []
        self.default = GenerationResult.failure(ERROR_UNAVAILABLE, "stub")
        self.prompts = []

    def queue(self, *results):
        self.responses.extend(results)
        return self

    def generate_structured_response(self, prompt):
        self.prompts.append(prompt)
        if self.responses:
            return self.responses.pop(0)
        return self.default


@pytest.fixture()
def app(tmp_path):
    """Per-test app on a throwaway SQLite file."""
    app = create_app(
        "testing",
        config_overrides={"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}"},
    )
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def llm(app):
    stub = StubGenerator()
    app.extensions["llm_generator"] = stub
    return stub


def make_user(email="owner@example.com", password="secret123"):
    return register_user(RegisterRequest(email=email, password=password, full_name="Test Owner"))


def auth_header(user_id: int, roles=None):
    token = create_access_token(identity=str(user_id), additional_claims={"roles": list(roles or [])})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user(app):
    return make_user()


@pytest.fixture()
def auth_headers(user):
    return auth_header(user.id, user.role_codes)


@pytest.fixture()
def other_headers(app):
    other = make_user(email="other@example.com")
    return auth_header(other.id, other.role_codes)


@pytest.fixture()
def read_only_headers(app):
    viewer = make_user(email="viewer@example.com")
    return auth_header(viewer.id, ["user"])
