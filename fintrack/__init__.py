"""fintrack application factory and bootstrap."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask, g, request

from fintrack.config import config_by_name
from fintrack.core.events.event_bus import event_bus
from fintrack.extensions import init_extensions

# Write endpoints that are always logged, even when fast and successful.
_AUDITED_PREFIXES = ("/auth/register", "/auth/login")
_AUDITED_WRITE_PREFIX = "/api/transactions"


def create_app(config_name: Optional[str] = None, config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the fintrack Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if config_overrides:
        app.config.update(config_overrides)

    # Normalize relative sqlite paths against the project root.
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////"):
        abs_path = project_root / db_uri.replace("sqlite:///", "", 1)
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    _configure_logging(app)
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_request_logging(app)

    from fintrack.domains.ai.client import build_generator
    from fintrack.domains.finance.services.notification_service import register_subscriptions

    app.extensions["event_bus"] = event_bus
    app.extensions["llm_generator"] = build_generator(app.config)
    register_subscriptions(event_bus)

    @app.get("/health")
    def health():
        return {"ok": True, "status": "healthy", "ai_configured": bool(app.config.get("LLM_API_KEY"))}, 200

    @app.get("/api/v1/ping")
    def ping():
        """Lightweight endpoint for load-balancer health checks."""
        return {"pong": True}, 200

    from fintrack.domains.finance.tasks.process_recurring import register_commands

    register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.getLogger("fintrack").setLevel(level)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from fintrack.core.auth.controllers import auth_bp  # local import to avoid circulars
    from fintrack.domains.ai.controllers.ai_api import ai_api_bp
    from fintrack.domains.finance.controllers.analytics_api import analytics_api_bp
    from fintrack.domains.finance.controllers.budget_api import budget_api_bp
    from fintrack.domains.finance.controllers.export_api import export_api_bp
    from fintrack.domains.finance.controllers.forecast_api import forecast_api_bp
    from fintrack.domains.finance.controllers.notification_api import notification_api_bp
    from fintrack.domains.finance.controllers.recurring_api import recurring_api_bp
    from fintrack.domains.finance.controllers.transaction_api import transaction_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(export_api_bp, url_prefix="/api/transactions/export")
    app.register_blueprint(transaction_api_bp, url_prefix="/api/transactions")
    app.register_blueprint(budget_api_bp, url_prefix="/api/budgets")
    app.register_blueprint(recurring_api_bp, url_prefix="/api/recurring")
    app.register_blueprint(notification_api_bp, url_prefix="/api/notifications")
    app.register_blueprint(analytics_api_bp, url_prefix="/api/analytics")
    app.register_blueprint(forecast_api_bp, url_prefix="/api/finance")
    app.register_blueprint(ai_api_bp, url_prefix="/api/ai")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_request_logging(app: Flask) -> None:
    """Log failed, slow, and auditable requests."""

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.get("request_started")
        duration_ms = (time.perf_counter() - started) * 1000 if started else 0.0
        path = request.path
        fields = (request.method, path, response.status_code, duration_ms, request.remote_addr)
        if response.status_code >= 400:
            app.logger.error("%s %s -> %s (%.1fms) from %s", *fields)
        elif duration_ms > app.config.get("SLOW_REQUEST_MS", 1000):
            app.logger.warning("slow request %s %s -> %s (%.1fms) from %s", *fields)
        elif path.startswith(_AUDITED_PREFIXES) or (
            path.startswith(_AUDITED_WRITE_PREFIX) and request.method in ("POST", "PUT", "DELETE")
        ):
            app.logger.info("%s %s -> %s (%.1fms) from %s", *fields)
        return response
