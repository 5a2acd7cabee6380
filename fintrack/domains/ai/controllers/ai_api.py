"""Advisor API controllers."""

from __future__ import annotations

from typing import Type

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from pydantic import BaseModel, ValidationError

from fintrack.core.utils.validation import jsonable_errors
from fintrack.domains.ai.client import get_generator
from fintrack.domains.ai.schemas import (
    AdvisorRequest,
    AllocationRequest,
    ChatRequest,
    ExpenseDetailsRequest,
    ExpensePredictionRequest,
    InvestmentRequest,
    NecessityRequest,
    SalaryRequest,
    SavingsGoalsRequest,
    SmartCategorizeRequest,
)
from fintrack.domains.ai.services import advisor_service
from fintrack.domains.finance.forecast import InvalidInputError

ai_api_bp = Blueprint("ai_api", __name__)


def _validated(schema: Type[BaseModel]):
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    return schema.model_validate(payload)


def _validation_error(exc: ValidationError):
    return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400


def _user_id() -> int:
    return int(get_jwt_identity())


@ai_api_bp.post("/expense-prediction")
@jwt_required()
def expense_prediction():
    try:
        params = _validated(ExpensePredictionRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    if params.forecast_period > current_app.config.get("FORECAST_MAX_PERIOD", 36):
        return jsonify({"ok": False, "error": "validation_error", "details": "forecastPeriod too large"}), 400
    try:
        data = advisor_service.expense_prediction(
            get_generator(),
            _user_id(),
            params.forecast_period,
            lookback_months=current_app.config.get("FORECAST_LOOKBACK_MONTHS", 6),
        )
    except InvalidInputError as exc:
        return jsonify({"ok": False, "error": "invalid_forecast_input", "details": exc.field}), 422
    return jsonify({"ok": True, **data})


@ai_api_bp.post("/insights")
@jwt_required()
def insights():
    return jsonify({"ok": True, **advisor_service.general_insights(get_generator(), _user_id())})


@ai_api_bp.post("/financial-health")
@jwt_required()
def financial_health():
    return jsonify({"ok": True, **advisor_service.financial_health(get_generator(), _user_id())})


@ai_api_bp.post("/smart-categorize")
@jwt_required()
def smart_categorize():
    try:
        params = _validated(SmartCategorizeRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    data = advisor_service.smart_categorize(get_generator(), params.title, params.amount, params.description)
    return jsonify({"ok": True, **data})


@ai_api_bp.post("/predict-necessity")
@jwt_required()
def predict_necessity():
    try:
        params = _validated(NecessityRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    data = advisor_service.predict_necessity(get_generator(), params.title, params.category, params.amount)
    return jsonify({"ok": True, **data})


@ai_api_bp.post("/suggest-expense-details")
@jwt_required()
def suggest_expense_details():
    try:
        params = _validated(ExpenseDetailsRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    return jsonify({"ok": True, **advisor_service.suggest_expense_details(get_generator(), params.title, params.notes)})


@ai_api_bp.post("/chat")
@jwt_required()
def chat():
    try:
        params = _validated(ChatRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    data = advisor_service.chat(get_generator(), _user_id(), params.message, params.conversation_history)
    return jsonify({"ok": True, **data})


@ai_api_bp.post("/forecast-needs")
@jwt_required()
def forecast_needs():
    return jsonify({"ok": True, **advisor_service.forecast_needs(_user_id())})


@ai_api_bp.post("/suggest-allocation")
@jwt_required()
def suggest_allocation():
    try:
        params = _validated(AllocationRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    return jsonify({"ok": True, **advisor_service.suggest_allocation(get_generator(), _user_id(), params.surplus_amount)})


@ai_api_bp.post("/investment-advice")
@jwt_required()
def investment_advice():
    try:
        params = _validated(InvestmentRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    data = advisor_service.investment_advice(
        get_generator(), _user_id(), params.sip_amount, params.sip_duration, params.expected_return
    )
    return jsonify({"ok": True, **data})


@ai_api_bp.post("/salary-analysis")
@jwt_required()
def salary_analysis():
    try:
        params = _validated(SalaryRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    data = advisor_service.salary_analysis(get_generator(), _user_id(), params.salary, params.location)
    return jsonify({"ok": True, **data})


@ai_api_bp.post("/savings-goal-analysis")
@jwt_required()
def savings_goals():
    try:
        params = _validated(SavingsGoalsRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    return jsonify({"ok": True, **advisor_service.savings_goal_analysis(get_generator(), _user_id(), params.goals)})


@ai_api_bp.post("/financial-advisor/analyze")
@jwt_required()
def financial_advisor():
    try:
        params = _validated(AdvisorRequest)
    except ValidationError as exc:
        return _validation_error(exc)
    return jsonify({"ok": True, **advisor_service.financial_advisor_analysis(get_generator(), params.financial_data)})
