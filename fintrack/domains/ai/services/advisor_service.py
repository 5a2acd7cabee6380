"""Advisor features built on the structured generator.

Every function returns a JSON-ready dict. When the model is unreachable or
its answer is unusable, a static fallback is substituted and the dict
carries ``ai_available: False`` with the failure kind in ``ai_error``.
"""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from typing import Any, Dict, List, Optional

from fintrack.domains.ai import prompts
from fintrack.domains.ai.client import ERROR_MALFORMED, GenerationResult, StructuredGenerator
from fintrack.domains.finance.constants import CATEGORIES, NECESSITY_LEVELS
from fintrack.domains.finance.forecast.aggregator import months_before
from fintrack.domains.finance.forecast.projection import round_money
from fintrack.domains.finance.mappers import map_transaction
from fintrack.domains.finance.services import forecast_service, transaction_service

INSIGHTS_FALLBACK = [
    {"type": "info", "title": "AI Unavailable", "message": "Could not generate detailed insights at this time."}
]
CHAT_FALLBACK = "I'm having trouble connecting to my brain right now. Please try again in a moment."
CHAT_EMPTY_RESPONSE = "I understand your question. Let me help you with that."

NEED_CATEGORIES = {"Food", "Transport", "Bills", "Healthcare", "Education", "Rent", "Groceries"}
NEEDS_BUFFER = 0.05
NEEDS_CONFIDENCE = 0.85
EMERGENCY_FUND_MONTHS = 6

COST_OF_LIVING = {
    "Metro": {"housing": 0.35, "food": 0.15, "transport": 0.10, "other": 0.20, "savings": 0.20},
    "Tier-1": {"housing": 0.30, "food": 0.18, "transport": 0.12, "other": 0.22, "savings": 0.18},
    "Tier-2": {"housing": 0.25, "food": 0.20, "transport": 0.10, "other": 0.25, "savings": 0.20},
}

_PERSONAL_INDICATORS = (
    "my budget", "my income", "my expense", "my spending", "my savings",
    "my balance", "my transaction", "my financial", "my money",
    "i have", "i earn", "i spend", "i save", "i want to",
    "based on my", "according to my", "for my", "my current",
    "recommendation based on", "advice for my", "suggest for my",
    "what should i", "how much should i", "can i afford",
    "should i invest", "my investment", "my portfolio",
)
_GENERAL_INDICATORS = (
    "in general", "generally", "what is", "what are", "explain",
    "tell me about", "is it better", "which is better", "compare",
    "difference between", "pros and cons", "advantages", "disadvantages",
    "should one", "is investing in", "is it good to", "is it worth",
    "what do you think about", "your opinion on",
)
_ACTION_WORDS = ("invest", "save", "spend", "budget", "plan")


def _ai_meta(result: GenerationResult, usable: bool = True) -> Dict[str, Any]:
    if result.ok and usable:
        return {"ai_available": True, "ai_error": None}
    kind = result.error.kind if result.error else ERROR_MALFORMED
    return {"ai_available": False, "ai_error": kind}


def _field(result: GenerationResult, key: str) -> Any:
    return result.data.get(key) if result.ok else None


def financial_summary(user_id: int) -> Dict[str, Any]:
    """Recent transactions and statistics passed to prompts."""
    return {
        "transactions": [map_transaction(t) for t in transaction_service.recent_transactions(user_id)],
        "stats": transaction_service.get_stats(user_id, category_limit=10),
    }


def _savings_rate(income: float, expense: float) -> float:
    return (income - expense) / income * 100 if income > 0 else 0.0


def _top_expense_categories(transactions: List[dict], limit: int = 5) -> List[dict]:
    totals: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        if txn["type"] == "expense":
            totals[txn["category"]] += txn["amount"]
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [{"category": cat, "amount": round(amount, 2)} for cat, amount in ranked]


def _latest(transactions: List[dict], limit: int = 10) -> List[dict]:
    ordered = sorted(transactions, key=lambda t: t["date"], reverse=True)[:limit]
    return [
        {"title": t["title"], "amount": t["amount"], "type": t["type"], "category": t["category"], "date": t["date"]}
        for t in ordered
    ]


# --- forecast and insights ---


def expense_prediction(
    generator: StructuredGenerator,
    user_id: int,
    forecast_period: int,
    *,
    as_of: Optional[dt.date] = None,
    lookback_months: int = 6,
) -> Dict[str, Any]:
    forecast = forecast_service.generate_forecast(
        user_id, forecast_period, as_of=as_of, lookback_months=lookback_months
    ).to_dict()
    result = generator.generate_structured_response(prompts.expense_insights(forecast))
    insights = _field(result, "insights")
    usable = isinstance(insights, list)
    return {**forecast, "insights": insights if usable else INSIGHTS_FALLBACK, **_ai_meta(result, usable)}


def general_insights(generator: StructuredGenerator, user_id: int) -> Dict[str, Any]:
    summary = financial_summary(user_id)
    result = generator.generate_structured_response(
        prompts.general_insights(summary["transactions"], summary["stats"])
    )
    insights = _field(result, "insights")
    usable = isinstance(insights, list)
    if not usable:
        return {
            "insights": [
                {"type": "info", "category": "system", "title": "AI Unavailable", "message": "Unable to generate insights."}
            ],
            "summary": {"totalInsights": 0, "critical": 0, "warnings": 0},
            **_ai_meta(result, usable),
        }
    default_summary = {
        "totalInsights": len(insights),
        "critical": sum(1 for i in insights if isinstance(i, dict) and i.get("type") == "critical"),
        "warnings": sum(1 for i in insights if isinstance(i, dict) and i.get("type") == "warning"),
    }
    summary_block = _field(result, "summary")
    return {
        "insights": insights,
        "summary": summary_block if isinstance(summary_block, dict) else default_summary,
        **_ai_meta(result),
    }


def financial_health(generator: StructuredGenerator, user_id: int) -> Dict[str, Any]:
    summary = financial_summary(user_id)
    result = generator.generate_structured_response(
        prompts.financial_health(summary["stats"], summary["transactions"])
    )
    score = _field(result, "score")
    usable = isinstance(score, (int, float)) and not isinstance(score, bool) and score > 0
    if not usable:
        return {
            "success": False,
            "score": 0,
            "grade": "N/A",
            "factors": [],
            "recommendations": ["AI Service Unavailable"],
            **_ai_meta(result, usable),
        }
    return {
        "success": True,
        "score": score,
        "grade": result.data.get("grade"),
        "factors": result.data.get("factors") or [],
        "recommendations": result.data.get("recommendations") or [],
        **_ai_meta(result),
    }


# --- classification ---


def smart_categorize(generator: StructuredGenerator, title: str, amount: float, description: str = "") -> Dict[str, Any]:
    categories = CATEGORIES["expense"]
    result = generator.generate_structured_response(prompts.categorize(title, amount, description, categories))
    category = _field(result, "category")
    if not isinstance(category, str) or not category:
        return {"success": True, "category": "Other", "confidence": 0.0, "suggestions": [], **_ai_meta(result, False)}
    if category not in categories:
        category = "Other"
    suggestions = result.data.get("suggestions") or []
    return {
        "success": True,
        "category": category,
        "confidence": result.data.get("confidence") or 0.8,
        "suggestions": [s for s in suggestions if isinstance(s, str)],
        **_ai_meta(result),
    }


def predict_necessity(generator: StructuredGenerator, title: str, category: str, amount: float) -> Dict[str, Any]:
    result = generator.generate_structured_response(prompts.necessity(title, category, amount))
    necessity = _field(result, "necessity")
    if necessity not in NECESSITY_LEVELS:
        return {"necessity": "Want", "confidence": 0.5, "reasoning": "AI Unavailable", **_ai_meta(result, False)}
    return {
        "necessity": necessity,
        "confidence": result.data.get("confidence") or 0.8,
        "reasoning": result.data.get("reasoning"),
        **_ai_meta(result),
    }


def suggest_expense_details(generator: StructuredGenerator, title: str, notes: str = "") -> Dict[str, Any]:
    categories = CATEGORIES["expense"]
    result = generator.generate_structured_response(prompts.expense_details(title, notes, categories))
    if not result.ok:
        category = next((c for c in categories if c.lower() in title.lower()), "Other")
        return {
            "success": False,
            "data": {"category": category, "necessity": _rule_necessity(category, title), "vendor": None},
            **_ai_meta(result),
        }
    data = dict(result.data)
    if data.get("category") not in categories:
        data["category"] = "Other"
    if data.get("necessity") not in NECESSITY_LEVELS:
        data["necessity"] = _rule_necessity(data["category"], title)
    return {"success": True, "data": data, **_ai_meta(result)}


# --- chat ---


def is_personal_finance_question(message: str) -> bool:
    """Keyword heuristic: does the question concern the user's own money?"""
    lower = message.lower()
    personal = any(marker in lower for marker in _PERSONAL_INDICATORS)
    general = any(marker in lower for marker in _GENERAL_INDICATORS)
    if general and not personal:
        return False
    if personal:
        return True
    has_action = any(word in lower for word in _ACTION_WORDS)
    if len(message) < 20 and has_action:
        return False
    return has_action


def chat(generator: StructuredGenerator, user_id: int, message: str, history: List[dict]) -> Dict[str, Any]:
    personal = is_personal_finance_question(message)
    context = None
    if personal:
        summary = financial_summary(user_id)
        stats, transactions = summary["stats"], summary["transactions"]
        income, expense = stats["totalIncome"], stats["totalExpense"]
        context = {
            "totalIncome": income,
            "totalExpense": expense,
            "balance": stats["balance"],
            "monthlySavings": income - expense,
            "savingsRate": _savings_rate(income, expense),
            "topCategories": _top_expense_categories(transactions),
            "recentTransactions": _latest(transactions),
            "transactionCount": len(transactions),
        }
    result = generator.generate_structured_response(prompts.chat(message, history, context))
    reply = _field(result, "response")
    if isinstance(reply, str) and reply:
        return {
            "success": True,
            "response": reply,
            "suggestions": result.data.get("suggestions") or [],
            "personal": personal,
            **_ai_meta(result),
        }
    if result.error and result.error.kind == ERROR_MALFORMED and result.error.raw_text is not None:
        # The model answered in prose; pass it through.
        text = result.error.raw_text.replace("```json", "").replace("```", "").strip()
        return {
            "success": True,
            "response": text or CHAT_EMPTY_RESPONSE,
            "suggestions": [],
            "personal": personal,
            **_ai_meta(result),
        }
    return {"success": False, "response": CHAT_FALLBACK, "suggestions": [], "personal": personal, **_ai_meta(result, False)}


# --- needs, allocation, investments ---


def _rule_necessity(category: str | None, title: str | None) -> str:
    if category in NEED_CATEGORIES:
        return "Need"
    lower = (title or "").lower()
    if "rent" in lower or "bill" in lower:
        return "Need"
    return "Want"


def _is_need(txn) -> bool:
    return txn.necessity == "Need" or _rule_necessity(txn.category, txn.title) == "Need"


def forecast_needs(user_id: int, as_of: Optional[dt.date] = None) -> Dict[str, Any]:
    """Next month's essential spending from the last three months of needs."""
    as_of = as_of or dt.date.today()
    first_month = months_before(as_of.replace(day=1), 5)
    totals: Dict[tuple, float] = defaultdict(float)
    for txn in transaction_service.history_since(user_id, first_month):
        if txn.type == "expense" and _is_need(txn):
            totals[(txn.occurred_on.year, txn.occurred_on.month)] += float(txn.amount)

    history = []
    for offset in range(5, -1, -1):
        month_start = months_before(as_of.replace(day=1), offset)
        history.append(
            {
                "month": month_start.strftime("%b"),
                "year": month_start.year,
                "amount": round(totals.get((month_start.year, month_start.month), 0.0), 2),
            }
        )
    recent = history[-3:]
    average = sum(h["amount"] for h in recent) / len(recent)
    return {
        "forecastedAmount": round(average * (1 + NEEDS_BUFFER)),
        "breakdown": {"base": round(average), "buffer": round(average * NEEDS_BUFFER)},
        "history": history,
        "confidence": NEEDS_CONFIDENCE,
    }


def suggest_allocation(generator: StructuredGenerator, user_id: int, surplus: float) -> Dict[str, Any]:
    summary = financial_summary(user_id)
    stats, transactions = summary["stats"], summary["transactions"]
    result = generator.generate_structured_response(
        prompts.allocation(
            stats["totalIncome"],
            stats["totalExpense"],
            surplus,
            _savings_rate(stats["totalIncome"], stats["totalExpense"]),
            _top_expense_categories(transactions),
            [{"title": t["title"], "amount": t["amount"], "category": t["category"]} for t in _latest(transactions)],
        )
    )
    split = _field(result, "savingsSplit")
    usable = isinstance(split, (int, float)) and not isinstance(split, bool) and 0 <= split <= 100
    if not usable:
        half = round_money(surplus * 0.5)
        return {
            "splits": {"savings": {"percentage": 50, "amount": half}, "personal": {"percentage": 50, "amount": half}},
            "reasoning": "AI services are momentarily unavailable. We recommend a balanced 50/50 split.",
            "investmentSuggestions": [],
            **_ai_meta(result, usable),
        }
    return {
        "splits": {
            "savings": {"percentage": split, "amount": round_money(surplus * split / 100)},
            "personal": {"percentage": 100 - split, "amount": round_money(surplus * (100 - split) / 100)},
        },
        "reasoning": result.data.get("reasoning"),
        "investmentSuggestions": result.data.get("investmentSuggestions") or [],
        **_ai_meta(result),
    }


def sip_projection(monthly_amount: float, years: float, annual_return: float) -> Optional[Dict[str, float]]:
    """Maturity of a monthly SIP with contributions at the start of each month."""
    if not monthly_amount or not years or not annual_return:
        return None
    monthly_rate = annual_return / 12 / 100
    months = years * 12
    invested = monthly_amount * months
    if monthly_rate <= 0 or invested <= 0:
        return None
    compound = (1 + monthly_rate) ** months
    maturity = monthly_amount * ((compound - 1) / monthly_rate) * (1 + monthly_rate)
    returns = maturity - invested
    cagr = ((maturity / invested) ** (12 / months) - 1) * 100
    return {
        "investedAmount": round_money(invested),
        "maturityAmount": round_money(maturity),
        "returns": round_money(returns),
        "returnPercentage": round_money(returns / invested * 100),
        "cagr": round_money(cagr),
    }


def investment_advice(
    generator: StructuredGenerator,
    user_id: int,
    sip_amount: Optional[float] = None,
    sip_duration: Optional[float] = None,
    expected_return: Optional[float] = None,
) -> Dict[str, Any]:
    stats = transaction_service.get_stats(user_id)
    income, expense, balance = stats["totalIncome"], stats["totalExpense"], stats["balance"]
    monthly_savings = income - expense
    emergency_status = "adequate" if balance >= expense * EMERGENCY_FUND_MONTHS else "insufficient"
    rate = _savings_rate(income, expense)
    result = generator.generate_structured_response(
        prompts.investment(monthly_savings, balance, emergency_status, rate)
    )
    recommendations = _field(result, "recommendations")
    usable = isinstance(recommendations, list)
    if not usable:
        recommendations = [
            {"type": "info", "priority": "medium", "title": "AI Unavailable", "message": "Please try again later for investment advice."}
        ]
    return {
        "recommendations": recommendations,
        "sipProjection": sip_projection(sip_amount or 0, sip_duration or 0, expected_return or 0),
        "financialHealth": {
            "monthlySavings": round_money(monthly_savings),
            "savingsRate": round_money(rate),
            "emergencyFundTarget": round_money(expense * EMERGENCY_FUND_MONTHS),
            "emergencyFundStatus": emergency_status,
        },
        **_ai_meta(result, usable),
    }


def salary_analysis(generator: StructuredGenerator, user_id: int, salary: float, location: str = "Metro") -> Dict[str, Any]:
    stats = transaction_service.get_stats(user_id)
    expense = stats["totalExpense"]
    savings = salary - expense
    rate = savings / salary * 100
    shares = COST_OF_LIVING.get(location, COST_OF_LIVING["Metro"])
    cost_of_living = {
        "housing": round_money(salary * shares["housing"]),
        "food": round_money(salary * shares["food"]),
        "transport": round_money(salary * shares["transport"]),
        "other": round_money(salary * shares["other"]),
        "recommendedSavings": round_money(salary * shares["savings"]),
        "total": round_money(salary * (shares["housing"] + shares["food"] + shares["transport"] + shares["other"])),
    }
    benchmark = {
        "housing": {"actual": shares["housing"] * 100, "recommended": shares["housing"] * 100, "status": "good"},
        "savings": {
            "actual": round_money(rate),
            "recommended": shares["savings"] * 100,
            "status": "good" if rate >= shares["savings"] * 100 else "low",
        },
    }
    result = generator.generate_structured_response(prompts.salary(salary, expense, savings, rate, location))
    recommendations = _field(result, "recommendations")
    usable = isinstance(recommendations, list)
    if not usable:
        recommendations = [
            {"type": "info", "priority": "medium", "title": "AI Unavailable", "message": "Could not generate detailed salary insights."}
        ]
    model_benchmark = _field(result, "benchmarkComparison")
    if isinstance(model_benchmark, dict) and model_benchmark:
        benchmark = model_benchmark
    return {
        "monthlySalary": salary,
        "monthlyExpense": round_money(expense),
        "savings": round_money(savings),
        "savingsRate": round_money(rate),
        "costOfLiving": cost_of_living,
        "location": location,
        "recommendations": recommendations,
        "benchmarkComparison": benchmark,
        **_ai_meta(result, usable),
    }


def savings_goal_analysis(generator: StructuredGenerator, user_id: int, goals: List[dict]) -> Dict[str, Any]:
    stats = transaction_service.get_stats(user_id)
    monthly_savings = stats["totalIncome"] - stats["totalExpense"]
    result = generator.generate_structured_response(prompts.savings_goals(goals, monthly_savings, stats["balance"]))
    analysed = _field(result, "goals")
    usable = isinstance(analysed, list)
    if usable:
        recommendations = result.data.get("overallRecommendations") or []
    else:
        analysed = [{**goal, "optimizations": [], "achievable": True} for goal in goals]
        recommendations = [{"type": "info", "title": "AI Unavailable", "message": "Goal analysis services are currently offline."}]
    required = sum(
        float(g.get("requiredMonthly") or 0) for g in analysed if isinstance(g, dict)
    )
    return {
        "goals": analysed,
        "overallRecommendations": recommendations,
        "financialCapacity": {
            "monthlySavings": round_money(monthly_savings),
            "totalRequiredForGoals": round_money(required),
            "capacityStatus": "unknown" if not usable else ("sufficient" if monthly_savings >= required else "insufficient"),
        },
        **_ai_meta(result, usable),
    }


ADVISOR_STAGES = ("budget_analysis", "savings_strategy", "debt_reduction")


def financial_advisor_analysis(generator: StructuredGenerator, financial_data: Dict[str, Any]) -> Dict[str, Any]:
    """Three chained analyses, each seeing the earlier stages' output."""
    report: Dict[str, Any] = {}
    errors = []
    for stage in ADVISOR_STAGES:
        result = generator.generate_structured_response(prompts.advisor_stage(stage, financial_data, report))
        if result.ok:
            report[stage] = result.data
        else:
            report[stage] = {"error": "AI Unavailable"}
            errors.append(result.error.kind)
    return {**report, "ai_available": not errors, "ai_error": errors[0] if errors else None}
