"""Prompt builders for the advisor endpoints."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from fintrack.domains.ai.client import PromptFields

JSON_ONLY = "Return ONLY valid JSON. No explanations, just JSON."


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _arrow(value: float) -> str:
    return "up" if value > 0 else "down" if value < 0 else "flat"


def expense_insights(forecast: Dict[str, Any]) -> PromptFields:
    trends = forecast["trends"]
    user = (
        f"Financial data: balance {_money(forecast['currentBalance'])}, "
        f"income {_money(forecast['averageMonthlyIncome'])}/mo, "
        f"expense {_money(forecast['averageMonthlyExpense'])}/mo, "
        f"savings rate {trends['savingsRate']:.1f}%, income trend {_arrow(trends['incomeTrend'])}, "
        f"expense trend {_arrow(trends['expenseTrend'])}.\n"
        "Provide 4-6 actionable insights as "
        '{"insights": [{"type": "warning|success|info", "title": "...", "message": "..."}]}'
    )
    return PromptFields(system=f"Financial advisor. {JSON_ONLY}", user=user, max_tokens=800)


def general_insights(transactions: List[dict], stats: Dict[str, Any]) -> PromptFields:
    user = (
        f"Totals: income {_money(stats['totalIncome'])}, expense {_money(stats['totalExpense'])}, "
        f"balance {_money(stats['balance'])}.\n"
        f"Top expense categories: {json.dumps(stats.get('expensesByCategory', [])[:5])}\n"
        f"Recent transactions: {json.dumps(transactions[-20:])}\n"
        'Respond as {"insights": [{"type": "...", "category": "...", "title": "...", "message": "..."}], '
        '"summary": {"totalInsights": 0, "critical": 0, "warnings": 0}}'
    )
    return PromptFields(system=f"Personal finance analyst. {JSON_ONLY}", user=user, max_tokens=1000)


def investment(monthly_savings: float, balance: float, emergency_status: str, savings_rate: float) -> PromptFields:
    user = (
        f"Investment analysis: savings {_money(monthly_savings)}/mo, balance {_money(balance)}, "
        f"emergency fund {emergency_status}, savings rate {savings_rate:.1f}%.\n"
        'Respond as {"recommendations": [{"type": "...", "priority": "high|medium|low", "title": "...", '
        '"message": "...", "suggestedAmount": 0}]}'
    )
    return PromptFields(system=f"Investment advisor. {JSON_ONLY}", user=user, max_tokens=1000)


def salary(monthly_salary: float, monthly_expense: float, savings: float, savings_rate: float, location: str) -> PromptFields:
    user = (
        f"Salary {_money(monthly_salary)}/mo in a {location} city, expenses {_money(monthly_expense)}, "
        f"savings {_money(savings)} ({savings_rate:.1f}%).\n"
        'Respond as {"recommendations": [{"type": "...", "priority": "...", "title": "...", "message": "..."}], '
        '"benchmarkComparison": {}}'
    )
    return PromptFields(system=f"Compensation and cost of living analyst. {JSON_ONLY}", user=user)


def savings_goals(goals: List[dict], monthly_savings: float, balance: float) -> PromptFields:
    user = (
        f"Monthly savings {_money(monthly_savings)}, balance {_money(balance)}.\n"
        f"Goals: {json.dumps(goals)}\n"
        'Respond as {"goals": [{"name": "...", "requiredMonthly": 0, "achievable": true, "optimizations": []}], '
        '"overallRecommendations": [{"type": "...", "title": "...", "message": "..."}]}'
    )
    return PromptFields(system=f"Savings planner. {JSON_ONLY}", user=user, max_tokens=1000)


def categorize(title: str, amount: float, description: str, categories: List[str]) -> PromptFields:
    user = (
        f'Transaction "{title}" amount {_money(amount)}. {description}\n'
        f"Pick one of: {', '.join(categories)}.\n"
        'Respond as {"category": "...", "confidence": 0.0, "suggestions": ["..."]}'
    )
    return PromptFields(system=f"Expense categorizer. {JSON_ONLY}", user=user, temperature=0.1, max_tokens=200)


def chat(message: str, history: List[dict], context: Optional[Dict[str, Any]]) -> PromptFields:
    if context:
        profile = (
            f"Financial profile: income {_money(context['totalIncome'])}, expenses {_money(context['totalExpense'])}, "
            f"savings {_money(context['monthlySavings'])} ({context['savingsRate']:.1f}%), "
            f"balance {_money(context['balance'])}, {context['transactionCount']} transactions.\n"
            f"Top categories: {json.dumps(context['topCategories'])}\n"
            f"Recent: {json.dumps(context['recentTransactions'][:5])}\n"
            "Personal finance question. Use specific amounts."
        )
    else:
        profile = "General finance question. No personal data. No specific amounts."
    user = f'{profile}\nQuestion: {message}\nRespond as {{"response": "...", "suggestions": ["..."]}}'
    turns = [
        {"role": "user" if turn.get("role") == "user" else "assistant", "content": str(turn.get("content", ""))}
        for turn in history[-5:]
    ]
    return PromptFields(system=f"Financial advisor. {JSON_ONLY}", user=user, max_tokens=500, history=turns)


def financial_health(stats: Dict[str, Any], transactions: List[dict]) -> PromptFields:
    user = (
        f"Income {_money(stats['totalIncome'])}, expense {_money(stats['totalExpense'])}, "
        f"balance {_money(stats['balance'])}.\n"
        f"Monthly totals: {json.dumps(stats.get('monthlyData', []))}\n"
        f"Transactions: {json.dumps(transactions[:50])}\n"
        'Respond as {"score": 0-100, "grade": "A-F", "factors": [{"name": "...", "score": 0, "status": "..."}], '
        '"recommendations": ["..."]}'
    )
    return PromptFields(system=f"Financial health assessor. {JSON_ONLY}", user=user)


def necessity(title: str, category: str, amount: float) -> PromptFields:
    user = (
        f'Expense "{title}" in {category or "Other"} for {_money(amount)}. Is it a Need or a Want?\n'
        'Respond as {"necessity": "Need|Want", "confidence": 0.0, "reasoning": "..."}'
    )
    return PromptFields(system=f"Spending classifier. {JSON_ONLY}", user=user, temperature=0.1, max_tokens=200)


def allocation(income: float, expenses: float, surplus: float, savings_rate: float, top: List[dict], recent: List[dict]) -> PromptFields:
    user = (
        f"Income {_money(income)}, expenses {_money(expenses)}, surplus {_money(surplus)}, "
        f"savings rate {savings_rate:.1f}%.\nTop categories: {json.dumps(top)}\nRecent: {json.dumps(recent)}\n"
        'Respond as {"savingsSplit": 0-100, "reasoning": "...", "investmentSuggestions": ["..."]}'
    )
    return PromptFields(system=f"Surplus allocation advisor. {JSON_ONLY}", user=user, max_tokens=500)


def expense_details(title: str, notes: str, categories: List[str]) -> PromptFields:
    user = (
        f'Expense "{title}". Notes: {notes or "none"}.\n'
        f"Categories: {', '.join(categories)}.\n"
        'Respond as {"category": "...", "necessity": "Need|Want", "vendor": "...", "paymentMethod": "..."}'
    )
    return PromptFields(system=f"Expense form assistant. {JSON_ONLY}", user=user, temperature=0.1, max_tokens=200)


def advisor_stage(stage: str, financial_data: Dict[str, Any], previous: Dict[str, Any]) -> PromptFields:
    user = (
        f"Stage: {stage}.\nFinancial data: {json.dumps(financial_data)}\n"
        f"Earlier analysis: {json.dumps(previous)}\n"
        "Respond with a JSON object of findings and recommendations for this stage."
    )
    return PromptFields(system=f"Certified financial planner. {JSON_ONLY}", user=user, max_tokens=1000)
