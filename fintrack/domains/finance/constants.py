"""Finance enumerations and the category catalogue."""

from __future__ import annotations

TRANSACTION_TYPES = ("income", "expense")
NECESSITY_LEVELS = ("Need", "Want", "Savings", "Investment")
PAYMENT_METHODS = ("credit_card", "debit_card", "cash", "bank_transfer", "upi", "other")

CATEGORIES = {
    "income": ["Salary", "Freelance", "Investment", "Business", "Gift", "Other"],
    "expense": [
        "Food",
        "Transport",
        "Shopping",
        "Bills",
        "Entertainment",
        "Healthcare",
        "Education",
        "Travel",
        "Other",
    ],
}

BUDGET_PERIODS = ("weekly", "monthly", "yearly")
RECURRING_FREQUENCIES = ("daily", "weekly", "biweekly", "monthly", "quarterly", "yearly")

NOTIFICATION_TYPES = (
    "budget_alert",
    "bill_reminder",
    "spending_alert",
    "goal_achievement",
    "ai_insight",
    "system",
)
NOTIFICATION_PRIORITIES = ("low", "medium", "high", "urgent")

MAX_AMOUNT = 100_000_000
