"""Request schemas for the advisor endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fintrack.core.utils.validation import sanitize_text
from fintrack.domains.finance.constants import MAX_AMOUNT

Location = Literal["Metro", "Tier-1", "Tier-2"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ExpensePredictionRequest(_CamelModel):
    forecast_period: int = Field(default=6, ge=1, alias="forecastPeriod")


class SmartCategorizeRequest(_CamelModel):
    title: str = Field(min_length=1, max_length=255)
    amount: float = Field(default=0, ge=0, le=MAX_AMOUNT)
    description: str = Field(default="", max_length=1000)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _clean(cls, v):
        return sanitize_text(v) if isinstance(v, str) else v


class ChatRequest(_CamelModel):
    message: str = Field(min_length=1, max_length=2000)
    conversation_history: List[Dict[str, Any]] = Field(default_factory=list, alias="conversationHistory")

    @field_validator("message", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class NecessityRequest(_CamelModel):
    title: str = Field(min_length=1, max_length=255)
    category: str = Field(default="Other", max_length=64)
    amount: float = Field(default=0, ge=0, le=MAX_AMOUNT)


class AllocationRequest(_CamelModel):
    surplus_amount: float = Field(gt=0, le=MAX_AMOUNT, alias="surplusAmount")


class InvestmentRequest(_CamelModel):
    sip_amount: Optional[float] = Field(default=None, ge=0, le=MAX_AMOUNT, alias="sipAmount")
    sip_duration: Optional[float] = Field(default=None, ge=0, le=100, alias="sipDuration")
    expected_return: Optional[float] = Field(default=None, ge=0, le=100, alias="expectedReturn")


class SalaryRequest(_CamelModel):
    salary: float = Field(gt=0, le=MAX_AMOUNT)
    location: Location = "Metro"


class SavingsGoalsRequest(_CamelModel):
    goals: List[Dict[str, Any]] = Field(min_length=1)


class ExpenseDetailsRequest(_CamelModel):
    title: str = Field(min_length=1, max_length=255)
    notes: str = Field(default="", max_length=1000)


class AdvisorRequest(_CamelModel):
    financial_data: Dict[str, Any] = Field(alias="financialData")
