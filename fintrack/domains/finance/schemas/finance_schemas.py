"""Pydantic schemas for the finance domain."""

from __future__ import annotations

from datetime import date as date_type
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fintrack.core.utils.validation import sanitize_text
from fintrack.domains.finance.constants import MAX_AMOUNT

TransactionType = Literal["income", "expense"]
Necessity = Literal["Need", "Want", "Savings", "Investment"]
PaymentMethod = Literal["credit_card", "debit_card", "cash", "bank_transfer", "upi", "other"]
BudgetPeriod = Literal["weekly", "monthly", "yearly"]
Frequency = Literal["daily", "weekly", "biweekly", "monthly", "quarterly", "yearly"]


class _Sanitized(BaseModel):
    @field_validator("title", "category", "reference", "vendor", "notes", mode="before", check_fields=False)
    @classmethod
    def _strip_markup(cls, v):
        return sanitize_text(v) if isinstance(v, str) else v


class TransactionCreate(_Sanitized):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=255)
    amount: float = Field(gt=0, le=MAX_AMOUNT)
    type: TransactionType
    category: str = Field(min_length=1, max_length=64)
    occurred_on: date_type = Field(default_factory=date_type.today, alias="date")
    reference: Optional[str] = Field(default=None, max_length=255)
    necessity: Necessity = "Want"
    vendor: Optional[str] = Field(default=None, max_length=255)
    payment_method: PaymentMethod = Field(default="other", alias="paymentMethod")
    notes: Optional[str] = None


class TransactionUpdate(_Sanitized):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[float] = Field(default=None, gt=0, le=MAX_AMOUNT)
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=64)
    occurred_on: Optional[date_type] = Field(default=None, alias="date")
    reference: Optional[str] = Field(default=None, max_length=255)
    necessity: Optional[Necessity] = None


class TransactionFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Optional[TransactionType] = None
    category: Optional[str] = None
    start_date: Optional[date_type] = Field(default=None, alias="startDate")
    end_date: Optional[date_type] = Field(default=None, alias="endDate")
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1, le=200)


class BudgetCreate(BaseModel):
    category: str = Field(min_length=1, max_length=64)
    amount: float = Field(ge=0, le=MAX_AMOUNT)
    period: BudgetPeriod = "monthly"
    year: Optional[int] = Field(default=None, ge=1970, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    week: Optional[int] = Field(default=None, ge=1, le=53)

    @field_validator("category", mode="before")
    @classmethod
    def _clean_category(cls, v):
        return sanitize_text(v) if isinstance(v, str) else v


class BudgetUpdate(BaseModel):
    amount: float = Field(ge=0, le=MAX_AMOUNT)


class BudgetFilters(BaseModel):
    period: Optional[BudgetPeriod] = None
    year: Optional[int] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)


class RecurringCreate(_Sanitized):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=255)
    amount: float = Field(gt=0, le=MAX_AMOUNT)
    type: TransactionType
    category: str = Field(min_length=1, max_length=64)
    frequency: Frequency
    start_date: date_type = Field(alias="startDate")
    end_date: Optional[date_type] = Field(default=None, alias="endDate")
    reminder_days: int = Field(default=3, ge=0, le=60, alias="reminderDays")
    reference: Optional[str] = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def _end_after_start(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RecurringUpdate(_Sanitized):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[float] = Field(default=None, gt=0, le=MAX_AMOUNT)
    frequency: Optional[Frequency] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    reminder_days: Optional[int] = Field(default=None, ge=0, le=60, alias="reminderDays")


class AsOfParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    as_of: Optional[date_type] = Field(default=None, alias="asOf")


class DateRangeParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: date_type = Field(alias="startDate")
    end_date: date_type = Field(alias="endDate")

    @model_validator(mode="after")
    def _ordered(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class ForecastRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    forecast_period: int = Field(default=6, ge=1, alias="forecastPeriod")
    as_of: Optional[date_type] = Field(default=None, alias="asOf")
