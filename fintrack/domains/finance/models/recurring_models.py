"""Recurring income/expense templates."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column

from fintrack.extensions import db


class RecurringTransaction(db.Model):
    __tablename__ = "finance_recurring_transaction"
    __table_args__ = (db.Index("ix_finance_recurring_user_next_due", "user_id", "is_active", "next_due_date"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    amount: Mapped[float] = mapped_column(db.Numeric(18, 2), nullable=False)
    type: Mapped[str] = mapped_column(db.String(16), nullable=False)
    category: Mapped[str] = mapped_column(db.String(64), nullable=False)
    frequency: Mapped[str] = mapped_column(db.String(16), nullable=False)
    start_date: Mapped[date] = mapped_column(nullable=False)
    end_date: Mapped[date | None] = mapped_column(nullable=True)
    next_due_date: Mapped[date] = mapped_column(nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    reminder_days: Mapped[int] = mapped_column(default=3, nullable=False)
    last_processed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    reference: Mapped[str | None] = mapped_column(db.String(255))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
