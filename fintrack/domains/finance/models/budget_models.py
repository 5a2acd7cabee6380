"""Spending budget model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from fintrack.extensions import db


class Budget(db.Model):
    __tablename__ = "finance_budget"
    __table_args__ = (db.Index("ix_finance_budget_user_period", "user_id", "period", "year", "month", "week"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    category: Mapped[str] = mapped_column(db.String(64), nullable=False)
    amount: Mapped[float] = mapped_column(db.Numeric(18, 2), nullable=False)
    period: Mapped[str] = mapped_column(db.String(16), nullable=False, default="monthly")
    year: Mapped[int] = mapped_column(nullable=False)
    month: Mapped[int | None] = mapped_column(nullable=True)
    week: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
