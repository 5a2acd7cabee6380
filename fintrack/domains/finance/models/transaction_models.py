"""Income/expense transaction model."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column

from fintrack.extensions import db


class Transaction(db.Model):
    __tablename__ = "finance_transaction"
    __table_args__ = (
        db.Index("ix_finance_transaction_user_occurred_on", "user_id", "occurred_on"),
        db.Index("ix_finance_transaction_user_type_category", "user_id", "type", "category"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    amount: Mapped[float] = mapped_column(db.Numeric(18, 2), nullable=False)
    type: Mapped[str] = mapped_column(db.String(16), nullable=False)
    # Values: 'income', 'expense'
    category: Mapped[str] = mapped_column(db.String(64), nullable=False)
    necessity: Mapped[str] = mapped_column(db.String(16), nullable=False, default="Want")
    occurred_on: Mapped[date] = mapped_column(default=date.today, nullable=False)
    reference: Mapped[str | None] = mapped_column(db.String(255))
    vendor: Mapped[str | None] = mapped_column(db.String(255))
    payment_method: Mapped[str] = mapped_column(db.String(32), nullable=False, default="other")
    notes: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
