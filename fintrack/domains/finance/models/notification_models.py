"""In-app notifications."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from fintrack.extensions import db


class Notification(db.Model):
    __tablename__ = "notification"
    __table_args__ = (db.Index("ix_notification_user_read_created", "user_id", "is_read", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    type: Mapped[str] = mapped_column(db.String(32), nullable=False)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    message: Mapped[str] = mapped_column(db.Text, nullable=False)
    priority: Mapped[str] = mapped_column(db.String(16), nullable=False, default="medium")
    is_read: Mapped[bool] = mapped_column(default=False, nullable=False)
    action_url: Mapped[str | None] = mapped_column(db.String(255))
    # "metadata" is reserved on declarative models.
    extra: Mapped[dict] = mapped_column("metadata", db.JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, index=True, nullable=False)
