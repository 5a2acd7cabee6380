"""initial schema for FinTrack

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=64), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255)),
        sa.Column("currency", sa.String(length=8), nullable=False, server_default="INR"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)
    op.create_table(
        "user_role",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id"), primary_key=True),
    )
    op.create_table(
        "event_record",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_type", sa.String(length=128), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_event_record_event_type", "event_record", ["event_type"])
    op.create_index("ix_event_record_user_id", "event_record", ["user_id"])
    op.create_index("ix_event_record_created_at", "event_record", ["created_at"])
    op.create_index("ix_event_record_user_event_type", "event_record", ["user_id", "event_type"])

    op.create_table(
        "finance_transaction",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("necessity", sa.String(length=16), nullable=False, server_default="Want"),
        sa.Column("occurred_on", sa.Date(), nullable=False),
        sa.Column("reference", sa.String(length=255)),
        sa.Column("vendor", sa.String(length=255)),
        sa.Column("payment_method", sa.String(length=32), nullable=False, server_default="other"),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_finance_transaction_user_id", "finance_transaction", ["user_id"])
    op.create_index("ix_finance_transaction_user_occurred_on", "finance_transaction", ["user_id", "occurred_on"])
    op.create_index(
        "ix_finance_transaction_user_type_category", "finance_transaction", ["user_id", "type", "category"]
    )

    op.create_table(
        "finance_budget",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("period", sa.String(length=16), nullable=False, server_default="monthly"),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer()),
        sa.Column("week", sa.Integer()),
        *_timestamps(),
    )
    op.create_index("ix_finance_budget_user_id", "finance_budget", ["user_id"])
    op.create_index(
        "ix_finance_budget_user_period", "finance_budget", ["user_id", "period", "year", "month", "week"]
    )

    op.create_table(
        "finance_recurring_transaction",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("frequency", sa.String(length=16), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date()),
        sa.Column("next_due_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("reminder_days", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("last_processed_at", sa.DateTime()),
        sa.Column("reference", sa.String(length=255)),
        *_timestamps(),
    )
    op.create_index("ix_finance_recurring_transaction_user_id", "finance_recurring_transaction", ["user_id"])
    op.create_index(
        "ix_finance_recurring_user_next_due",
        "finance_recurring_transaction",
        ["user_id", "is_active", "next_due_date"],
    )

    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("action_url", sa.String(length=255)),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_notification_user_id", "notification", ["user_id"])
    op.create_index("ix_notification_created_at", "notification", ["created_at"])
    op.create_index("ix_notification_user_read_created", "notification", ["user_id", "is_read", "created_at"])


def downgrade():
    op.drop_table("notification")
    op.drop_table("finance_recurring_transaction")
    op.drop_table("finance_budget")
    op.drop_table("finance_transaction")
    op.drop_table("event_record")
    op.drop_table("user_role")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
    op.drop_table("role")
