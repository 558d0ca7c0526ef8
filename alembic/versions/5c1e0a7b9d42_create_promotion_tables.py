"""Create novels, payments and notifications tables

Revision ID: 5c1e0a7b9d42
Revises:
Create Date: 2026-10-18 09:12:40.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c1e0a7b9d42'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    # ---- Novels ----
    op.create_table(
        "novels",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("reference", sa.String(), nullable=True),
        sa.Column("is_promoted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("promotion_plan", sa.String(), nullable=True),
        sa.Column("promotion_start_date", sa.DateTime(), nullable=True),
        sa.Column("promotion_end_date", sa.DateTime(), nullable=True),
        sa.Column(
            "promotion_end_notification_sent",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_novels_reference", "novels", ["reference"])

    # ---- Payments ----
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("book_id", sa.String(), nullable=False),
        sa.Column("plan_id", sa.String(), nullable=False),
        sa.Column("reference", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payments_user_id", "payments", ["user_id"])
    op.create_index("ix_payments_book_id", "payments", ["book_id"])
    op.create_index("ix_payments_reference", "payments", ["reference"])

    # ---- Notifications ----
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("book_id", sa.String(), nullable=False),
        sa.Column("trigger_source", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.String(), nullable=False),
        sa.Column("channel", sa.Enum("email", "system", name="notificationchannel"), nullable=False),
        sa.Column("status", sa.Enum("sent", "failed", name="notificationstatus"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])


def downgrade():
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    sa.Enum(name="notificationstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="notificationchannel").drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_payments_reference", table_name="payments")
    op.drop_index("ix_payments_book_id", table_name="payments")
    op.drop_index("ix_payments_user_id", table_name="payments")
    op.drop_table("payments")

    op.drop_index("ix_novels_reference", table_name="novels")
    op.drop_table("novels")
