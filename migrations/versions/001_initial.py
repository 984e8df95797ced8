"""Initial schema — users and challenge registrations

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Changes:
  - Create users table (Telegram account + optional linked e-mail)
  - Create registrations table, one row per user (UNIQUE user_id)
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("telegram_id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_telegram_id", "users", ["telegram_id"], unique=True)

    # ── registrations ─────────────────────────────────────────────────────────
    op.create_table(
        "registrations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.BigInteger(),
            sa.ForeignKey("users.telegram_id"),
            nullable=False,
        ),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("mobile_number", sa.String(32), nullable=False),
        sa.Column("email_address", sa.String(320), nullable=False),
        sa.Column("full_address", sa.String(1000), nullable=False),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("strava_profile_link", sa.String(500), nullable=False),
        sa.Column("tshirt_size", sa.String(10), nullable=False, server_default=""),
        sa.Column("delivery_address", sa.String(1000), nullable=False, server_default=""),
        sa.Column("payment_screenshot_url", sa.String(1000), nullable=False),
        sa.Column("payment_screenshot_name", sa.String(255), nullable=False),
        sa.Column("where_heard", sa.String(100), nullable=False),
        sa.Column("payment_tier", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    # One registration per account
    op.create_index("ix_registrations_user_id", "registrations", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_registrations_user_id", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("ix_users_telegram_id", table_name="users")
    op.drop_table("users")
