"""initial schema: funds, users, ledger, holdings, sip plans, alerts

Revision ID: 4a1f0c2e9b7d
Revises:
Create Date: 2026-10-18 09:00:00
"""

from alembic import op
import sqlalchemy as sa


revision = "4a1f0c2e9b7d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "funds",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("amc", sa.String(length=100), nullable=False),
        sa.Column("current_nav", sa.Numeric(10, 4), nullable=False),
        sa.Column("expense_ratio", sa.Numeric(5, 2), nullable=True),
        sa.Column("risk_level", sa.String(length=20), nullable=False),
        sa.Column("nav_updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_funds_category", "funds", ["category"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("fund_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("units", sa.Numeric(15, 4), nullable=True),
        sa.Column("nav", sa.Numeric(10, 4), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transactions_user", "transactions", ["user_id", "created_at"])

    op.create_table(
        "holdings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("fund_id", sa.Integer(), nullable=False),
        sa.Column("units", sa.Numeric(15, 4), nullable=False),
        sa.Column("avg_nav", sa.Numeric(10, 4), nullable=False),
        sa.Column("total_invested", sa.Numeric(15, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "fund_id", name="uq_holdings_user_fund"),
    )
    op.create_index("ix_holdings_user", "holdings", ["user_id"])
    op.create_index("ix_holdings_fund", "holdings", ["fund_id"])

    op.create_table(
        "sip_plans",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("fund_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("frequency", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("next_date", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_sip_plans_user", "sip_plans", ["user_id"])

    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_alerts_user", "alerts", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_alerts_user", table_name="alerts")
    op.drop_table("alerts")
    op.drop_index("ix_sip_plans_user", table_name="sip_plans")
    op.drop_table("sip_plans")
    op.drop_index("ix_holdings_fund", table_name="holdings")
    op.drop_index("ix_holdings_user", table_name="holdings")
    op.drop_table("holdings")
    op.drop_index("ix_transactions_user", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_funds_category", table_name="funds")
    op.drop_table("funds")
