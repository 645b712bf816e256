"""create accounts, wallets, orders and packages

Revision ID: 5c1e2a7d9b40
Revises: 
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1e2a7d9b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="REGULAR"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("email", sa.String(length=100), unique=True),
        sa.Column("phone_number", sa.String(length=30)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)

    op.create_table(
        "wallets",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("balance_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("balance_cents >= 0", name="ck_wallets_balance_non_negative"),
    )
    op.create_index("ix_wallets_account_id", "wallets", ["account_id"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("order_number", sa.String(length=32), nullable=False),
        sa.Column("owner_account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("purchase_site", sa.String(length=255), nullable=False),
        sa.Column("purchase_link", sa.Text(), nullable=False),
        sa.Column("phone_number", sa.String(length=30), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("additional_info", sa.Text()),
        sa.Column("total_amount_cents", sa.Integer()),
        sa.Column("paid_amount_cents", sa.Integer()),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="PENDING_APPROVAL"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)
    op.create_index("ix_orders_owner_account_id", "orders", ["owner_account_id"])
    op.create_index("ix_orders_status", "orders", ["status"])

    op.create_table(
        "packages",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("tracking_number", sa.String(length=64), nullable=False),
        sa.Column("owner_account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("shop_account_id", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("order_id", sa.String(length=36), sa.ForeignKey("orders.id"), unique=True),
        sa.Column("description", sa.Text()),
        sa.Column("customs_fee_cents", sa.Integer()),
        sa.Column("customs_paid_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="AWAITING_PAYMENT"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_packages_tracking_number", "packages", ["tracking_number"], unique=True)
    op.create_index("ix_packages_owner_account_id", "packages", ["owner_account_id"])
    op.create_index("ix_packages_shop_account_id", "packages", ["shop_account_id"])
    op.create_index("ix_packages_status", "packages", ["status"])

    op.create_table(
        "package_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("package_id", sa.String(length=36), sa.ForeignKey("packages.id"), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("note", sa.String(length=255)),
        sa.Column("actor_account_id", sa.String(length=36), sa.ForeignKey("accounts.id")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_package_events_package_id", "package_events", ["package_id"])

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("wallet_id", sa.String(length=36), sa.ForeignKey("wallets.id"), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("direction", sa.String(length=10), nullable=False),
        sa.Column("reason", sa.String(length=30), nullable=False),
        sa.Column("description", sa.String(length=255)),
        sa.Column("order_id", sa.String(length=36), sa.ForeignKey("orders.id")),
        sa.Column("package_id", sa.String(length=36), sa.ForeignKey("packages.id")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount_cents > 0", name="ck_wallet_transactions_amount_positive"),
    )
    op.create_index("ix_wallet_transactions_wallet_id", "wallet_transactions", ["wallet_id"])
    op.create_index("ix_wallet_transactions_order_id", "wallet_transactions", ["order_id"])
    op.create_index("ix_wallet_transactions_package_id", "wallet_transactions", ["package_id"])


def downgrade() -> None:
    op.drop_index("ix_wallet_transactions_package_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_order_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_wallet_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")

    op.drop_index("ix_package_events_package_id", table_name="package_events")
    op.drop_table("package_events")

    op.drop_index("ix_packages_status", table_name="packages")
    op.drop_index("ix_packages_shop_account_id", table_name="packages")
    op.drop_index("ix_packages_owner_account_id", table_name="packages")
    op.drop_index("ix_packages_tracking_number", table_name="packages")
    op.drop_table("packages")

    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_index("ix_orders_owner_account_id", table_name="orders")
    op.drop_index("ix_orders_order_number", table_name="orders")
    op.drop_table("orders")

    op.drop_index("ix_wallets_account_id", table_name="wallets")
    op.drop_table("wallets")

    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
