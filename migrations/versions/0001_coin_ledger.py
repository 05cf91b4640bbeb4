"""create coin ledger tables

Revision ID: 0001_coin_ledger
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_coin_ledger"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "coin_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_sequence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("balance >= 0", name="coins_non_negative"),
    )
    op.create_index(
        "ix_coin_accounts_user_id", "coin_accounts", ["user_id"], unique=True
    )

    op.create_table(
        "coin_transactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("coin_accounts.id"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column(
            "kind",
            sa.Enum("credit", "debit", name="entry_kind_enum"),
            nullable=False,
        ),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(255), nullable=False),
        sa.Column("related_resource", sa.String(255), nullable=True),
        sa.Column("resulting_balance", sa.Integer(), nullable=False),
        sa.Column("idempotency_key", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="amount_positive"),
        sa.CheckConstraint(
            "resulting_balance >= 0", name="resulting_balance_non_negative"
        ),
        sa.UniqueConstraint(
            "account_id", "sequence", name="uq_coin_transactions_account_sequence"
        ),
        sa.UniqueConstraint(
            "account_id", "idempotency_key", name="uq_coin_transactions_idempotency"
        ),
    )
    op.create_index(
        "ix_coin_transactions_account_id", "coin_transactions", ["account_id"]
    )

    op.create_table(
        "user_unlocks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(100), nullable=False),
        sa.Column("game_id", sa.String(100), nullable=False),
        sa.Column("unlocked_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "game_id", name="uq_user_unlocks_user_game"),
    )
    op.create_index("ix_user_unlocks_user_id", "user_unlocks", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_unlocks_user_id", table_name="user_unlocks")
    op.drop_table("user_unlocks")
    op.drop_index("ix_coin_transactions_account_id", table_name="coin_transactions")
    op.drop_table("coin_transactions")
    sa.Enum(name="entry_kind_enum").drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_coin_accounts_user_id", table_name="coin_accounts")
    op.drop_table("coin_accounts")
