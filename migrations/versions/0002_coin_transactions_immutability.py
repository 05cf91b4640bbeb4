"""enforce append-only coin transactions

Revision ID: 0002_coin_transactions_immutability
Revises: 0001_coin_ledger
Create Date: 2026-10-18
"""

from alembic import op


revision = "0002_coin_transactions_immutability"
down_revision = "0001_coin_ledger"
branch_labels = None
depends_on = None


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute(
        """
        CREATE OR REPLACE FUNCTION prevent_coin_transaction_mutation()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            RAISE EXCEPTION 'coin_transactions is append-only; % is not allowed', TG_OP;
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_coin_transactions_immutable
        BEFORE UPDATE OR DELETE ON coin_transactions
        FOR EACH ROW
        EXECUTE FUNCTION prevent_coin_transaction_mutation();
        """
    )


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("DROP TRIGGER IF EXISTS trg_coin_transactions_immutable ON coin_transactions;")
    op.execute("DROP FUNCTION IF EXISTS prevent_coin_transaction_mutation();")
