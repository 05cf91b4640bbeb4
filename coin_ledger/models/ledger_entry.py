"""
Ledger entry model.

Each entry records one balance mutation and the balance that
resulted from it. Entries are immutable: once posted, they are
never modified or deleted.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Integer, DateTime, ForeignKey, CheckConstraint,
    UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coin_ledger.models.base import Base
from coin_ledger.models.enums import EntryKind


class LedgerEntry(Base):
    """
    An immutable credit or debit against one coin account.

    resulting_balance is the account balance after this entry was
    applied, so folding an account's entries in sequence order from
    zero must reproduce every resulting_balance. That invariant is
    enforced by CoinLedger, not by the model.
    """

    __tablename__ = "coin_transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint("resulting_balance >= 0", name="resulting_balance_non_negative"),
        UniqueConstraint("account_id", "sequence", name="uq_coin_transactions_account_sequence"),
        UniqueConstraint("account_id", "idempotency_key", name="uq_coin_transactions_idempotency"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("coin_accounts.id"), nullable=False, index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[EntryKind] = mapped_column(
        SAEnum(
            EntryKind,
            name="entry_kind_enum",
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    related_resource: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    resulting_balance: Mapped[int] = mapped_column(Integer, nullable=False)
    idempotency_key: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    account: Mapped["Account"] = relationship(back_populates="entries")

    @property
    def signed_amount(self) -> int:
        """Amount as a balance delta: positive for credits, negative for debits."""
        return self.amount if self.kind == EntryKind.CREDIT else -self.amount

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry #{self.sequence} {self.kind.value} "
            f"{self.amount} -> {self.resulting_balance}>"
        )
