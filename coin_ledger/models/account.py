"""
Coin account model.

One row per user. The balance is a cached projection of the
account's ledger entries: it is only ever changed by
CoinLedger.credit / CoinLedger.debit, which append an entry in
the same transaction.
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coin_ledger.models.base import Base


class Account(Base):
    __tablename__ = "coin_accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="coins_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    balance: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    # Sequence number of the most recent ledger entry.
    # Incremented under the account lock.
    last_sequence: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="account",
        order_by="LedgerEntry.sequence",
    )

    def __repr__(self) -> str:
        return f"<Account {self.user_id} balance={self.balance}>"
