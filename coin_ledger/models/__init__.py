"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from coin_ledger.models.base import Base
from coin_ledger.models.enums import EntryKind, EntryReason
from coin_ledger.models.account import Account
from coin_ledger.models.ledger_entry import LedgerEntry
from coin_ledger.models.game_unlock import GameUnlock

__all__ = [
    "Base",
    "EntryKind",
    "EntryReason",
    "Account",
    "LedgerEntry",
    "GameUnlock",
]
