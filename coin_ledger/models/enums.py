"""
Shared enumerations for database models.

Mapped to database enums so an invalid entry kind is rejected
by the database, not just by Python validation.
"""

import enum


class EntryKind(str, enum.Enum):
    """Direction of a coin ledger entry."""
    CREDIT = "credit"
    DEBIT = "debit"


class EntryReason(str, enum.Enum):
    """Reason tags used by the built-in callers.

    The ledger itself accepts any free-form reason string.
    """
    GAME_UNLOCK = "game_unlock"
    QUIZ_REWARD = "quiz_reward"
    OPENING_BALANCE = "opening_balance"
