"""
Game unlock service: spends coins to unlock a game.

The unlock record and the debit are committed together. The
unlock row is added to the session first and the ledger's
commit carries it; if the debit fails, the ledger's rollback
discards the unlock as well.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coin_ledger.errors import GameAlreadyUnlocked
from coin_ledger.models.enums import EntryReason
from coin_ledger.models.game_unlock import GameUnlock
from coin_ledger.services.ledger_service import CoinLedger, validate_amount

logger = logging.getLogger(__name__)


class GameUnlockService:

    def __init__(self, db: Session, ledger: CoinLedger | None = None):
        self.db = db
        self.ledger = ledger or CoinLedger(db)

    def unlock_game(
        self, user_id: str, game_id: str, cost: int
    ) -> tuple[GameUnlock, int]:
        """
        Unlock a game for a user and charge its cost.

        Returns the unlock record and the user's new balance.
        Raises GameAlreadyUnlocked without charging if the user
        already owns the game.
        """
        validate_amount(cost)

        if self.get_unlock(user_id, game_id):
            raise GameAlreadyUnlocked(user_id, game_id)

        unlock = GameUnlock(user_id=user_id, game_id=game_id)
        self.db.add(unlock)
        try:
            new_balance = self.ledger.debit(
                user_id,
                cost,
                EntryReason.GAME_UNLOCK.value,
                related_resource=game_id,
            )
        except IntegrityError as e:
            # A concurrent request unlocked the same game first
            raise GameAlreadyUnlocked(user_id, game_id) from e

        logger.info("Unlocked %s for %s at %s coins", game_id, user_id, cost)
        return unlock, new_balance

    def get_unlock(self, user_id: str, game_id: str) -> GameUnlock | None:
        return self.db.execute(
            select(GameUnlock).where(
                GameUnlock.user_id == user_id,
                GameUnlock.game_id == game_id,
            )
        ).scalar_one_or_none()

    def list_unlocks(self, user_id: str) -> list[GameUnlock]:
        """Return every game a user has unlocked, oldest first."""
        unlocks = self.db.execute(
            select(GameUnlock)
            .where(GameUnlock.user_id == user_id)
            .order_by(GameUnlock.unlocked_at)
        ).scalars().all()
        return list(unlocks)
