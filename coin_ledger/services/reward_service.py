"""
Quiz reward service: credits coins for correct quiz answers.
"""

from sqlalchemy.orm import Session

from coin_ledger.config import get_settings
from coin_ledger.errors import InvalidAmount
from coin_ledger.models.enums import EntryReason
from coin_ledger.services.ledger_service import CoinLedger


class QuizRewardService:

    def __init__(
        self,
        db: Session,
        ledger: CoinLedger | None = None,
        coins_per_correct: int | None = None,
    ):
        self.db = db
        self.ledger = ledger or CoinLedger(db)
        if coins_per_correct is None:
            coins_per_correct = get_settings().QUIZ_REWARD_PER_CORRECT
        self.coins_per_correct = coins_per_correct

    def award_quiz(
        self,
        user_id: str,
        correct_answers: int,
        quiz_id: str | None = None,
    ) -> tuple[int, int]:
        """
        Credit the reward for a finished quiz.

        Returns (coins_earned, new_balance). A quiz with no correct
        answers earns nothing and leaves the ledger untouched. When
        quiz_id is given, the reward is keyed on it so the same quiz
        attempt is never paid twice.
        """
        if (
            isinstance(correct_answers, bool)
            or not isinstance(correct_answers, int)
            or correct_answers < 0
        ):
            raise InvalidAmount(correct_answers)

        coins = correct_answers * self.coins_per_correct
        if coins == 0:
            return 0, self.ledger.get_balance(user_id)

        idempotency_key = f"quiz:{quiz_id}" if quiz_id else None
        new_balance = self.ledger.credit(
            user_id,
            coins,
            EntryReason.QUIZ_REWARD.value,
            idempotency_key=idempotency_key,
        )
        return coins, new_balance
