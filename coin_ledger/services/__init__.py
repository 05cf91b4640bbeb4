"""Business logic services."""

from coin_ledger.services.ledger_service import CoinLedger
from coin_ledger.services.unlock_service import GameUnlockService
from coin_ledger.services.reward_service import QuizRewardService

__all__ = ["CoinLedger", "GameUnlockService", "QuizRewardService"]
