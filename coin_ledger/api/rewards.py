"""
Game unlock and quiz reward endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coin_ledger.models.base import get_db
from coin_ledger.services.reward_service import QuizRewardService
from coin_ledger.services.unlock_service import GameUnlockService
from coin_ledger.schemas.rewards import (
    GameUnlockRequest,
    GameUnlockResponse,
    UnlockedGameResponse,
    QuizRewardRequest,
    QuizRewardResponse,
)

router = APIRouter(tags=["Rewards"])


@router.post(
    "/games/{game_id}/unlock",
    response_model=GameUnlockResponse,
    status_code=201,
)
def unlock_game(
    game_id: str,
    request: GameUnlockRequest,
    db: Session = Depends(get_db),
):
    """Spend coins to unlock a game."""
    service = GameUnlockService(db)
    unlock, new_balance = service.unlock_game(
        request.user_id, game_id, request.cost
    )
    return GameUnlockResponse(
        id=unlock.id,
        user_id=unlock.user_id,
        game_id=unlock.game_id,
        unlocked_at=unlock.unlocked_at,
        new_balance=new_balance,
    )


@router.get(
    "/games/unlocked/{user_id}",
    response_model=list[UnlockedGameResponse],
)
def list_unlocked_games(
    user_id: str,
    db: Session = Depends(get_db),
):
    return GameUnlockService(db).list_unlocks(user_id)


@router.post("/quizzes/reward", response_model=QuizRewardResponse)
def reward_quiz(
    request: QuizRewardRequest,
    db: Session = Depends(get_db),
):
    """Credit coins for the correct answers in a finished quiz."""
    service = QuizRewardService(db)
    coins_earned, new_balance = service.award_quiz(
        request.user_id,
        request.correct_answers,
        quiz_id=request.quiz_id,
    )
    return QuizRewardResponse(
        coins_earned=coins_earned,
        new_balance=new_balance,
    )
