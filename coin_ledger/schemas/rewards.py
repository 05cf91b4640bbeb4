"""
Pydantic schemas for the game unlock and quiz reward flows.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, StrictInt


class GameUnlockRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=100)
    cost: StrictInt


class GameUnlockResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    game_id: str
    unlocked_at: datetime
    new_balance: int


class UnlockedGameResponse(BaseModel):
    game_id: str
    unlocked_at: datetime

    model_config = {"from_attributes": True}


class QuizRewardRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=100)
    correct_answers: StrictInt
    quiz_id: str | None = Field(default=None, max_length=100)


class QuizRewardResponse(BaseModel):
    coins_earned: int
    new_balance: int
