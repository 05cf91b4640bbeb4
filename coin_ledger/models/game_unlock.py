"""
Game unlock model.

Records that a user has paid to unlock a game. A game can be
unlocked at most once per user.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from coin_ledger.models.base import Base


class GameUnlock(Base):
    __tablename__ = "user_unlocks"
    __table_args__ = (
        UniqueConstraint("user_id", "game_id", name="uq_user_unlocks_user_game"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    game_id: Mapped[str] = mapped_column(String(100), nullable=False)
    unlocked_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<GameUnlock {self.user_id} {self.game_id}>"
