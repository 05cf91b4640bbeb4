"""
Settings for the coin ledger service.

Values come from the process environment, optionally seeded from a
.env file in the working directory. A malformed value fails at
startup rather than on the first request that needs it.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, cast, minimum=None):
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a {cast.__name__}, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


class Settings:
    """Runtime settings, read from the environment when constructed."""

    APP_NAME: str = "Coin Ledger"
    APP_VERSION: str = "0.1.0"

    def __init__(self):
        self.DEBUG: bool = _env_flag("DEBUG", False)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = _env_number("PORT", 8000, int, minimum=1)

        self.DATABASE_URL: str = os.getenv(
            "DATABASE_URL", "postgresql://localhost:5432/coin_ledger"
        )

        # Seconds a mutation may wait behind another one on the same account
        self.LOCK_TIMEOUT_SECONDS: float = _env_number(
            "LOCK_TIMEOUT_SECONDS", 5.0, float, minimum=0
        )
        self.QUIZ_REWARD_PER_CORRECT: int = _env_number(
            "QUIZ_REWARD_PER_CORRECT", 10, int, minimum=1
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
