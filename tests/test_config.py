"""
Tests for environment-driven settings.
"""

import pytest

from coin_ledger.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DEBUG", "PORT", "LOCK_TIMEOUT_SECONDS", "QUIZ_REWARD_PER_CORRECT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings()

        assert settings.DEBUG is False
        assert settings.PORT == 8000
        assert settings.LOCK_TIMEOUT_SECONDS == 5.0
        assert settings.QUIZ_REWARD_PER_CORRECT == 10

    def test_values_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "yes")
        monkeypatch.setenv("LOCK_TIMEOUT_SECONDS", "0.5")
        monkeypatch.setenv("QUIZ_REWARD_PER_CORRECT", "25")

        settings = Settings()

        assert settings.DEBUG is True
        assert settings.LOCK_TIMEOUT_SECONDS == 0.5
        assert settings.QUIZ_REWARD_PER_CORRECT == 25

    def test_malformed_number_fails_fast(self, monkeypatch):
        monkeypatch.setenv("QUIZ_REWARD_PER_CORRECT", "ten")

        with pytest.raises(ValueError, match="QUIZ_REWARD_PER_CORRECT"):
            Settings()

    def test_negative_lock_timeout_rejected(self, monkeypatch):
        monkeypatch.setenv("LOCK_TIMEOUT_SECONDS", "-1")

        with pytest.raises(ValueError, match="at least 0"):
            Settings()
