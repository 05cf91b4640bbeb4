"""
Tests for the GameUnlockService.
"""

import pytest

from coin_ledger.errors import (
    AccountNotFound,
    GameAlreadyUnlocked,
    InsufficientBalance,
    InvalidAmount,
)
from coin_ledger.models.enums import EntryKind
from coin_ledger.services.unlock_service import GameUnlockService


class TestUnlockGame:

    def test_unlock_charges_cost(self, db_session, ledger):
        ledger.open_account("alice", initial_balance=500)
        service = GameUnlockService(db_session)

        unlock, new_balance = service.unlock_game("alice", "epic-era-battles", 200)

        assert new_balance == 300
        assert unlock.game_id == "epic-era-battles"
        assert unlock.user_id == "alice"

        entry = ledger.get_entries("alice", limit=1)[0]
        assert entry.kind == EntryKind.DEBIT
        assert entry.reason == "game_unlock"
        assert entry.related_resource == "epic-era-battles"

    def test_second_unlock_rejected_without_charge(self, db_session, ledger):
        ledger.open_account("alice", initial_balance=500)
        service = GameUnlockService(db_session)
        service.unlock_game("alice", "epic-era-battles", 200)

        with pytest.raises(GameAlreadyUnlocked):
            service.unlock_game("alice", "epic-era-battles", 200)

        assert ledger.get_balance("alice") == 300

    def test_insufficient_balance_leaves_no_unlock(self, db_session, ledger):
        ledger.open_account("alice", initial_balance=100)
        service = GameUnlockService(db_session)

        with pytest.raises(InsufficientBalance):
            service.unlock_game("alice", "epic-era-battles", 200)

        assert service.get_unlock("alice", "epic-era-battles") is None
        assert service.list_unlocks("alice") == []
        assert ledger.get_balance("alice") == 100

    def test_unknown_user_rejected(self, db_session):
        service = GameUnlockService(db_session)

        with pytest.raises(AccountNotFound):
            service.unlock_game("ghost-id", "epic-era-battles", 200)

        assert service.list_unlocks("ghost-id") == []

    def test_free_game_rejected(self, db_session, ledger):
        ledger.open_account("alice", initial_balance=100)
        service = GameUnlockService(db_session)

        with pytest.raises(InvalidAmount):
            service.unlock_game("alice", "free-game", 0)

    def test_list_unlocks(self, db_session, ledger):
        ledger.open_account("alice", initial_balance=500)
        service = GameUnlockService(db_session)
        service.unlock_game("alice", "epic-era-battles", 200)
        service.unlock_game("alice", "math-maze", 100)

        games = {u.game_id for u in service.list_unlocks("alice")}

        assert games == {"epic-era-battles", "math-maze"}
        assert ledger.get_balance("alice") == 200
        assert ledger.verify_account("alice").is_consistent

    def test_racing_unlock_rejected_without_charge(
        self, db_session, ledger, monkeypatch
    ):
        ledger.open_account("alice", initial_balance=500)
        service = GameUnlockService(db_session)
        service.unlock_game("alice", "epic-era-battles", 200)

        # The other request's unlock lands after this one's pre-check
        monkeypatch.setattr(service, "get_unlock", lambda *args: None)
        with pytest.raises(GameAlreadyUnlocked):
            service.unlock_game("alice", "epic-era-battles", 200)
        monkeypatch.undo()

        assert ledger.get_balance("alice") == 300
        assert len(ledger.get_entries("alice")) == 2
        assert len(service.list_unlocks("alice")) == 1
        assert ledger.verify_account("alice").is_consistent
