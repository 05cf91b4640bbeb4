"""Exception hierarchy for coin ledger operations."""

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Base ledger error with a stable machine-readable kind."""

    kind = "LedgerError"
    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error in the API error shape."""
        return {"kind": self.kind, "message": self.message}


class InvalidAmount(LedgerError):
    """Raised when an amount is not a strictly positive integer."""

    kind = "InvalidAmount"

    def __init__(self, amount: Any) -> None:
        self.amount = amount
        super().__init__(f"Amount must be a positive integer, got {amount!r}")


class AccountNotFound(LedgerError):
    """Raised when no coin account exists for the given user."""

    kind = "AccountNotFound"
    status_code = 404

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"Account {account_id} not found")


class InsufficientBalance(LedgerError):
    """Raised when a debit exceeds the current balance."""

    kind = "InsufficientBalance"
    status_code = 409

    def __init__(self, current_balance: int, requested_amount: int) -> None:
        self.current_balance = current_balance
        self.requested_amount = requested_amount
        super().__init__(
            f"Insufficient coins. Have: {current_balance}, Need: {requested_amount}"
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["current_balance"] = self.current_balance
        data["requested_amount"] = self.requested_amount
        return data


class StorageUnavailable(LedgerError):
    """Raised on a transient failure of the account or log store.

    The mutation was rolled back. Retrying is the caller's decision.
    """

    kind = "StorageUnavailable"
    status_code = 503


class AccountAlreadyExists(LedgerError):
    """Raised when opening an account for a user that already has one."""

    kind = "AccountAlreadyExists"
    status_code = 409

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"Account {account_id} already exists")


class IdempotencyConflict(LedgerError):
    """Raised when an idempotency key is reused for a different mutation."""

    kind = "IdempotencyConflict"
    status_code = 409

    def __init__(self, idempotency_key: str) -> None:
        self.idempotency_key = idempotency_key
        super().__init__(
            f"Idempotency key '{idempotency_key}' was already used "
            f"for a different operation"
        )


class GameAlreadyUnlocked(LedgerError):
    """Raised when a user tries to unlock a game they already own."""

    kind = "GameAlreadyUnlocked"
    status_code = 409

    def __init__(self, user_id: str, game_id: str) -> None:
        self.user_id = user_id
        self.game_id = game_id
        super().__init__(f"Game '{game_id}' is already unlocked for {user_id}")
