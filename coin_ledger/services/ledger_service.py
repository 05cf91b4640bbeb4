"""
Coin ledger: the only code allowed to change a balance.

This service enforces the fundamental rules:
1. Amounts are strictly positive integers
2. A balance never goes negative; over-debits are rejected, not clamped
3. Every balance change appends exactly one immutable entry
   recording the resulting balance
4. Mutations on one account are serialized; read, write and log
   happen as one indivisible step

Each mutation is its own database transaction. The ledger holds
the account lock from the balance read until the commit, so the
ledger, not the caller, commits or rolls back.
"""

import logging
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from coin_ledger.config import get_settings
from coin_ledger.errors import (
    AccountAlreadyExists,
    AccountNotFound,
    IdempotencyConflict,
    InsufficientBalance,
    InvalidAmount,
    StorageUnavailable,
)
from coin_ledger.models.account import Account
from coin_ledger.models.enums import EntryKind, EntryReason
from coin_ledger.models.ledger_entry import LedgerEntry
from coin_ledger.schemas.ledger import LedgerVerification
from coin_ledger.services.account_locks import AccountLockRegistry, account_locks

logger = logging.getLogger(__name__)


def validate_amount(amount) -> int:
    """Return amount if it is a strictly positive integer, else raise InvalidAmount."""
    # bool is a subclass of int but True is not a coin amount
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(amount)
    return amount


def replay_balances(entries: Iterable[LedgerEntry], start: int = 0) -> list[int]:
    """
    Fold entries in order from a starting balance.

    Returns the balance after each entry. For a consistent log
    this list equals the entries' resulting_balance values.
    """
    balances = []
    balance = start
    for entry in entries:
        balance += entry.signed_amount
        balances.append(balance)
    return balances


class CoinLedger:
    """
    All coin balance operations pass through this service.

    The service takes a database session as a constructor
    argument. Read operations leave the session's transaction
    alone; credit and debit commit on success and roll back on
    any failure.
    """

    def __init__(
        self,
        db: Session,
        locks: AccountLockRegistry = account_locks,
        lock_timeout: float | None = None,
    ):
        self.db = db
        self.locks = locks
        if lock_timeout is None:
            lock_timeout = get_settings().LOCK_TIMEOUT_SECONDS
        self.lock_timeout = lock_timeout

    # --- Accounts ---

    def open_account(self, account_id: str, initial_balance: int = 0) -> Account:
        """
        Create a coin account at balance zero.

        A positive initial_balance is posted as an opening credit so
        the log still replays from zero. The account row and the
        opening entry commit together: if either fails, no account
        is left behind.
        """
        if initial_balance != 0:
            validate_amount(initial_balance)

        with self.locks.hold(account_id, self.lock_timeout):
            existing = self.db.execute(
                select(Account).where(Account.user_id == account_id)
            ).scalar_one_or_none()
            if existing:
                raise AccountAlreadyExists(account_id)

            try:
                account = Account(user_id=account_id, balance=0, last_sequence=0)
                self.db.add(account)
                self.db.flush()
                if initial_balance:
                    self._append_entry(
                        account,
                        EntryKind.CREDIT,
                        initial_balance,
                        EntryReason.OPENING_BALANCE.value,
                    )
                self.db.commit()
            except IntegrityError as e:
                # Lost a race with another process opening the same user
                self.db.rollback()
                raise AccountAlreadyExists(account_id) from e
            except (OperationalError, InterfaceError) as e:
                self.db.rollback()
                logger.exception("Storage failure opening account %s", account_id)
                raise StorageUnavailable(f"Could not create account {account_id}") from e
            except Exception:
                self.db.rollback()
                raise

        logger.info("Opened coin account %s with %s coins", account_id, initial_balance)
        return self.get_account(account_id)

    def get_account(self, account_id: str) -> Account:
        # populate_existing: other sessions may have committed since
        # this one last loaded the row
        account = self.db.execute(
            select(Account)
            .where(Account.user_id == account_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not account:
            raise AccountNotFound(account_id)
        return account

    def get_balance(self, account_id: str) -> int:
        return self.get_account(account_id).balance

    def get_entries(
        self, account_id: str, limit: int | None = None
    ) -> list[LedgerEntry]:
        """Return an account's entries, newest first."""
        account = self.get_account(account_id)
        query = (
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account.id)
            .order_by(LedgerEntry.sequence.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def verify_account(self, account_id: str) -> LedgerVerification:
        """
        Replay an account's log from zero and compare it against
        every recorded resulting_balance and the stored balance.
        """
        account = self.get_account(account_id)
        entries = list(self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account.id)
            .order_by(LedgerEntry.sequence)
        ).scalars().all())

        replayed = replay_balances(entries)
        first_mismatch = None
        for entry, expected in zip(entries, replayed):
            if entry.resulting_balance != expected:
                first_mismatch = entry.sequence
                break

        replayed_balance = replayed[-1] if replayed else 0
        consistent = first_mismatch is None and replayed_balance == account.balance
        if not consistent:
            logger.error(
                "Ledger for %s is inconsistent: stored=%s replayed=%s first_mismatch=%s",
                account_id, account.balance, replayed_balance, first_mismatch,
            )

        return LedgerVerification(
            account_id=account_id,
            balance=account.balance,
            replayed_balance=replayed_balance,
            entry_count=len(entries),
            first_mismatch_sequence=first_mismatch,
            is_consistent=consistent,
        )

    # --- Mutations ---

    def debit(
        self,
        account_id: str,
        amount: int,
        reason: str,
        related_resource: str | None = None,
        idempotency_key: str | None = None,
    ) -> int:
        """
        Remove coins from an account and return the new balance.

        Raises InvalidAmount, AccountNotFound, InsufficientBalance
        or StorageUnavailable. On any failure nothing is written.
        """
        return self._apply(
            EntryKind.DEBIT, account_id, amount, reason,
            related_resource=related_resource,
            idempotency_key=idempotency_key,
        )

    def credit(
        self,
        account_id: str,
        amount: int,
        reason: str,
        idempotency_key: str | None = None,
    ) -> int:
        """
        Add coins to an account and return the new balance.

        Raises InvalidAmount, AccountNotFound or StorageUnavailable.
        """
        return self._apply(
            EntryKind.CREDIT, account_id, amount, reason,
            idempotency_key=idempotency_key,
        )

    def _apply(
        self,
        kind: EntryKind,
        account_id: str,
        amount: int,
        reason: str,
        related_resource: str | None = None,
        idempotency_key: str | None = None,
    ) -> int:
        validate_amount(amount)

        with self.locks.hold(account_id, self.lock_timeout):
            try:
                account = self._lock_account(account_id)

                if idempotency_key is not None:
                    previous = self._find_by_idempotency_key(
                        account, idempotency_key
                    )
                    if previous is not None:
                        if (
                            previous.kind != kind
                            or previous.amount != amount
                            or previous.reason != reason
                            or previous.related_resource != related_resource
                        ):
                            raise IdempotencyConflict(idempotency_key)
                        replayed_balance = previous.resulting_balance
                        self.db.rollback()
                        logger.info(
                            "Replayed %s %s for %s (key %s)",
                            kind.value, amount, account_id, idempotency_key,
                        )
                        return replayed_balance

                current = account.balance
                new_balance = self._append_entry(
                    account, kind, amount, reason,
                    related_resource=related_resource,
                    idempotency_key=idempotency_key,
                )
                self.db.commit()
            except (OperationalError, InterfaceError) as e:
                self.db.rollback()
                logger.exception("Storage failure during %s on %s", kind.value, account_id)
                raise StorageUnavailable(
                    f"Ledger storage unavailable during {kind.value} on {account_id}"
                ) from e
            except InsufficientBalance as e:
                self.db.rollback()
                logger.warning(
                    "Rejected debit of %s from %s: balance %s",
                    amount, account_id, e.current_balance,
                )
                raise
            except Exception:
                self.db.rollback()
                raise

        logger.info(
            "%s %s coins on %s (%s): balance %s -> %s",
            kind.value.capitalize(), amount, account_id, reason,
            current, new_balance,
        )
        return new_balance

    def _append_entry(
        self,
        account: Account,
        kind: EntryKind,
        amount: int,
        reason: str,
        related_resource: str | None = None,
        idempotency_key: str | None = None,
    ) -> int:
        """
        Apply one entry to a locked account and flush it, without committing.

        Returns the resulting balance.
        """
        current = account.balance
        if kind == EntryKind.DEBIT:
            if current < amount:
                raise InsufficientBalance(current, amount)
            new_balance = current - amount
        else:
            new_balance = current + amount

        account.balance = new_balance
        account.last_sequence += 1
        self.db.add(LedgerEntry(
            account_id=account.id,
            sequence=account.last_sequence,
            kind=kind,
            amount=amount,
            reason=reason,
            related_resource=related_resource,
            resulting_balance=new_balance,
            idempotency_key=idempotency_key,
        ))
        self.db.flush()
        return new_balance

    def _lock_account(self, account_id: str) -> Account:
        """Load the account row with a row lock, bypassing the identity map."""
        account = self.db.execute(
            select(Account)
            .where(Account.user_id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not account:
            raise AccountNotFound(account_id)
        return account

    def _find_by_idempotency_key(
        self, account: Account, idempotency_key: str
    ) -> LedgerEntry | None:
        return self.db.execute(
            select(LedgerEntry).where(
                LedgerEntry.account_id == account.id,
                LedgerEntry.idempotency_key == idempotency_key,
            )
        ).scalar_one_or_none()
