"""
Per-account mutual exclusion for ledger mutations.

Each account id maps to its own lock, so mutations on the same
account run one at a time while different accounts never wait
on each other. Locks are reference counted and dropped from the
registry once nobody holds or waits on them.

This serializes writers inside one process. Across processes the
ledger additionally relies on SELECT ... FOR UPDATE on the
account row.
"""

import threading
from contextlib import contextmanager

from coin_ledger.errors import StorageUnavailable


class AccountLockRegistry:

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._users: dict[str, int] = {}

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
                self._users[key] = 0
            self._users[key] += 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: str, timeout: float):
        """
        Hold the lock for one account for the duration of the block.

        Raises StorageUnavailable if the lock can't be acquired
        within timeout seconds.
        """
        lock = self._checkout(key)
        try:
            if not lock.acquire(timeout=timeout):
                raise StorageUnavailable(
                    f"Timed out after {timeout}s waiting for account {key}"
                )
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Shared by every CoinLedger instance in the process. Each request
# builds its own ledger around its own session, so the registry
# can't live on the instance.
account_locks = AccountLockRegistry()
