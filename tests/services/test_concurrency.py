"""
Concurrency tests for CoinLedger.

Every worker thread gets its own session, the way concurrent
requests would, and all of them hit the same account.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from coin_ledger.errors import InsufficientBalance
from coin_ledger.services.ledger_service import CoinLedger


def run_concurrently(session_factory, operation, count):
    """Run operation(ledger, index) in count threads released at the same time."""
    barrier = threading.Barrier(count)

    def worker(index):
        session = session_factory()
        try:
            barrier.wait()
            return operation(CoinLedger(session), index)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(worker, range(count)))


def try_debit(account_id, amount):
    def operation(ledger, _):
        try:
            return ledger.debit(account_id, amount, "game_unlock")
        except InsufficientBalance as e:
            return e
    return operation


class TestConcurrentDebits:

    def test_over_subscribed_debits(self, ledger, session_factory):
        ledger.open_account("alice", initial_balance=100)

        results = run_concurrently(session_factory, try_debit("alice", 30), 10)

        successes = [r for r in results if isinstance(r, int)]
        failures = [r for r in results if isinstance(r, InsufficientBalance)]
        assert len(successes) == 100 // 30
        assert len(failures) == 10 - 100 // 30
        assert sorted(successes) == [10, 40, 70]
        assert all(f.current_balance == 10 for f in failures)
        assert ledger.get_balance("alice") == 10

    def test_log_stays_consistent(self, ledger, session_factory):
        ledger.open_account("alice", initial_balance=50)

        run_concurrently(session_factory, try_debit("alice", 7), 12)

        verification = ledger.verify_account("alice")
        assert verification.is_consistent
        assert verification.balance == 50 - 7 * (50 // 7)
        assert verification.entry_count == 1 + 50 // 7

    def test_concurrent_credits_all_apply(self, ledger, session_factory):
        ledger.open_account("alice")

        results = run_concurrently(
            session_factory,
            lambda l, _: l.credit("alice", 5, "quiz_reward"),
            8,
        )

        assert sorted(results) == [5, 10, 15, 20, 25, 30, 35, 40]
        assert ledger.get_balance("alice") == 40

    def test_mixed_credits_and_debits(self, ledger, session_factory):
        ledger.open_account("alice", initial_balance=20)

        def operation(l, index):
            if index % 2:
                return try_debit("alice", 15)(l, index)
            return l.credit("alice", 15, "quiz_reward")

        run_concurrently(session_factory, operation, 10)

        verification = ledger.verify_account("alice")
        assert verification.is_consistent
        assert verification.balance >= 0
