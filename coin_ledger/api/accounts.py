"""
Coin account API endpoints.

Ledger errors raised here are turned into structured responses
by the application's exception handler.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coin_ledger.models.base import get_db
from coin_ledger.services.ledger_service import CoinLedger
from coin_ledger.schemas.ledger import (
    AccountOpen,
    AccountResponse,
    AccountBalanceResponse,
    LedgerEntryResponse,
    LedgerVerification,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def open_account(
    request: AccountOpen,
    db: Session = Depends(get_db),
):
    """
    Open a coin account for a user.

    A non-zero initial balance is recorded as an opening credit.
    """
    ledger = CoinLedger(db)
    return ledger.open_account(request.user_id, request.initial_balance)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    db: Session = Depends(get_db),
):
    return CoinLedger(db).get_account(account_id)


@router.get("/{account_id}/balance", response_model=AccountBalanceResponse)
def get_balance(
    account_id: str,
    db: Session = Depends(get_db),
):
    balance = CoinLedger(db).get_balance(account_id)
    return AccountBalanceResponse(account_id=account_id, balance=balance)


@router.get(
    "/{account_id}/entries",
    response_model=list[LedgerEntryResponse],
)
def get_entries(
    account_id: str,
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Get ledger entries for an account, newest first."""
    return CoinLedger(db).get_entries(account_id, limit=limit)


@router.get("/{account_id}/verify", response_model=LedgerVerification)
def verify_account(
    account_id: str,
    db: Session = Depends(get_db),
):
    """Replay the account's log and check it against the stored balance."""
    return CoinLedger(db).verify_account(account_id)
