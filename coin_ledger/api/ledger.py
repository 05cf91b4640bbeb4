"""
Ledger API endpoints.

The API layer is thin: it handles HTTP concerns and delegates
all business logic to CoinLedger, which commits each mutation
itself.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coin_ledger.models.base import get_db
from coin_ledger.services.ledger_service import CoinLedger
from coin_ledger.schemas.ledger import (
    DebitRequest,
    CreditRequest,
    BalanceChangeResponse,
    ErrorResponse,
)

router = APIRouter(prefix="/ledger", tags=["Ledger"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post(
    "/debit",
    response_model=BalanceChangeResponse,
    responses=ERROR_RESPONSES,
)
def debit(
    request: DebitRequest,
    db: Session = Depends(get_db),
):
    """
    Remove coins from an account.

    Fails with InsufficientBalance (409) when the balance is too
    low; the error body carries the current balance and the
    requested amount.
    """
    new_balance = CoinLedger(db).debit(
        request.account_id,
        request.amount,
        request.reason,
        related_resource=request.related_resource,
        idempotency_key=request.idempotency_key,
    )
    return BalanceChangeResponse(new_balance=new_balance)


@router.post(
    "/credit",
    response_model=BalanceChangeResponse,
    responses=ERROR_RESPONSES,
)
def credit(
    request: CreditRequest,
    db: Session = Depends(get_db),
):
    """Add coins to an account."""
    new_balance = CoinLedger(db).credit(
        request.account_id,
        request.amount,
        request.reason,
        idempotency_key=request.idempotency_key,
    )
    return BalanceChangeResponse(new_balance=new_balance)
