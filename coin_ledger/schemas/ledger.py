"""
Pydantic schemas for ledger operations.

These define the API contract: what data comes in, what data
goes out. Amounts are StrictInt so JSON booleans and numeric
strings are rejected instead of coerced; their range is checked
by the ledger, so a zero or negative amount surfaces as
InvalidAmount rather than as a generic validation error.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, StrictInt

from coin_ledger.models.enums import EntryKind


# --- Request Schemas ---

class AccountOpen(BaseModel):
    user_id: str = Field(min_length=1, max_length=100)
    initial_balance: StrictInt = 0


class DebitRequest(BaseModel):
    account_id: str = Field(min_length=1, max_length=100)
    amount: StrictInt
    reason: str = Field(min_length=1, max_length=255)
    related_resource: str | None = Field(default=None, max_length=255)
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=100)


class CreditRequest(BaseModel):
    account_id: str = Field(min_length=1, max_length=100)
    amount: StrictInt
    reason: str = Field(min_length=1, max_length=255)
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=100)


# --- Response Schemas ---

class BalanceChangeResponse(BaseModel):
    """Response after a successful credit or debit."""
    new_balance: int


class AccountResponse(BaseModel):
    id: int
    user_id: str
    balance: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    account_id: str
    balance: int


class LedgerEntryResponse(BaseModel):
    """Single entry in API responses."""
    id: uuid.UUID
    sequence: int
    kind: EntryKind
    amount: int
    reason: str
    related_resource: str | None
    resulting_balance: int
    idempotency_key: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class LedgerVerification(BaseModel):
    """Outcome of replaying an account's log from zero."""
    account_id: str
    balance: int
    replayed_balance: int
    entry_count: int
    first_mismatch_sequence: int | None = None
    is_consistent: bool


class ErrorResponse(BaseModel):
    """Structured error body returned for every ledger failure."""
    kind: str
    message: str
    current_balance: int | None = None
    requested_amount: int | None = None
