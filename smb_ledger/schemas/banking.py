"""
Pydantic schemas for bank connections, imported transactions,
feed sync and reconciliation.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from smb_ledger.models.enums import MatchConfidence


class BankConnectionCreate(BaseModel):
    bank_name: str = Field(min_length=1, max_length=50)
    account_name: str = Field(min_length=1, max_length=100)
    account_number: str | None = Field(default=None, max_length=50)
    provider_account_id: str | None = Field(default=None, max_length=100)


class BankConnectionResponse(BaseModel):
    id: int
    company_id: int
    bank_name: str
    account_name: str
    account_number: str | None
    is_active: bool
    last_synced_at: datetime | None

    model_config = {"from_attributes": True}


class FeedTransaction(BaseModel):
    """One transaction as delivered by the bank feed provider."""
    external_id: str = Field(min_length=1, max_length=100)
    transaction_date: date = Field(alias="date")
    amount: Decimal
    description: str = Field(default="", max_length=255)
    merchant: str | None = None
    category: str | None = None

    model_config = {"populate_by_name": True}


class BankTransactionResponse(BaseModel):
    id: int
    bank_connection_id: int
    external_id: str
    transaction_date: date
    amount: Decimal
    description: str
    merchant: str | None
    category: str | None
    is_reconciled: bool
    reconciled_at: datetime | None

    model_config = {"from_attributes": True}


class ConnectionSyncResult(BaseModel):
    connection_id: int
    imported: int = 0
    skipped: int = 0
    error: str | None = None


class BankSyncRequest(BaseModel):
    connection_id: int | None = None
    lookback_days: int | None = Field(default=None, ge=1, le=365)


class MatchSuggestion(BaseModel):
    transaction_id: int
    match_type: str
    matched_id: int | None
    confidence: MatchConfidence
    score: Decimal
    reasons: list[str]


class AutoReconcileResult(BaseModel):
    matched: int
    suggested: int
    unmatched: int
    auto_matched: list[MatchSuggestion]
    needs_review: list[MatchSuggestion]
