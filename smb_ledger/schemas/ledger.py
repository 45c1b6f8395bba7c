"""
Pydantic schemas for ledger operations.

These define the API contract and the in-memory shapes the
journal builder works with. They are separate from the database
models because the API shape and the storage shape differ.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from smb_ledger.errors import IntegrityError
from smb_ledger.models.enums import AccountType, NormalBalance, SourceType


# --- Request Schemas ---

class JournalLineCreate(BaseModel):
    """A single debit or credit line, addressed by account code."""
    account_code: str = Field(min_length=1, max_length=20)
    debit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    credit: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    description: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def exactly_one_side(self) -> "JournalLineCreate":
        if (self.debit > 0) == (self.credit > 0):
            raise ValueError(
                "each journal line must have either a debit or a credit amount"
            )
        return self


class JournalCreate(BaseModel):
    """
    A manual journal entry.

    Manual journals have no source document; lines are supplied
    directly and must balance.
    """
    journal_date: date
    memo: str = Field(min_length=1, max_length=255)
    lines: list[JournalLineCreate] = Field(min_length=2)


class JournalReverse(BaseModel):
    reversal_date: date | None = None
    memo: str | None = Field(default=None, max_length=255)


class SourceDocument(BaseModel):
    """
    The fields of a business document the builder needs.

    amount is the gross (tax-inclusive) document total.
    """
    company_id: int
    source_type: SourceType
    source_id: str = Field(min_length=1, max_length=64)
    document_date: date
    amount: Decimal
    tax_amount: Decimal = Decimal("0")
    reference: str = Field(min_length=1, max_length=100)
    counterpart_account_code: str | None = None
    method: str = "Bank"


class DraftLine(BaseModel):
    account_code: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    description: str | None = None


class JournalDraft(BaseModel):
    """A fully built, not yet persisted journal entry."""
    company_id: int
    journal_date: date
    source_type: SourceType
    source_id: str | None = None
    memo: str
    lines: list[DraftLine]

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))

    def assert_balanced(self) -> None:
        """Raise IntegrityError unless every line is one-sided and the entry balances."""
        if len(self.lines) < 2:
            raise IntegrityError("A journal needs at least two lines")
        for line in self.lines:
            if line.debit < 0 or line.credit < 0:
                raise IntegrityError("Journal line amounts cannot be negative")
            if (line.debit > 0) == (line.credit > 0):
                raise IntegrityError(
                    "Each journal line must be either debit or credit, not both"
                )
        if self.total_debit != self.total_credit:
            raise IntegrityError(
                f"Journal not balanced: debits={self.total_debit}, "
                f"credits={self.total_credit}"
            )


# --- Response Schemas ---

class JournalLineResponse(BaseModel):
    id: int
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    description: str | None

    model_config = {"from_attributes": True}


class JournalResponse(BaseModel):
    id: int
    company_id: int
    journal_date: date
    source_type: SourceType
    source_id: str | None
    memo: str | None
    reverses_journal_id: int | None
    created_at: datetime
    lines: list[JournalLineResponse]

    model_config = {"from_attributes": True}


class AccountCreate(BaseModel):
    """Request to add a custom account to a company's chart."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType
    normal_balance: NormalBalance | None = None
    parent_code: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=255)

    @field_validator("code")
    @classmethod
    def code_is_numeric(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError("account code must contain digits only")
        return v


class AccountResponse(BaseModel):
    id: int
    company_id: int
    code: str
    name: str
    account_type: AccountType
    normal_balance: NormalBalance
    parent_code: str | None
    description: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}

