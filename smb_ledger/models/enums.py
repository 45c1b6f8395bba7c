"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid account type
or source type is caught at the database level, not just
in Python validation.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class NormalBalance(str, enum.Enum):
    """The side on which an account's balance normally sits."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


NORMAL_BALANCE_BY_TYPE: dict[AccountType, NormalBalance] = {
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.REVENUE: NormalBalance.CREDIT,
}


class SourceType(str, enum.Enum):
    """The kind of business document a journal was posted from."""
    INVOICE = "INVOICE"
    BILL = "BILL"
    EXPENSE = "EXPENSE"
    PAYMENT = "PAYMENT"
    MANUAL = "MANUAL"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class RecurringInterval(str, enum.Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class RecurringStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


class MatchConfidence(str, enum.Enum):
    """How sure the matcher is that a bank line belongs to a document."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
