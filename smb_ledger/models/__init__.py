"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from smb_ledger.models.base import Base
from smb_ledger.models.enums import (
    AccountType,
    NormalBalance,
    SourceType,
    InvoiceStatus,
    RecurringInterval,
    RecurringStatus,
    MatchConfidence,
)
from smb_ledger.models.audit_log import AuditLog
from smb_ledger.models.company import Company
from smb_ledger.models.account import Account
from smb_ledger.models.journal import Journal, JournalLine
from smb_ledger.models.banking import BankConnection, BankTransaction
from smb_ledger.models.recurring import RecurringProfile, RecurringProfileItem
from smb_ledger.models.documents import (
    Invoice,
    InvoiceItem,
    Bill,
    Expense,
    Payment,
)

__all__ = [
    "Base",
    "AccountType",
    "NormalBalance",
    "SourceType",
    "InvoiceStatus",
    "RecurringInterval",
    "RecurringStatus",
    "MatchConfidence",
    "AuditLog",
    "Company",
    "Account",
    "Journal",
    "JournalLine",
    "BankConnection",
    "BankTransaction",
    "RecurringProfile",
    "RecurringProfileItem",
    "Invoice",
    "InvoiceItem",
    "Bill",
    "Expense",
    "Payment",
]
