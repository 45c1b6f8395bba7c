"""Business logic services."""

from smb_ledger.services.bank_sync_service import BankSyncService
from smb_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from smb_ledger.services.company_service import CompanyService
from smb_ledger.services.document_service import DocumentService
from smb_ledger.services.journal_builder import JournalBuilder
from smb_ledger.services.ledger_service import LedgerService
from smb_ledger.services.reconciliation_service import ReconciliationService
from smb_ledger.services.recurring_service import RecurringService
from smb_ledger.services.report_service import ReportService

__all__ = [
    "BankSyncService",
    "ChartOfAccountsService",
    "CompanyService",
    "DocumentService",
    "JournalBuilder",
    "LedgerService",
    "ReconciliationService",
    "RecurringService",
    "ReportService",
]
