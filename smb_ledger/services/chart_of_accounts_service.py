"""
Chart of accounts service.

Seeds the standard chart when a company is onboarded and looks
accounts up by code for the posting rules.
"""

import structlog
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from smb_ledger.errors import (
    ConflictError,
    MappingError,
    NotFoundError,
    company_not_found,
)
from smb_ledger.models.account import Account
from smb_ledger.models.company import Company
from smb_ledger.models.enums import AccountType, NORMAL_BALANCE_BY_TYPE
from smb_ledger.schemas.ledger import AccountCreate

logger = structlog.get_logger(__name__)


# Well-known codes used by the posting rules.
CASH_AND_BANK = "1110"
ACCOUNTS_RECEIVABLE = "1120"
VAT_INPUT = "1130"
ACCOUNTS_PAYABLE = "2110"
VAT_PAYABLE = "2120"
VAT_OUTPUT = "2130"
RETAINED_EARNINGS = "3100"
SALES_REVENUE = "4100"
OPERATING_EXPENSES = "5200"

# (code, name, type, parent_code, description)
DEFAULT_CHART: list[tuple[str, str, AccountType, str | None, str]] = [
    ("1000", "Assets", AccountType.ASSET, None, "All company assets"),
    ("1100", "Current Assets", AccountType.ASSET, "1000",
     "Assets convertible to cash within 1 year"),
    ("1110", "Cash and Bank", AccountType.ASSET, "1100",
     "Cash on hand and in bank accounts"),
    ("1120", "Accounts Receivable", AccountType.ASSET, "1100",
     "Money owed by customers"),
    ("1130", "VAT Input", AccountType.ASSET, "1100",
     "VAT paid to suppliers"),
    ("1200", "Fixed Assets", AccountType.ASSET, "1000",
     "Long-term tangible assets"),
    ("2000", "Liabilities", AccountType.LIABILITY, None,
     "All company liabilities"),
    ("2100", "Current Liabilities", AccountType.LIABILITY, "2000",
     "Debts due within 1 year"),
    ("2110", "Accounts Payable", AccountType.LIABILITY, "2100",
     "Money owed to suppliers"),
    ("2120", "VAT Payable", AccountType.LIABILITY, "2100",
     "Net VAT owed to the revenue service"),
    ("2130", "VAT Output", AccountType.LIABILITY, "2100",
     "VAT collected from customers"),
    ("3000", "Equity", AccountType.EQUITY, None, "Owner equity"),
    ("3100", "Retained Earnings", AccountType.EQUITY, "3000",
     "Accumulated profits"),
    ("4000", "Revenue", AccountType.REVENUE, None, "All income"),
    ("4100", "Sales Revenue", AccountType.REVENUE, "4000",
     "Revenue from sales"),
    ("4200", "Other Income", AccountType.REVENUE, "4000",
     "Non-operating income"),
    ("5000", "Expenses", AccountType.EXPENSE, None, "All expenses"),
    ("5100", "Cost of Sales", AccountType.EXPENSE, "5000",
     "Direct costs of goods and services sold"),
    ("5200", "Operating Expenses", AccountType.EXPENSE, "5000",
     "General business expenses"),
    ("5210", "Rent", AccountType.EXPENSE, "5200", "Office and premises rent"),
    ("5220", "Utilities", AccountType.EXPENSE, "5200",
     "Electricity, water and internet"),
    ("5230", "Office Supplies", AccountType.EXPENSE, "5200",
     "Stationery and supplies"),
]


class ChartOfAccountsService:

    def __init__(self, db: Session):
        self.db = db

    def _require_company(self, company_id: int) -> Company:
        company = self.db.get(Company, company_id)
        if not company:
            raise NotFoundError(company_not_found(company_id))
        return company

    def initialize_chart_of_accounts(self, company_id: int) -> list[Account]:
        """
        Seed the standard chart of accounts for a company.

        Seeding twice is a no-op: if the company already has any
        account, nothing is written and an empty list is returned.
        """
        self._require_company(company_id)

        existing = self.db.execute(
            select(func.count(Account.id)).where(
                Account.company_id == company_id
            )
        ).scalar_one()
        if existing:
            logger.info(
                "chart_of_accounts_already_seeded",
                company_id=company_id,
                existing=existing,
            )
            return []

        accounts = []
        for code, name, account_type, parent_code, description in DEFAULT_CHART:
            account = Account(
                company_id=company_id,
                code=code,
                name=name,
                account_type=account_type,
                normal_balance=NORMAL_BALANCE_BY_TYPE[account_type],
                parent_code=parent_code,
                description=description,
            )
            self.db.add(account)
            accounts.append(account)

        self.db.flush()
        logger.info(
            "chart_of_accounts_seeded",
            company_id=company_id,
            accounts=len(accounts),
        )
        return accounts

    def get_chart_of_accounts(
        self, company_id: int, include_inactive: bool = False
    ) -> list[Account]:
        """Return the company's accounts ordered by code."""
        query = select(Account).where(Account.company_id == company_id)
        if not include_inactive:
            query = query.where(Account.is_active.is_(True))
        accounts = self.db.execute(
            query.order_by(Account.code)
        ).scalars().all()
        return list(accounts)

    def get_account_by_code(self, company_id: int, code: str) -> Account:
        """
        Return the active account with this code.

        Raises MappingError if the company has no such active
        account, which is what the posting rules need to report.
        """
        account = self.db.execute(
            select(Account).where(
                Account.company_id == company_id,
                Account.code == code,
                Account.is_active.is_(True),
            )
        ).scalar_one_or_none()
        if not account:
            raise MappingError(
                f"Account {code} not found for company {company_id}. "
                "Initialize the chart of accounts first."
            )
        return account

    def get_accounts_by_codes(
        self, company_id: int, codes: set[str]
    ) -> dict[str, Account]:
        """Resolve several codes at once; missing codes raise MappingError."""
        accounts = self.db.execute(
            select(Account).where(
                Account.company_id == company_id,
                Account.code.in_(codes),
                Account.is_active.is_(True),
            )
        ).scalars().all()
        by_code = {a.code: a for a in accounts}

        missing = codes - set(by_code)
        if missing:
            raise MappingError(
                f"Accounts not found for company {company_id}: "
                f"{', '.join(sorted(missing))}"
            )
        return by_code

    def create_account(
        self, company_id: int, request: AccountCreate
    ) -> Account:
        """Add a custom account to the company's chart."""
        self._require_company(company_id)

        existing = self.db.execute(
            select(Account).where(
                Account.company_id == company_id,
                Account.code == request.code,
            )
        ).scalar_one_or_none()
        if existing:
            raise ConflictError(
                f"Account with code '{request.code}' already exists"
            )

        account = Account(
            company_id=company_id,
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            normal_balance=(
                request.normal_balance
                or NORMAL_BALANCE_BY_TYPE[request.account_type]
            ),
            parent_code=request.parent_code,
            description=request.description,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def deactivate_account(self, company_id: int, account_id: int) -> Account:
        """
        Deactivate an account.

        Accounts are never deleted; an inactive account keeps its
        history but can no longer receive postings.
        """
        account = self.db.get(Account, account_id)
        if not account or account.company_id != company_id:
            raise NotFoundError(f"Account {account_id} not found")

        account.is_active = False
        self.db.flush()
        return account
