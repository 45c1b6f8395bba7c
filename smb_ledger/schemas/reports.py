"""
Pydantic schemas for financial reports.

A trial balance row's balance is always debits - credits, whatever
the account type, so credit-normal accounts show negative balances.
The profit and loss and balance sheet flip the sign per account type.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from smb_ledger.models.enums import AccountType, NormalBalance


class TrialBalanceRow(BaseModel):
    account_id: int | None
    account_code: str
    account_name: str
    account_type: AccountType
    normal_balance: NormalBalance
    debits: Decimal
    credits: Decimal
    balance: Decimal


class TrialBalance(BaseModel):
    company_ids: list[int]
    as_of: date | None
    rows: list[TrialBalanceRow]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool

    def row_for(self, account_code: str) -> TrialBalanceRow | None:
        for row in self.rows:
            if row.account_code == account_code:
                return row
        return None



class ReportLine(BaseModel):
    account_code: str | None
    account_name: str
    amount: Decimal


class ReportSection(BaseModel):
    category: str
    total: Decimal
    accounts: list[ReportLine]


class ProfitAndLoss(BaseModel):
    company_id: int
    start_date: date | None
    end_date: date | None
    revenue: ReportSection
    expenses: ReportSection
    net_income: Decimal


class BalanceSheet(BaseModel):
    """Assets = Liabilities + Equity, each shown on its normal side."""
    company_id: int
    as_of: date | None
    assets: ReportSection
    liabilities: ReportSection
    equity: ReportSection
    is_balanced: bool
