"""
Report service: trial balances, profit and loss, balance sheet.

Balances are derived from journal lines at query time and never
stored. Every trial balance row is debits - credits; no sign is
flipped for credit-normal accounts. The profit and loss and the
balance sheet are built on top of the trial balance and apply the
sign per account type.
"""

from datetime import date
from decimal import Decimal

import structlog
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from smb_ledger.models.account import Account
from smb_ledger.models.enums import AccountType, NORMAL_BALANCE_BY_TYPE
from smb_ledger.models.journal import Journal, JournalLine
from smb_ledger.schemas.reports import (
    BalanceSheet,
    ProfitAndLoss,
    ReportLine,
    ReportSection,
    TrialBalance,
    TrialBalanceRow,
)
from smb_ledger.services.journal_builder import to_cents

logger = structlog.get_logger(__name__)

ZERO = Decimal("0.00")
CURRENT_EARNINGS = "Current Earnings (Calculated)"


def _money(value) -> Decimal:
    return to_cents(Decimal(str(value)))


def _wrap(
    company_ids: list[int], as_of: date | None, rows: list[TrialBalanceRow]
) -> TrialBalance:
    total_debits = sum((row.debits for row in rows), Decimal("0"))
    total_credits = sum((row.credits for row in rows), Decimal("0"))
    return TrialBalance(
        company_ids=company_ids,
        as_of=as_of,
        rows=rows,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=total_debits == total_credits,
    )


def _section(
    category: str, rows: list[TrialBalanceRow], debit_normal: bool
) -> ReportSection:
    """Group trial balance rows, signed so the normal side is positive."""
    lines = [
        ReportLine(
            account_code=row.account_code,
            account_name=row.account_name,
            amount=row.balance if debit_normal else ZERO - row.balance,
        )
        for row in rows
    ]
    return ReportSection(
        category=category,
        total=sum((line.amount for line in lines), ZERO),
        accounts=lines,
    )


def _rows_of_type(
    tb: TrialBalance, account_type: AccountType
) -> list[TrialBalanceRow]:
    return [row for row in tb.rows if row.account_type == account_type]


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def _line_totals(
        self,
        company_ids: list[int],
        as_of: date | None,
        start_date: date | None = None,
    ):
        """Per-account debit and credit sums for the companies' journals."""
        query = (
            select(
                JournalLine.account_id.label("account_id"),
                func.sum(JournalLine.debit_amount).label("debits"),
                func.sum(JournalLine.credit_amount).label("credits"),
            )
            .join(Journal, JournalLine.journal_id == Journal.id)
            .where(Journal.company_id.in_(company_ids))
        )
        if start_date is not None:
            query = query.where(Journal.journal_date >= start_date)
        if as_of is not None:
            query = query.where(Journal.journal_date <= as_of)
        return query.group_by(JournalLine.account_id).subquery()

    def get_trial_balance(
        self, company_id: int, as_of: date | None = None
    ) -> TrialBalance:
        """
        Trial balance for one company.

        Every active account gets a row, including accounts with
        no activity. A deactivated account keeps its row while it
        has lines in the period, so the report still balances. The
        as_of filter applies to the journal lines before the join,
        so it never drops an active account.
        """
        return self._trial_balance(company_id, as_of=as_of)

    def _trial_balance(
        self,
        company_id: int,
        as_of: date | None = None,
        start_date: date | None = None,
    ) -> TrialBalance:
        totals = self._line_totals([company_id], as_of, start_date)
        result = self.db.execute(
            select(
                Account,
                func.coalesce(totals.c.debits, 0),
                func.coalesce(totals.c.credits, 0),
            )
            .outerjoin(totals, totals.c.account_id == Account.id)
            .where(
                Account.company_id == company_id,
                or_(
                    Account.is_active.is_(True),
                    totals.c.account_id.is_not(None),
                ),
            )
            .order_by(Account.code)
        ).all()

        rows = []
        for account, debits, credits in result:
            debits, credits = _money(debits), _money(credits)
            rows.append(TrialBalanceRow(
                account_id=account.id,
                account_code=account.code,
                account_name=account.name,
                account_type=account.account_type,
                normal_balance=account.normal_balance,
                debits=debits,
                credits=credits,
                balance=debits - credits,
            ))

        logger.debug(
            "trial_balance_computed",
            company_id=company_id,
            start_date=str(start_date) if start_date else None,
            as_of=str(as_of) if as_of else None,
            rows=len(rows),
        )
        return _wrap([company_id], as_of, rows)

    def get_consolidated_trial_balance(
        self, company_ids: list[int], as_of: date | None = None
    ) -> TrialBalance:
        """
        Pool several companies' books into one trial balance.

        Rows are grouped by (account code, account type); the same
        code in two companies becomes one row with account_id None.
        """
        if not company_ids:
            return _wrap([], as_of, [])

        totals = self._line_totals(company_ids, as_of)
        result = self.db.execute(
            select(
                Account.code,
                Account.account_type,
                func.min(Account.name),
                func.coalesce(func.sum(totals.c.debits), 0),
                func.coalesce(func.sum(totals.c.credits), 0),
            )
            .outerjoin(totals, totals.c.account_id == Account.id)
            .where(
                Account.company_id.in_(company_ids),
                or_(
                    Account.is_active.is_(True),
                    totals.c.account_id.is_not(None),
                ),
            )
            .group_by(Account.code, Account.account_type)
            .order_by(Account.code, Account.account_type)
        ).all()

        rows = []
        for code, account_type, name, debits, credits in result:
            debits, credits = _money(debits), _money(credits)
            rows.append(TrialBalanceRow(
                account_id=None,
                account_code=code,
                account_name=name,
                account_type=account_type,
                normal_balance=NORMAL_BALANCE_BY_TYPE[account_type],
                debits=debits,
                credits=credits,
                balance=debits - credits,
            ))

        logger.debug(
            "consolidated_trial_balance_computed",
            company_ids=company_ids,
            rows=len(rows),
        )
        return _wrap(list(company_ids), as_of, rows)

    def get_profit_and_loss(
        self,
        company_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ProfitAndLoss:
        """
        Revenue less expenses for journals dated in [start_date, end_date].

        Revenue is shown credits - debits and expenses debits -
        credits, so both are positive in the usual case.
        """
        tb = self._trial_balance(company_id, as_of=end_date, start_date=start_date)
        revenue = _section(
            "Revenue", _rows_of_type(tb, AccountType.REVENUE), debit_normal=False
        )
        expenses = _section(
            "Operating Expenses",
            _rows_of_type(tb, AccountType.EXPENSE),
            debit_normal=True,
        )
        return ProfitAndLoss(
            company_id=company_id,
            start_date=start_date,
            end_date=end_date,
            revenue=revenue,
            expenses=expenses,
            net_income=revenue.total - expenses.total,
        )

    def get_balance_sheet(
        self, company_id: int, as_of: date | None = None
    ) -> BalanceSheet:
        """
        Assets against liabilities plus equity as of a date.

        The books are never closed, so revenue and expense balances
        to date are carried into equity as a calculated earnings
        line. is_balanced is then the accounting equation.
        """
        tb = self._trial_balance(company_id, as_of=as_of)
        assets = _section(
            "Assets", _rows_of_type(tb, AccountType.ASSET), debit_normal=True
        )
        liabilities = _section(
            "Liabilities",
            _rows_of_type(tb, AccountType.LIABILITY),
            debit_normal=False,
        )
        equity = _section(
            "Equity", _rows_of_type(tb, AccountType.EQUITY), debit_normal=False
        )

        earnings = ZERO - sum(
            (
                row.balance
                for row in tb.rows
                if row.account_type in (AccountType.REVENUE, AccountType.EXPENSE)
            ),
            ZERO,
        )
        if earnings != 0:
            equity.accounts.append(ReportLine(
                account_code=None,
                account_name=CURRENT_EARNINGS,
                amount=earnings,
            ))
            equity.total += earnings

        return BalanceSheet(
            company_id=company_id,
            as_of=as_of,
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            is_balanced=assets.total == liabilities.total + equity.total,
        )
