"""
Report endpoints: trial balances, profit and loss, balance sheet.

Trial balance rows are debits - credits for every account type.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from smb_ledger.errors import ValidationError
from smb_ledger.models.base import get_db
from smb_ledger.schemas.reports import BalanceSheet, ProfitAndLoss, TrialBalance
from smb_ledger.services.company_service import CompanyService
from smb_ledger.services.report_service import ReportService

router = APIRouter(tags=["Reports"])


@router.get(
    "/companies/{company_id}/reports/trial-balance",
    response_model=TrialBalance,
)
def get_trial_balance(
    company_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    CompanyService(db).get_company(company_id)
    return ReportService(db).get_trial_balance(company_id, as_of=as_of)


@router.get(
    "/companies/{company_id}/reports/profit-and-loss",
    response_model=ProfitAndLoss,
)
def get_profit_and_loss(
    company_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    CompanyService(db).get_company(company_id)
    if start_date and end_date and end_date < start_date:
        raise ValidationError("end_date cannot be before start_date")
    return ReportService(db).get_profit_and_loss(
        company_id, start_date=start_date, end_date=end_date
    )


@router.get(
    "/companies/{company_id}/reports/balance-sheet",
    response_model=BalanceSheet,
)
def get_balance_sheet(
    company_id: int,
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    CompanyService(db).get_company(company_id)
    return ReportService(db).get_balance_sheet(company_id, as_of=as_of)


@router.get(
    "/reports/consolidated-trial-balance", response_model=TrialBalance
)
def get_consolidated_trial_balance(
    company_ids: list[int] = Query(default=[]),
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    return ReportService(db).get_consolidated_trial_balance(
        company_ids, as_of=as_of
    )
