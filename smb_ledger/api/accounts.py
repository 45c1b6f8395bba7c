"""
Chart of accounts endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.models.base import get_db
from smb_ledger.schemas.ledger import (
    AccountCreate,
    AccountResponse,
    JournalLineResponse,
)
from smb_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from smb_ledger.services.ledger_service import LedgerService

router = APIRouter(
    prefix="/companies/{company_id}/accounts", tags=["Accounts"]
)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    company_id: int,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
):
    return ChartOfAccountsService(db).get_chart_of_accounts(
        company_id, include_inactive=include_inactive
    )


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    company_id: int,
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    service = ChartOfAccountsService(db)
    try:
        account = service.create_account(company_id, request)
        db.commit()
        return account
    except LedgerError:
        db.rollback()
        raise


@router.post("/initialize", response_model=list[AccountResponse])
def initialize_accounts(company_id: int, db: Session = Depends(get_db)):
    """
    Seed the standard chart of accounts.

    Returns the accounts created; an empty list means the company
    already had a chart.
    """
    service = ChartOfAccountsService(db)
    try:
        accounts = service.initialize_chart_of_accounts(company_id)
        db.commit()
        return accounts
    except LedgerError:
        db.rollback()
        raise


@router.post("/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(
    company_id: int, account_id: int, db: Session = Depends(get_db)
):
    service = ChartOfAccountsService(db)
    try:
        account = service.deactivate_account(company_id, account_id)
        db.commit()
        return account
    except LedgerError:
        db.rollback()
        raise


@router.get("/{account_id}/lines", response_model=list[JournalLineResponse])
def get_account_lines(
    company_id: int, account_id: int, db: Session = Depends(get_db)
):
    """Journal lines posted to an account, newest first."""
    return LedgerService(db).get_lines_by_account(company_id, account_id)
