"""
Reconciliation endpoints.

Reconciling is one-way. There is no endpoint to undo it.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.models.base import get_db
from smb_ledger.schemas.banking import (
    AutoReconcileResult,
    BankTransactionResponse,
    MatchSuggestion,
)
from smb_ledger.services.reconciliation_service import ReconciliationService

router = APIRouter(
    prefix="/companies/{company_id}/reconciliation", tags=["Reconciliation"]
)


@router.get("/unreconciled", response_model=list[BankTransactionResponse])
def list_unreconciled(company_id: int, db: Session = Depends(get_db)):
    return ReconciliationService(db).get_unreconciled_transactions(company_id)


@router.post(
    "/{transaction_id}/reconcile", response_model=BankTransactionResponse
)
def reconcile_transaction(
    company_id: int, transaction_id: int, db: Session = Depends(get_db)
):
    service = ReconciliationService(db)
    try:
        transaction = service.reconcile_transaction(company_id, transaction_id)
        db.commit()
        return transaction
    except LedgerError:
        db.rollback()
        raise


@router.get(
    "/{transaction_id}/suggestions", response_model=list[MatchSuggestion]
)
def suggest_matches(
    company_id: int, transaction_id: int, db: Session = Depends(get_db)
):
    return ReconciliationService(db).suggest_matches(company_id, transaction_id)


@router.post("/auto", response_model=AutoReconcileResult)
def auto_reconcile(
    company_id: int,
    threshold: Decimal | None = Query(default=None, gt=0, le=1),
    db: Session = Depends(get_db),
):
    service = ReconciliationService(db)
    try:
        result = service.auto_reconcile(company_id, threshold=threshold)
        db.commit()
        return result
    except LedgerError:
        db.rollback()
        raise
