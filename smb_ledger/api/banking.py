"""
Bank connection and feed sync endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.integrations.bank_feed import BankFeedClient
from smb_ledger.models.base import get_db
from smb_ledger.schemas.banking import (
    BankConnectionCreate,
    BankConnectionResponse,
    BankSyncRequest,
    ConnectionSyncResult,
)
from smb_ledger.services.bank_sync_service import BankSyncService

router = APIRouter(prefix="/companies/{company_id}", tags=["Banking"])


def get_bank_feed():
    """Bank feed client for one request; overridden in tests."""
    with BankFeedClient() as client:
        yield client


@router.post(
    "/bank-connections", response_model=BankConnectionResponse, status_code=201
)
def create_bank_connection(
    company_id: int,
    request: BankConnectionCreate,
    db: Session = Depends(get_db),
):
    service = BankSyncService(db)
    try:
        connection = service.create_connection(company_id, request)
        db.commit()
        return connection
    except LedgerError:
        db.rollback()
        raise


@router.get("/bank-connections", response_model=list[BankConnectionResponse])
def list_bank_connections(
    company_id: int,
    db: Session = Depends(get_db),
):
    return BankSyncService(db).list_connections(company_id)


@router.post("/banking/sync", response_model=list[ConnectionSyncResult])
def sync_bank_feeds(
    company_id: int,
    request: BankSyncRequest,
    db: Session = Depends(get_db),
    feed=Depends(get_bank_feed),
):
    """
    Import new transactions from the bank feed.

    Each connection reports its own result; a failing connection
    does not stop the others.
    """
    service = BankSyncService(db, feed)
    try:
        results = service.sync_company(
            company_id,
            connection_id=request.connection_id,
            lookback_days=request.lookback_days,
        )
        db.commit()
        return results
    except LedgerError:
        db.rollback()
        raise
