"""
Journal endpoints.

Manual journals and reversals are the only ways to write to the
ledger over HTTP; document journals are posted by the document
endpoints. Posted journals cannot be edited or deleted.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.models.base import get_db
from smb_ledger.models.enums import SourceType
from smb_ledger.schemas.ledger import JournalCreate, JournalResponse, JournalReverse
from smb_ledger.services.ledger_service import LedgerService

router = APIRouter(
    prefix="/companies/{company_id}/journals", tags=["Journals"]
)


@router.post("", response_model=JournalResponse, status_code=201)
def post_manual_journal(
    company_id: int,
    request: JournalCreate,
    db: Session = Depends(get_db),
):
    """
    Post a balanced manual journal.

    Lines reference accounts by code. Unbalanced lines are
    rejected and nothing is written.
    """
    service = LedgerService(db)
    try:
        journal = service.post_manual_journal(company_id, request)
        db.commit()
        return journal
    except LedgerError:
        db.rollback()
        raise


@router.get("", response_model=list[JournalResponse])
def list_journals(
    company_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    source_type: SourceType | None = None,
    db: Session = Depends(get_db),
):
    return LedgerService(db).list_journals(
        company_id,
        start_date=start_date,
        end_date=end_date,
        source_type=source_type,
    )


@router.get("/{journal_id}", response_model=JournalResponse)
def get_journal(company_id: int, journal_id: int, db: Session = Depends(get_db)):
    return LedgerService(db).get_journal(company_id, journal_id)


@router.post(
    "/{journal_id}/reverse", response_model=JournalResponse, status_code=201
)
def reverse_journal(
    company_id: int,
    journal_id: int,
    request: JournalReverse,
    db: Session = Depends(get_db),
):
    """Post the mirror image of a journal. A journal can be reversed once."""
    service = LedgerService(db)
    try:
        reversal = service.reverse_journal(
            company_id,
            journal_id,
            reversal_date=request.reversal_date,
            memo=request.memo,
        )
        db.commit()
        return reversal
    except LedgerError:
        db.rollback()
        raise
