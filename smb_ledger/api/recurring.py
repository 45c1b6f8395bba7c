"""
Recurring invoice profile endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.models.base import get_db
from smb_ledger.schemas.recurring import (
    RecurringProcessRequest,
    RecurringProfileCreate,
    RecurringProfileResponse,
    RecurringRunResult,
)
from smb_ledger.services.recurring_service import RecurringService

router = APIRouter(
    prefix="/companies/{company_id}/recurring-profiles", tags=["Recurring"]
)


@router.post("", response_model=RecurringProfileResponse, status_code=201)
def create_profile(
    company_id: int,
    request: RecurringProfileCreate,
    db: Session = Depends(get_db),
):
    service = RecurringService(db)
    try:
        profile = service.create_profile(company_id, request)
        db.commit()
        return profile
    except LedgerError:
        db.rollback()
        raise


@router.get("", response_model=list[RecurringProfileResponse])
def list_profiles(company_id: int, db: Session = Depends(get_db)):
    return RecurringService(db).list_profiles(company_id)


@router.post("/process", response_model=RecurringRunResult)
def process_due_profiles(
    company_id: int,
    request: RecurringProcessRequest,
    db: Session = Depends(get_db),
):
    """
    Generate invoices for every due profile.

    Failed profiles are counted in errors; the rest still run.
    """
    service = RecurringService(db)
    try:
        result = service.process_due_profiles(company_id, today=request.today)
        db.commit()
        return result
    except LedgerError:
        db.rollback()
        raise


@router.post("/{profile_id}/pause", response_model=RecurringProfileResponse)
def pause_profile(
    company_id: int, profile_id: int, db: Session = Depends(get_db)
):
    service = RecurringService(db)
    try:
        profile = service.pause_profile(company_id, profile_id)
        db.commit()
        return profile
    except LedgerError:
        db.rollback()
        raise


@router.post("/{profile_id}/resume", response_model=RecurringProfileResponse)
def resume_profile(
    company_id: int, profile_id: int, db: Session = Depends(get_db)
):
    service = RecurringService(db)
    try:
        profile = service.resume_profile(company_id, profile_id)
        db.commit()
        return profile
    except LedgerError:
        db.rollback()
        raise
