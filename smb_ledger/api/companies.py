"""
Company endpoints.

Creating a company also seeds its chart of accounts.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.models.base import get_db
from smb_ledger.schemas.company import (
    CompanyCreate,
    CompanyOnboarded,
    CompanyResponse,
)
from smb_ledger.services.company_service import CompanyService

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=CompanyOnboarded, status_code=201)
def create_company(request: CompanyCreate, db: Session = Depends(get_db)):
    service = CompanyService(db)
    try:
        company, accounts_created = service.create_company(request)
        db.commit()
    except LedgerError:
        db.rollback()
        raise
    return CompanyOnboarded(
        company=CompanyResponse.model_validate(company),
        accounts_created=accounts_created,
    )


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: int, db: Session = Depends(get_db)):
    return CompanyService(db).get_company(company_id)
