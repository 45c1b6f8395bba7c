"""Company onboarding."""

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from smb_ledger.config import get_settings
from smb_ledger.errors import NotFoundError, company_not_found
from smb_ledger.models.company import Company
from smb_ledger.schemas.company import CompanyCreate
from smb_ledger.services.audit import record_event
from smb_ledger.services.chart_of_accounts_service import ChartOfAccountsService

logger = structlog.get_logger(__name__)


class CompanyService:

    def __init__(self, db: Session):
        self.db = db

    def create_company(self, request: CompanyCreate) -> tuple[Company, int]:
        """
        Create a company and seed its chart of accounts.

        Returns the company and the number of accounts created.
        """
        company = Company(
            name=request.name,
            currency=request.currency or get_settings().DEFAULT_CURRENCY,
            vat_number=request.vat_number,
        )
        self.db.add(company)
        self.db.flush()

        accounts = ChartOfAccountsService(self.db).initialize_chart_of_accounts(
            company.id
        )
        record_event(
            self.db,
            company.id,
            "company_created",
            name=company.name,
            accounts_created=len(accounts),
        )
        logger.info(
            "company_created",
            company_id=company.id,
            accounts_created=len(accounts),
        )
        return company, len(accounts)

    def get_company(self, company_id: int) -> Company:
        company = self.db.get(Company, company_id)
        if not company:
            raise NotFoundError(company_not_found(company_id))
        return company

    def list_companies(self) -> list[Company]:
        return list(
            self.db.execute(select(Company).order_by(Company.id)).scalars().all()
        )
