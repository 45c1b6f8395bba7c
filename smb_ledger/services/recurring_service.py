"""
Recurring invoice service.

A due profile produces one invoice per processing run and its
next_run_date moves forward one interval from the previous run
date. Monthly schedules keep the profile's anchor day, clamped to
the end of short months: Jan 31 -> Feb 28 -> Mar 31.

There is no lock around processing; two concurrent runs over the
same company can both pick up a due profile.
"""

from datetime import date, timedelta

import structlog
from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from smb_ledger.errors import LedgerError, NotFoundError
from smb_ledger.models.enums import RecurringInterval, RecurringStatus
from smb_ledger.models.recurring import RecurringProfile, RecurringProfileItem
from smb_ledger.schemas.documents import InvoiceCreate, LineItemCreate
from smb_ledger.schemas.recurring import RecurringProfileCreate, RecurringRunResult
from smb_ledger.services.audit import record_event
from smb_ledger.services.company_service import CompanyService
from smb_ledger.services.document_service import DocumentService

logger = structlog.get_logger(__name__)

PAYMENT_TERMS_DAYS = 7


def advance(previous: date, interval: RecurringInterval, anchor_day: int) -> date:
    """The run date one interval after previous."""
    if interval == RecurringInterval.WEEKLY:
        return previous + timedelta(weeks=1)
    if interval == RecurringInterval.MONTHLY:
        return previous + relativedelta(months=1, day=anchor_day)
    if interval == RecurringInterval.QUARTERLY:
        return previous + relativedelta(months=3, day=anchor_day)
    return previous + relativedelta(years=1, day=anchor_day)


class RecurringService:

    def __init__(self, db: Session, documents: DocumentService | None = None):
        self.db = db
        self.documents = documents or DocumentService(db)

    def create_profile(
        self, company_id: int, request: RecurringProfileCreate
    ) -> RecurringProfile:
        CompanyService(self.db).get_company(company_id)

        profile = RecurringProfile(
            company_id=company_id,
            client_name=request.client_name,
            interval=request.interval,
            status=RecurringStatus.ACTIVE,
            start_date=request.start_date,
            next_run_date=request.start_date,
            anchor_day=request.start_date.day,
        )
        for item in request.items:
            profile.items.append(RecurringProfileItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                tax_rate=item.tax_rate,
            ))
        self.db.add(profile)
        self.db.flush()

        logger.info(
            "recurring_profile_created",
            company_id=company_id,
            profile_id=profile.id,
            interval=profile.interval.value,
            next_run_date=str(profile.next_run_date),
        )
        return profile

    def get_profile(self, company_id: int, profile_id: int) -> RecurringProfile:
        profile = self.db.execute(
            select(RecurringProfile)
            .options(selectinload(RecurringProfile.items))
            .where(
                RecurringProfile.id == profile_id,
                RecurringProfile.company_id == company_id,
            )
        ).scalar_one_or_none()
        if not profile:
            raise NotFoundError(f"Recurring profile {profile_id} not found")
        return profile

    def list_profiles(self, company_id: int) -> list[RecurringProfile]:
        profiles = self.db.execute(
            select(RecurringProfile)
            .options(selectinload(RecurringProfile.items))
            .where(RecurringProfile.company_id == company_id)
            .order_by(RecurringProfile.next_run_date, RecurringProfile.id)
        ).scalars().all()
        return list(profiles)

    def pause_profile(self, company_id: int, profile_id: int) -> RecurringProfile:
        profile = self.get_profile(company_id, profile_id)
        profile.status = RecurringStatus.PAUSED
        self.db.flush()
        return profile

    def resume_profile(self, company_id: int, profile_id: int) -> RecurringProfile:
        profile = self.get_profile(company_id, profile_id)
        profile.status = RecurringStatus.ACTIVE
        self.db.flush()
        return profile

    def process_due_profiles(
        self, company_id: int, today: date | None = None
    ) -> RecurringRunResult:
        """
        Generate invoices for every active profile that is due.

        Each profile runs in its own SAVEPOINT. A profile that fails
        is counted in errors, keeps its next_run_date, and does not
        stop the others.
        """
        today = today or date.today()
        due = self.db.execute(
            select(RecurringProfile)
            .options(selectinload(RecurringProfile.items))
            .where(
                RecurringProfile.company_id == company_id,
                RecurringProfile.status == RecurringStatus.ACTIVE,
                RecurringProfile.next_run_date <= today,
            )
            .order_by(RecurringProfile.id)
        ).scalars().all()

        result = RecurringRunResult()
        for profile in due:
            try:
                with self.db.begin_nested():
                    invoice_id = self._run_profile(profile, today)
            except (LedgerError, SQLAlchemyError) as e:
                result.errors += 1
                logger.error(
                    "recurring_profile_failed",
                    company_id=company_id,
                    profile_id=profile.id,
                    error=str(e),
                )
                continue
            result.processed += 1
            result.invoices_created.append(invoice_id)

        logger.info(
            "recurring_run_finished",
            company_id=company_id,
            today=str(today),
            processed=result.processed,
            errors=result.errors,
        )
        return result

    def _run_profile(self, profile: RecurringProfile, today: date) -> int:
        invoice = self.documents.create_invoice(
            profile.company_id,
            InvoiceCreate(
                client_name=profile.client_name,
                issue_date=today,
                due_date=today + timedelta(days=PAYMENT_TERMS_DAYS),
                items=[
                    LineItemCreate(
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        tax_rate=item.tax_rate,
                    )
                    for item in profile.items
                ],
            ),
            recurring_profile_id=profile.id,
        )

        previous = profile.next_run_date
        profile.next_run_date = advance(
            previous, profile.interval, profile.anchor_day
        )
        record_event(
            self.db,
            profile.company_id,
            "recurring_invoice_generated",
            profile_id=profile.id,
            invoice_id=invoice.id,
            run_date=previous,
            next_run_date=profile.next_run_date,
        )
        self.db.flush()
        return invoice.id
