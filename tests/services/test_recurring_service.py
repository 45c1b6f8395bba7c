"""
Tests for recurring invoice profiles.
"""

from datetime import date
from decimal import Decimal

import pytest

from smb_ledger.errors import NotFoundError
from smb_ledger.models.enums import RecurringInterval, RecurringStatus
from smb_ledger.schemas.documents import LineItemCreate
from smb_ledger.schemas.recurring import RecurringProfileCreate
from smb_ledger.services.document_service import DocumentService
from smb_ledger.services.recurring_service import RecurringService, advance


def make_profile(db_session, company_id, start_date, unit_price="1500.00",
                 interval=RecurringInterval.MONTHLY, client="Retainer Client"):
    return RecurringService(db_session).create_profile(
        company_id,
        RecurringProfileCreate(
            client_name=client,
            interval=interval,
            start_date=start_date,
            items=[LineItemCreate(
                description="Monthly retainer",
                quantity=Decimal("1"),
                unit_price=Decimal(unit_price),
                tax_rate=Decimal("15"),
            )],
        ),
    )


class TestAdvance:

    def test_month_end_clamps_and_recovers(self):
        feb = advance(date(2027, 1, 31), RecurringInterval.MONTHLY, 31)
        mar = advance(feb, RecurringInterval.MONTHLY, 31)

        assert feb == date(2027, 2, 28)
        assert mar == date(2027, 3, 31)

    def test_weekly(self):
        assert advance(
            date(2026, 12, 28), RecurringInterval.WEEKLY, 28
        ) == date(2027, 1, 4)

    def test_quarterly(self):
        feb = advance(date(2026, 11, 30), RecurringInterval.QUARTERLY, 30)

        assert feb == date(2027, 2, 28)
        assert advance(feb, RecurringInterval.QUARTERLY, 30) == date(2027, 5, 30)

    def test_yearly_from_leap_day(self):
        assert advance(
            date(2028, 2, 29), RecurringInterval.YEARLY, 29
        ) == date(2029, 2, 28)


class TestProfiles:

    def test_create_profile_starts_on_start_date(self, db_session, company):
        profile = make_profile(db_session, company.id, date(2026, 1, 31))

        assert profile.status == RecurringStatus.ACTIVE
        assert profile.next_run_date == date(2026, 1, 31)
        assert profile.anchor_day == 31
        assert len(profile.items) == 1

    def test_pause_and_resume(self, db_session, company):
        service = RecurringService(db_session)
        profile = make_profile(db_session, company.id, date(2026, 1, 1))

        assert service.pause_profile(company.id, profile.id).status == (
            RecurringStatus.PAUSED
        )
        assert service.resume_profile(company.id, profile.id).status == (
            RecurringStatus.ACTIVE
        )

    def test_profile_scoped_to_company(self, db_session, company, other_company):
        profile = make_profile(db_session, company.id, date(2026, 1, 1))

        with pytest.raises(NotFoundError):
            RecurringService(db_session).get_profile(other_company.id, profile.id)


class TestProcessDueProfiles:

    def test_generates_invoice_and_advances(self, db_session, company):
        profile = make_profile(db_session, company.id, date(2026, 1, 31))
        db_session.commit()

        result = RecurringService(db_session).process_due_profiles(
            company.id, today=date(2026, 1, 31)
        )
        db_session.commit()

        assert result.processed == 1
        assert result.errors == 0
        assert profile.next_run_date == date(2026, 2, 28)

        invoice = DocumentService(db_session).get_invoice(
            company.id, result.invoices_created[0]
        )
        assert invoice.issue_date == date(2026, 1, 31)
        assert invoice.due_date == date(2026, 2, 7)
        assert invoice.recurring_profile_id == profile.id
        assert invoice.total_amount == Decimal("1725.00")

    def test_second_run_same_day_does_nothing(self, db_session, company):
        make_profile(db_session, company.id, date(2026, 3, 1))
        service = RecurringService(db_session)

        service.process_due_profiles(company.id, today=date(2026, 3, 1))
        again = service.process_due_profiles(company.id, today=date(2026, 3, 1))

        assert again.processed == 0
        assert len(DocumentService(db_session).list_invoices(company.id)) == 1

    def test_catches_up_one_period_per_run(self, db_session, company):
        profile = make_profile(db_session, company.id, date(2026, 1, 15))
        service = RecurringService(db_session)

        service.process_due_profiles(company.id, today=date(2026, 4, 1))
        assert profile.next_run_date == date(2026, 2, 15)

        service.process_due_profiles(company.id, today=date(2026, 4, 1))
        assert profile.next_run_date == date(2026, 3, 15)

    def test_future_profile_not_due(self, db_session, company):
        make_profile(db_session, company.id, date(2026, 5, 1))

        result = RecurringService(db_session).process_due_profiles(
            company.id, today=date(2026, 4, 30)
        )

        assert result.processed == 0

    def test_paused_profile_skipped(self, db_session, company):
        service = RecurringService(db_session)
        profile = make_profile(db_session, company.id, date(2026, 1, 1))
        service.pause_profile(company.id, profile.id)

        result = service.process_due_profiles(company.id, today=date(2026, 1, 1))

        assert result.processed == 0
        assert profile.next_run_date == date(2026, 1, 1)

    def test_failing_profile_does_not_stop_others(self, db_session, company):
        broken = make_profile(
            db_session, company.id, date(2026, 1, 1),
            unit_price="0.00", client="Free Client",
        )
        good = make_profile(db_session, company.id, date(2026, 1, 1))
        db_session.commit()

        result = RecurringService(db_session).process_due_profiles(
            company.id, today=date(2026, 1, 1)
        )
        db_session.commit()

        assert result.processed == 1
        assert result.errors == 1
        assert broken.next_run_date == date(2026, 1, 1)
        assert good.next_run_date == date(2026, 2, 1)
        invoices = DocumentService(db_session).list_invoices(company.id)
        assert [i.client_name for i in invoices] == ["Retainer Client"]
