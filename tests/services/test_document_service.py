"""
Tests for the DocumentService.

Every document must land in the ledger together with its journal.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select, func

from smb_ledger.errors import MappingError, NotFoundError, ValidationError
from smb_ledger.models.documents import Invoice
from smb_ledger.models.enums import InvoiceStatus, SourceType
from smb_ledger.models.journal import Journal
from smb_ledger.schemas.documents import (
    BillCreate,
    ExpenseCreate,
    InvoiceCreate,
    LineItemCreate,
    PaymentCreate,
)
from smb_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from smb_ledger.services.document_service import DocumentService, document_totals
from smb_ledger.services.ledger_service import LedgerService
from smb_ledger.services.report_service import ReportService


def items():
    return [
        LineItemCreate(
            description="Consulting",
            quantity=Decimal("2"),
            unit_price=Decimal("400.00"),
            tax_rate=Decimal("15"),
        ),
        LineItemCreate(
            description="Travel",
            quantity=Decimal("1"),
            unit_price=Decimal("200.00"),
            tax_rate=Decimal("0"),
        ),
    ]


def invoice_request(**overrides):
    fields = dict(
        client_name="Acme Corp",
        issue_date=date(2026, 3, 1),
        due_date=date(2026, 3, 31),
        items=items(),
    )
    fields.update(overrides)
    return InvoiceCreate(**fields)


class TestTotals:

    def test_tax_per_item_rate(self):
        subtotal, tax, total = document_totals(items())

        assert subtotal == Decimal("1000.00")
        assert tax == Decimal("120.00")
        assert total == Decimal("1120.00")


class TestCreateInvoice:

    def test_invoice_and_journal_created(self, db_session, company):
        service = DocumentService(db_session)
        invoice = service.create_invoice(company.id, invoice_request())
        db_session.commit()

        assert invoice.invoice_number == "INV-00001"
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.total_amount == Decimal("1120.00")
        assert invoice.currency == "ZAR"
        assert len(invoice.items) == 2

        journal = LedgerService(db_session).find_journal_for_source(
            company.id, SourceType.INVOICE, str(invoice.id)
        )
        assert journal.total_debit == Decimal("1120.00")

    def test_numbers_increment(self, db_session, company):
        service = DocumentService(db_session)
        service.create_invoice(company.id, invoice_request())
        second = service.create_invoice(company.id, invoice_request())

        assert second.invoice_number == "INV-00002"

    def test_duplicate_number_rejected(self, db_session, company):
        service = DocumentService(db_session)
        service.create_invoice(
            company.id, invoice_request(invoice_number="A-1")
        )
        with pytest.raises(ValidationError, match="already in use"):
            service.create_invoice(
                company.id, invoice_request(invoice_number="A-1")
            )

    def test_due_before_issue_rejected(self, db_session, company):
        with pytest.raises(ValidationError):
            DocumentService(db_session).create_invoice(
                company.id, invoice_request(due_date=date(2026, 2, 1))
            )

    def test_posting_failure_rolls_back_invoice(self, db_session, company):
        chart = ChartOfAccountsService(db_session)
        sales = chart.get_account_by_code(company.id, "4100")
        chart.deactivate_account(company.id, sales.id)
        db_session.commit()

        with pytest.raises(MappingError):
            DocumentService(db_session).create_invoice(
                company.id, invoice_request()
            )
        db_session.commit()

        assert db_session.execute(
            select(func.count(Invoice.id))
        ).scalar_one() == 0
        assert db_session.execute(
            select(func.count(Journal.id))
        ).scalar_one() == 0

    def test_unknown_company(self, db_session):
        with pytest.raises(NotFoundError):
            DocumentService(db_session).create_invoice(999, invoice_request())


class TestMarkSent:

    def test_delivered_marks_sent(self, db_session, company):
        service = DocumentService(db_session)
        invoice = service.create_invoice(company.id, invoice_request())

        service.mark_invoice_sent(company.id, invoice.id, delivered=True)

        assert invoice.status == InvoiceStatus.SENT

    def test_undelivered_stays_draft(self, db_session, company):
        service = DocumentService(db_session)
        invoice = service.create_invoice(company.id, invoice_request())

        service.mark_invoice_sent(company.id, invoice.id, delivered=False)

        assert invoice.status == InvoiceStatus.DRAFT


class TestPayments:

    def test_partial_then_full_payment(self, db_session, company):
        service = DocumentService(db_session)
        invoice = service.create_invoice(company.id, invoice_request())

        service.record_payment(company.id, PaymentCreate(
            invoice_id=invoice.id,
            payment_date=date(2026, 3, 10),
            amount=Decimal("500.00"),
        ))
        assert invoice.status == InvoiceStatus.PARTIAL
        assert invoice.balance_due == Decimal("620.00")

        service.record_payment(company.id, PaymentCreate(
            invoice_id=invoice.id,
            payment_date=date(2026, 3, 20),
            amount=Decimal("620.00"),
        ))
        db_session.commit()

        assert invoice.status == InvoiceStatus.PAID
        tb = ReportService(db_session).get_trial_balance(company.id)
        assert tb.row_for("1110").balance == Decimal("1120.00")
        assert tb.row_for("1120").balance == Decimal("0.00")

    def test_overpayment_rejected(self, db_session, company):
        service = DocumentService(db_session)
        invoice = service.create_invoice(company.id, invoice_request())

        with pytest.raises(ValidationError, match="exceeds balance due"):
            service.record_payment(company.id, PaymentCreate(
                invoice_id=invoice.id,
                payment_date=date(2026, 3, 10),
                amount=Decimal("2000.00"),
            ))

    def test_paid_invoice_takes_no_payments(self, db_session, company):
        service = DocumentService(db_session)
        invoice = service.create_invoice(company.id, invoice_request())
        service.record_payment(company.id, PaymentCreate(
            invoice_id=invoice.id,
            payment_date=date(2026, 3, 10),
            amount=Decimal("1120.00"),
        ))

        with pytest.raises(ValidationError, match="paid"):
            service.record_payment(company.id, PaymentCreate(
                invoice_id=invoice.id,
                payment_date=date(2026, 3, 11),
                amount=Decimal("1.00"),
            ))


class TestPayables:

    def test_bill_posts_to_expense_account(self, db_session, company):
        bill = DocumentService(db_session).create_bill(company.id, BillCreate(
            bill_number="SUP-77",
            supplier_name="Landlord Ltd",
            bill_date=date(2026, 3, 1),
            due_date=date(2026, 3, 15),
            items=[LineItemCreate(
                description="March rent",
                quantity=Decimal("1"),
                unit_price=Decimal("8000.00"),
                tax_rate=Decimal("15"),
            )],
            expense_account_code="5210",
        ))
        db_session.commit()

        assert bill.total_amount == Decimal("9200.00")
        tb = ReportService(db_session).get_trial_balance(company.id)
        assert tb.row_for("5210").balance == Decimal("8000.00")
        assert tb.row_for("1130").balance == Decimal("1200.00")
        assert tb.row_for("2110").balance == Decimal("-9200.00")

    def test_expense_adds_tax_on_top(self, db_session, company):
        expense = DocumentService(db_session).create_expense(
            company.id,
            ExpenseCreate(
                description="Stationery",
                expense_date=date(2026, 3, 2),
                amount=Decimal("100.00"),
                tax_rate=Decimal("15"),
                vendor="Office Depot",
                expense_account_code="5230",
            ),
        )
        db_session.commit()

        assert expense.tax_amount == Decimal("15.00")
        assert expense.total_amount == Decimal("115.00")
        tb = ReportService(db_session).get_trial_balance(company.id)
        assert tb.row_for("5230").balance == Decimal("100.00")
        assert tb.row_for("2110").balance == Decimal("-115.00")
        assert tb.is_balanced

    def test_unknown_expense_account(self, db_session, company):
        with pytest.raises(MappingError, match="5999"):
            DocumentService(db_session).create_expense(
                company.id,
                ExpenseCreate(
                    description="Mystery",
                    expense_date=date(2026, 3, 2),
                    amount=Decimal("10.00"),
                    expense_account_code="5999",
                ),
            )

    def test_long_vendor_name_is_truncated_in_journal(self, db_session, company):
        vendor = "V" * 150
        expense = DocumentService(db_session).create_expense(
            company.id,
            ExpenseCreate(
                description="Stationery",
                expense_date=date(2026, 3, 2),
                amount=Decimal("100.00"),
                vendor=vendor,
            ),
        )

        assert expense.vendor == vendor
        journal = LedgerService(db_session).find_journal_for_source(
            company.id, SourceType.EXPENSE, str(expense.id)
        )
        assert journal.memo == f"Expense {'V' * 100} received"

    def test_bill_against_payable_account_rejected(self, db_session, company):
        with pytest.raises(MappingError, match="liability"):
            DocumentService(db_session).create_bill(company.id, BillCreate(
                bill_number="SUP-1",
                supplier_name="Landlord Ltd",
                bill_date=date(2026, 3, 1),
                due_date=date(2026, 3, 15),
                items=[LineItemCreate(
                    description="Rent",
                    quantity=Decimal("1"),
                    unit_price=Decimal("100.00"),
                )],
                expense_account_code="2110",
            ))
        db_session.commit()

        assert db_session.execute(
            select(func.count(Journal.id))
        ).scalar_one() == 0

    def test_expense_against_revenue_account_rejected(self, db_session, company):
        with pytest.raises(MappingError, match="revenue"):
            DocumentService(db_session).create_expense(
                company.id,
                ExpenseCreate(
                    description="Refund",
                    expense_date=date(2026, 3, 2),
                    amount=Decimal("10.00"),
                    expense_account_code="4100",
                ),
            )

    def test_expense_can_be_capitalised(self, db_session, company):
        DocumentService(db_session).create_expense(
            company.id,
            ExpenseCreate(
                description="Laptop",
                expense_date=date(2026, 3, 2),
                amount=Decimal("1200.00"),
                expense_account_code="1200",
            ),
        )
        db_session.commit()

        tb = ReportService(db_session).get_trial_balance(company.id)
        assert tb.row_for("1200").balance == Decimal("1200.00")
