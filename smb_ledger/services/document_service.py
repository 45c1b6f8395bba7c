"""
Document service: invoices, payments, bills and expenses.

Creating a document and posting its journal happen in one
SAVEPOINT. If the posting fails the document is rolled back
with it, so there is never a document without its journal.
"""

from decimal import Decimal

import structlog
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from smb_ledger.errors import MappingError, NotFoundError, ValidationError
from smb_ledger.models.documents import (
    Bill,
    Expense,
    Invoice,
    InvoiceItem,
    Payment,
)
from smb_ledger.models.enums import AccountType, InvoiceStatus, SourceType
from smb_ledger.schemas.documents import (
    BillCreate,
    ExpenseCreate,
    InvoiceCreate,
    LineItemCreate,
    PaymentCreate,
)
from smb_ledger.schemas.ledger import SourceDocument
from smb_ledger.services.company_service import CompanyService
from smb_ledger.services.journal_builder import to_cents
from smb_ledger.services.ledger_service import LedgerService

logger = structlog.get_logger(__name__)

HUNDRED = Decimal("100")

# Account types a bill or expense may be charged to.
CHARGEABLE_TYPES = (AccountType.EXPENSE, AccountType.ASSET)


def line_net(item: LineItemCreate) -> Decimal:
    return to_cents(item.quantity * item.unit_price)


def line_tax(item: LineItemCreate) -> Decimal:
    return to_cents(line_net(item) * item.tax_rate / HUNDRED)


def document_totals(
    items: list[LineItemCreate],
) -> tuple[Decimal, Decimal, Decimal]:
    """Return (subtotal, tax, total) for a set of line items."""
    subtotal = sum((line_net(item) for item in items), Decimal("0"))
    tax = sum((line_tax(item) for item in items), Decimal("0"))
    return subtotal, tax, subtotal + tax


class DocumentService:

    def __init__(self, db: Session, ledger: LedgerService | None = None):
        self.db = db
        self.ledger = ledger or LedgerService(db)
        self.companies = CompanyService(db)

    # --- Invoices ---

    def _next_invoice_number(self, company_id: int) -> str:
        count = self.db.execute(
            select(func.count(Invoice.id)).where(
                Invoice.company_id == company_id
            )
        ).scalar_one()
        number = count + 1
        while self._invoice_number_taken(company_id, f"INV-{number:05d}"):
            number += 1
        return f"INV-{number:05d}"

    def _invoice_number_taken(self, company_id: int, invoice_number: str) -> bool:
        return self.db.execute(
            select(Invoice.id).where(
                Invoice.company_id == company_id,
                Invoice.invoice_number == invoice_number,
            )
        ).first() is not None

    def create_invoice(
        self,
        company_id: int,
        request: InvoiceCreate,
        recurring_profile_id: int | None = None,
    ) -> Invoice:
        """
        Create an invoice and post it to the ledger.

        Dr Accounts Receivable, Cr Sales Revenue and VAT Output.
        """
        company = self.companies.get_company(company_id)
        if request.due_date < request.issue_date:
            raise ValidationError("Due date cannot be before the issue date")

        invoice_number = request.invoice_number or self._next_invoice_number(
            company_id
        )
        if self._invoice_number_taken(company_id, invoice_number):
            raise ValidationError(
                f"Invoice number {invoice_number} is already in use"
            )

        subtotal, tax, total = document_totals(request.items)

        with self.db.begin_nested():
            invoice = Invoice(
                company_id=company_id,
                invoice_number=invoice_number,
                client_name=request.client_name,
                issue_date=request.issue_date,
                due_date=request.due_date,
                status=InvoiceStatus.DRAFT,
                subtotal=subtotal,
                tax_amount=tax,
                total_amount=total,
                amount_paid=Decimal("0"),
                currency=request.currency or company.currency,
                notes=request.notes,
                recurring_profile_id=recurring_profile_id,
            )
            self.db.add(invoice)
            self.db.flush()

            for item in request.items:
                invoice.items.append(InvoiceItem(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    tax_rate=item.tax_rate,
                    line_total=line_net(item),
                ))

            self.ledger.post_source_document(SourceDocument(
                company_id=company_id,
                source_type=SourceType.INVOICE,
                source_id=str(invoice.id),
                document_date=invoice.issue_date,
                amount=total,
                tax_amount=tax,
                reference=invoice_number,
            ))

        logger.info(
            "invoice_created",
            company_id=company_id,
            invoice_id=invoice.id,
            invoice_number=invoice_number,
            total=str(total),
        )
        return invoice

    def get_invoice(self, company_id: int, invoice_id: int) -> Invoice:
        invoice = self.db.execute(
            select(Invoice)
            .options(selectinload(Invoice.items))
            .where(Invoice.id == invoice_id, Invoice.company_id == company_id)
        ).scalar_one_or_none()
        if not invoice:
            raise NotFoundError(f"Invoice {invoice_id} not found")
        return invoice

    def list_invoices(
        self, company_id: int, status: InvoiceStatus | None = None
    ) -> list[Invoice]:
        query = (
            select(Invoice)
            .options(selectinload(Invoice.items))
            .where(Invoice.company_id == company_id)
        )
        if status:
            query = query.where(Invoice.status == status)
        invoices = self.db.execute(
            query.order_by(Invoice.issue_date.desc(), Invoice.id.desc())
        ).scalars().all()
        return list(invoices)

    def mark_invoice_sent(
        self, company_id: int, invoice_id: int, delivered: bool
    ) -> Invoice:
        """
        Move a DRAFT invoice to SENT once the email provider confirms delivery.

        Without a delivery acknowledgement, or for an invoice that
        is no longer a draft, the invoice is returned unchanged.
        """
        invoice = self.get_invoice(company_id, invoice_id)
        if not delivered:
            logger.warning(
                "invoice_delivery_not_confirmed",
                company_id=company_id,
                invoice_id=invoice_id,
            )
            return invoice
        if invoice.status == InvoiceStatus.DRAFT:
            invoice.status = InvoiceStatus.SENT
            self.db.flush()
            logger.info(
                "invoice_sent", company_id=company_id, invoice_id=invoice_id
            )
        return invoice

    # --- Payments ---

    def record_payment(
        self, company_id: int, request: PaymentCreate
    ) -> Payment:
        """
        Record a customer payment against an invoice.

        Dr Cash and Bank, Cr Accounts Receivable. The invoice moves
        to PARTIAL or PAID. Paying more than the balance due raises
        ValidationError.
        """
        invoice = self.get_invoice(company_id, request.invoice_id)
        if invoice.status in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
            raise ValidationError(
                f"Invoice {invoice.invoice_number} is "
                f"{invoice.status.value.lower()} and cannot take payments"
            )
        amount = to_cents(request.amount)
        if amount > invoice.balance_due:
            raise ValidationError(
                f"Payment {amount} exceeds balance due {invoice.balance_due} "
                f"on invoice {invoice.invoice_number}"
            )

        with self.db.begin_nested():
            payment = Payment(
                company_id=company_id,
                invoice_id=invoice.id,
                payment_date=request.payment_date,
                amount=amount,
                method=request.method,
                reference=request.reference,
            )
            self.db.add(payment)
            self.db.flush()

            self.ledger.post_source_document(SourceDocument(
                company_id=company_id,
                source_type=SourceType.PAYMENT,
                source_id=str(payment.id),
                document_date=request.payment_date,
                amount=amount,
                reference=invoice.invoice_number,
                method=request.method,
            ))

            invoice.amount_paid = invoice.amount_paid + amount
            if invoice.amount_paid >= invoice.total_amount:
                invoice.status = InvoiceStatus.PAID
            else:
                invoice.status = InvoiceStatus.PARTIAL
            self.db.flush()

        logger.info(
            "payment_recorded",
            company_id=company_id,
            invoice_id=invoice.id,
            payment_id=payment.id,
            amount=str(amount),
            status=invoice.status.value,
        )
        return payment

    # --- Bills and expenses ---

    def _check_chargeable(self, company_id: int, code: str) -> None:
        account = self.ledger.chart.get_account_by_code(company_id, code)
        if account.account_type not in CHARGEABLE_TYPES:
            raise MappingError(
                f"Account {code} is a {account.account_type.value.lower()} "
                "account; bills and expenses must be charged to an expense "
                "or asset account"
            )

    def create_bill(self, company_id: int, request: BillCreate) -> Bill:
        """
        Record a supplier bill.

        Dr the bill's expense account and VAT Input, Cr Accounts Payable.
        """
        self.companies.get_company(company_id)
        if request.due_date < request.bill_date:
            raise ValidationError("Due date cannot be before the bill date")
        self._check_chargeable(company_id, request.expense_account_code)

        subtotal, tax, total = document_totals(request.items)

        with self.db.begin_nested():
            bill = Bill(
                company_id=company_id,
                bill_number=request.bill_number,
                supplier_name=request.supplier_name,
                bill_date=request.bill_date,
                due_date=request.due_date,
                subtotal=subtotal,
                tax_amount=tax,
                total_amount=total,
                expense_account_code=request.expense_account_code,
            )
            self.db.add(bill)
            self.db.flush()

            self.ledger.post_source_document(SourceDocument(
                company_id=company_id,
                source_type=SourceType.BILL,
                source_id=str(bill.id),
                document_date=request.bill_date,
                amount=total,
                tax_amount=tax,
                reference=request.bill_number,
                counterpart_account_code=request.expense_account_code,
            ))

        logger.info(
            "bill_created",
            company_id=company_id,
            bill_id=bill.id,
            total=str(total),
        )
        return bill

    def create_expense(
        self, company_id: int, request: ExpenseCreate
    ) -> Expense:
        """
        Record an expense. Expenses post exactly like bills.

        request.amount excludes tax; tax is added on top.
        """
        self.companies.get_company(company_id)
        self._check_chargeable(company_id, request.expense_account_code)

        amount = to_cents(request.amount)
        tax = to_cents(amount * request.tax_rate / HUNDRED)
        total = amount + tax

        with self.db.begin_nested():
            expense = Expense(
                company_id=company_id,
                description=request.description,
                vendor=request.vendor,
                category=request.category,
                expense_date=request.expense_date,
                amount=amount,
                tax_rate=request.tax_rate,
                tax_amount=tax,
                total_amount=total,
                expense_account_code=request.expense_account_code,
            )
            self.db.add(expense)
            self.db.flush()

            self.ledger.post_source_document(SourceDocument(
                company_id=company_id,
                source_type=SourceType.EXPENSE,
                source_id=str(expense.id),
                document_date=request.expense_date,
                amount=total,
                tax_amount=tax,
                reference=(request.vendor or request.description)[:100],
                counterpart_account_code=request.expense_account_code,
            ))

        logger.info(
            "expense_created",
            company_id=company_id,
            expense_id=expense.id,
            total=str(total),
        )
        return expense
