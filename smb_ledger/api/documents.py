"""
Document endpoints: invoices, payments, bills, expenses.

Every create posts its journal in the same transaction as the
document itself.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smb_ledger.errors import LedgerError
from smb_ledger.models.base import get_db
from smb_ledger.models.enums import InvoiceStatus
from smb_ledger.schemas.documents import (
    BillCreate,
    BillResponse,
    ExpenseCreate,
    ExpenseResponse,
    InvoiceCreate,
    InvoiceResponse,
    InvoiceSent,
    PaymentCreate,
    PaymentResponse,
)
from smb_ledger.services.document_service import DocumentService

router = APIRouter(prefix="/companies/{company_id}", tags=["Documents"])


@router.post("/invoices", response_model=InvoiceResponse, status_code=201)
def create_invoice(
    company_id: int,
    request: InvoiceCreate,
    db: Session = Depends(get_db),
):
    service = DocumentService(db)
    try:
        invoice = service.create_invoice(company_id, request)
        db.commit()
        return invoice
    except LedgerError:
        db.rollback()
        raise


@router.get("/invoices", response_model=list[InvoiceResponse])
def list_invoices(
    company_id: int,
    status: InvoiceStatus | None = None,
    db: Session = Depends(get_db),
):
    return DocumentService(db).list_invoices(company_id, status=status)


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(company_id: int, invoice_id: int, db: Session = Depends(get_db)):
    return DocumentService(db).get_invoice(company_id, invoice_id)


@router.post("/invoices/{invoice_id}/sent", response_model=InvoiceResponse)
def mark_invoice_sent(
    company_id: int,
    invoice_id: int,
    request: InvoiceSent,
    db: Session = Depends(get_db),
):
    """Record the email provider's delivery acknowledgement."""
    service = DocumentService(db)
    try:
        invoice = service.mark_invoice_sent(
            company_id, invoice_id, request.delivered
        )
        db.commit()
        return invoice
    except LedgerError:
        db.rollback()
        raise


@router.post("/payments", response_model=PaymentResponse, status_code=201)
def record_payment(
    company_id: int,
    request: PaymentCreate,
    db: Session = Depends(get_db),
):
    service = DocumentService(db)
    try:
        payment = service.record_payment(company_id, request)
        db.commit()
        return payment
    except LedgerError:
        db.rollback()
        raise


@router.post("/bills", response_model=BillResponse, status_code=201)
def create_bill(
    company_id: int,
    request: BillCreate,
    db: Session = Depends(get_db),
):
    service = DocumentService(db)
    try:
        bill = service.create_bill(company_id, request)
        db.commit()
        return bill
    except LedgerError:
        db.rollback()
        raise


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(
    company_id: int,
    request: ExpenseCreate,
    db: Session = Depends(get_db),
):
    service = DocumentService(db)
    try:
        expense = service.create_expense(company_id, request)
        db.commit()
        return expense
    except LedgerError:
        db.rollback()
        raise
