"""
Pydantic schemas for invoices, bills, expenses and payments.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from smb_ledger.models.enums import InvoiceStatus


class LineItemCreate(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(gt=0, decimal_places=2)
    unit_price: Decimal = Field(ge=0, decimal_places=2)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class InvoiceCreate(BaseModel):
    client_name: str = Field(min_length=1, max_length=200)
    issue_date: date
    due_date: date
    items: list[LineItemCreate] = Field(min_length=1)
    invoice_number: str | None = Field(default=None, max_length=50)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    notes: str | None = None


class InvoiceItemResponse(BaseModel):
    id: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    line_total: Decimal

    model_config = {"from_attributes": True}


class InvoiceResponse(BaseModel):
    id: int
    company_id: int
    invoice_number: str
    client_name: str
    issue_date: date
    due_date: date
    status: InvoiceStatus
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    amount_paid: Decimal
    currency: str
    recurring_profile_id: int | None
    created_at: datetime
    items: list[InvoiceItemResponse]

    model_config = {"from_attributes": True}


class InvoiceSent(BaseModel):
    """Acknowledgement from the email provider."""
    delivered: bool


class PaymentCreate(BaseModel):
    invoice_id: int
    payment_date: date
    amount: Decimal = Field(gt=0, decimal_places=2)
    method: str = Field(default="Bank", max_length=50)
    reference: str | None = Field(default=None, max_length=100)


class PaymentResponse(BaseModel):
    id: int
    company_id: int
    invoice_id: int
    payment_date: date
    amount: Decimal
    method: str
    reference: str | None

    model_config = {"from_attributes": True}


class BillCreate(BaseModel):
    bill_number: str = Field(min_length=1, max_length=50)
    supplier_name: str = Field(min_length=1, max_length=200)
    bill_date: date
    due_date: date
    items: list[LineItemCreate] = Field(min_length=1)
    expense_account_code: str = Field(default="5200", max_length=20)


class BillResponse(BaseModel):
    id: int
    company_id: int
    bill_number: str
    supplier_name: str
    bill_date: date
    due_date: date
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    expense_account_code: str

    model_config = {"from_attributes": True}


class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    expense_date: date
    amount: Decimal = Field(gt=0, decimal_places=2)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    vendor: str | None = Field(default=None, max_length=200)
    category: str | None = Field(default=None, max_length=100)
    expense_account_code: str = Field(default="5200", max_length=20)


class ExpenseResponse(BaseModel):
    id: int
    company_id: int
    description: str
    vendor: str | None
    category: str | None
    expense_date: date
    amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    expense_account_code: str

    model_config = {"from_attributes": True}
