"""
Pydantic schemas for recurring invoice profiles.
"""

from datetime import date

from pydantic import BaseModel, Field

from smb_ledger.models.enums import RecurringInterval, RecurringStatus
from smb_ledger.schemas.documents import LineItemCreate


class RecurringProfileCreate(BaseModel):
    client_name: str = Field(min_length=1, max_length=200)
    interval: RecurringInterval
    start_date: date
    items: list[LineItemCreate] = Field(min_length=1)


class RecurringProfileItemResponse(LineItemCreate):
    id: int

    model_config = {"from_attributes": True}


class RecurringProfileResponse(BaseModel):
    id: int
    company_id: int
    client_name: str
    interval: RecurringInterval
    status: RecurringStatus
    start_date: date
    next_run_date: date
    items: list[RecurringProfileItemResponse]

    model_config = {"from_attributes": True}


class RecurringProcessRequest(BaseModel):
    today: date | None = None


class RecurringRunResult(BaseModel):
    processed: int = 0
    errors: int = 0
    invoices_created: list[int] = Field(default_factory=list)
