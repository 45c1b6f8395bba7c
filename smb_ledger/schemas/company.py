"""
Pydantic schemas for company onboarding.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    vat_number: str | None = Field(default=None, max_length=50)


class CompanyResponse(BaseModel):
    id: int
    name: str
    currency: str
    vat_number: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class CompanyOnboarded(BaseModel):
    company: CompanyResponse
    accounts_created: int
