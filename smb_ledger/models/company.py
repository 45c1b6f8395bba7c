"""
Company model.

A company is the tenant boundary. Every account, journal,
document and bank connection belongs to exactly one company,
and every service call names the company explicitly.
"""

from datetime import datetime

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smb_ledger.models.base import Base


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="ZAR"
    )
    vat_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    accounts: Mapped[list["Account"]] = relationship(
        back_populates="company", order_by="Account.code"
    )

    def __repr__(self) -> str:
        return f"<Company {self.id} {self.name}>"
