"""
Recurring invoice profile model.

A profile is a template: client, line items and a schedule.
Processing a due profile turns it into a real invoice and
moves next_run_date forward by one interval.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smb_ledger.models.base import Base
from smb_ledger.models.enums import RecurringInterval, RecurringStatus


class RecurringProfile(Base):
    __tablename__ = "recurring_profiles"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id"), nullable=False, index=True
    )
    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    interval: Mapped[RecurringInterval] = mapped_column(
        SAEnum(RecurringInterval, name="recurring_interval_enum"),
        nullable=False,
    )
    status: Mapped[RecurringStatus] = mapped_column(
        SAEnum(RecurringStatus, name="recurring_status_enum"),
        nullable=False,
        default=RecurringStatus.ACTIVE,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    next_run_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Day of month the schedule is anchored to, so short months
    # do not permanently pull the run date earlier.
    anchor_day: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    items: Mapped[list["RecurringProfileItem"]] = relationship(
        back_populates="profile", order_by="RecurringProfileItem.id"
    )

    def __repr__(self) -> str:
        return (
            f"<RecurringProfile {self.id} {self.interval.value} "
            f"next={self.next_run_date}>"
        )


class RecurringProfileItem(Base):
    __tablename__ = "recurring_profile_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("recurring_profiles.id"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False
    )
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )

    profile: Mapped["RecurringProfile"] = relationship(back_populates="items")
