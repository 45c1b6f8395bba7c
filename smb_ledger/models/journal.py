"""
Journal models.

A Journal is the header of one double-entry posting; its
JournalLines carry the debits and credits. Both are immutable:
a mistake is corrected by posting a reversing journal, never by
editing or deleting the original.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Numeric, ForeignKey, CheckConstraint,
    UniqueConstraint, Enum as SAEnum, event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, object_session

from smb_ledger.errors import ImmutableEntryError
from smb_ledger.models.base import Base
from smb_ledger.models.enums import SourceType


class Journal(Base):
    """
    Header of a posted journal entry.

    (source_type, source_id) is unique so a source document can
    only ever be posted once, even under concurrent requests.
    Manual journals have no source_id and are not constrained.
    """

    __tablename__ = "journals"
    __table_args__ = (
        UniqueConstraint(
            "source_type", "source_id", name="uq_journals_source"
        ),
        UniqueConstraint(
            "reverses_journal_id", name="uq_journals_reverses"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id"), nullable=False, index=True
    )
    journal_date: Mapped[date] = mapped_column(Date, nullable=False)
    source_type: Mapped[SourceType] = mapped_column(
        SAEnum(SourceType, name="source_type_enum"),
        nullable=False,
    )
    source_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    memo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reverses_journal_id: Mapped[int | None] = mapped_column(
        ForeignKey("journals.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="journal", order_by="JournalLine.id"
    )

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<Journal {self.id} {self.source_type.value} "
            f"{self.source_id} {self.journal_date}>"
        )


class JournalLine(Base):
    """
    One debit or credit line of a journal.

    Exactly one of debit_amount / credit_amount is non-zero.
    """

    __tablename__ = "journal_lines"
    __table_args__ = (
        CheckConstraint(
            "debit_amount >= 0 AND credit_amount >= 0",
            name="ck_journal_lines_non_negative",
        ),
        CheckConstraint(
            "(debit_amount > 0 AND credit_amount = 0) OR "
            "(credit_amount > 0 AND debit_amount = 0)",
            name="ck_journal_lines_one_side",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_id: Mapped[int] = mapped_column(
        ForeignKey("journals.id"), nullable=False, index=True
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    debit_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0")
    )
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    journal: Mapped["Journal"] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<JournalLine {self.account_id} "
            f"Dr {self.debit_amount} Cr {self.credit_amount}>"
        )


def _reject_update(mapper, connection, target):
    session = object_session(target)
    if session is not None and session.is_modified(
        target, include_collections=False
    ):
        raise ImmutableEntryError(
            f"{type(target).__name__} {target.id} is posted and cannot be "
            "modified; post a reversing journal instead"
        )


def _reject_delete(mapper, connection, target):
    raise ImmutableEntryError(
        f"{type(target).__name__} {target.id} is posted and cannot be "
        "deleted; post a reversing journal instead"
    )


for _model in (Journal, JournalLine):
    event.listen(_model, "before_update", _reject_update)
    event.listen(_model, "before_delete", _reject_delete)
