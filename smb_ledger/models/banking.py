"""
Bank connection and imported bank transaction models.

Transactions arrive from the bank feed provider and are only
ever mutated to mark them reconciled.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Date, DateTime, Numeric, ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smb_ledger.models.base import Base


class BankConnection(Base):
    __tablename__ = "bank_connections"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id"), nullable=False, index=True
    )
    bank_name: Mapped[str] = mapped_column(String(50), nullable=False)
    account_name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    provider_account_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    last_synced_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    transactions: Mapped[list["BankTransaction"]] = relationship(
        back_populates="bank_connection"
    )

    def __repr__(self) -> str:
        return f"<BankConnection {self.bank_name} {self.account_name}>"


class BankTransaction(Base):
    """
    A single line from a bank statement.

    Positive amounts are money in, negative amounts money out.
    is_reconciled moves one way only: False -> True.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint(
            "bank_connection_id", "external_id",
            name="uq_transactions_connection_external",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    bank_connection_id: Mapped[int] = mapped_column(
        ForeignKey("bank_connections.id"), nullable=False, index=True
    )
    external_id: Mapped[str] = mapped_column(String(100), nullable=False)
    transaction_date: Mapped[date] = mapped_column(
        "date", Date, nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 2), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    merchant: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_reconciled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    reconciled_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    bank_connection: Mapped["BankConnection"] = relationship(
        back_populates="transactions"
    )

    def __repr__(self) -> str:
        return (
            f"<BankTransaction {self.external_id} {self.amount} "
            f"reconciled={self.is_reconciled}>"
        )
