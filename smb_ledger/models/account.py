"""
Account model (chart of accounts).

Every posting lands on one of these. Accounts are seeded when a
company is created and are rarely changed afterwards.
"""

from datetime import datetime

from sqlalchemy import (
    String, Boolean, DateTime, ForeignKey, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smb_ledger.models.base import Base
from smb_ledger.models.enums import AccountType, NormalBalance


class Account(Base):
    """
    A single account in a company's chart of accounts.

    Once referenced by a journal line, an account is never
    deleted, only deactivated via is_active=False.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("company_id", "code", name="uq_accounts_company_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id"), nullable=False, index=True
    )
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    normal_balance: Mapped[NormalBalance] = mapped_column(
        SAEnum(NormalBalance, name="normal_balance_enum"),
        nullable=False,
    )
    parent_code: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )
    description: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    company: Mapped["Company"] = relationship(back_populates="accounts")

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.account_type.value})>"
