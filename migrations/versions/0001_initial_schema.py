"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

account_type_enum = sa.Enum(
    "ASSET", "LIABILITY", "EQUITY", "REVENUE", "EXPENSE",
    name="account_type_enum",
)
normal_balance_enum = sa.Enum("DEBIT", "CREDIT", name="normal_balance_enum")
source_type_enum = sa.Enum(
    "INVOICE", "BILL", "EXPENSE", "PAYMENT", "MANUAL",
    name="source_type_enum",
)
invoice_status_enum = sa.Enum(
    "DRAFT", "SENT", "PARTIAL", "PAID", "CANCELLED",
    name="invoice_status_enum",
)
recurring_interval_enum = sa.Enum(
    "WEEKLY", "MONTHLY", "QUARTERLY", "YEARLY",
    name="recurring_interval_enum",
)
recurring_status_enum = sa.Enum(
    "ACTIVE", "PAUSED", name="recurring_status_enum"
)

MONEY = sa.Numeric(19, 2)


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("vat_number", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=True,
        ),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_log_company_id", "audit_log", ["company_id"])

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("code", sa.String(20), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("account_type", account_type_enum, nullable=False),
        sa.Column("normal_balance", normal_balance_enum, nullable=False),
        sa.Column("parent_code", sa.String(20), nullable=True),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "company_id", "code", name="uq_accounts_company_code"
        ),
    )
    op.create_index("ix_accounts_company_id", "accounts", ["company_id"])

    op.create_table(
        "journals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("journal_date", sa.Date(), nullable=False),
        sa.Column("source_type", source_type_enum, nullable=False),
        sa.Column("source_id", sa.String(64), nullable=True),
        sa.Column("memo", sa.String(255), nullable=True),
        sa.Column(
            "reverses_journal_id", sa.Integer(),
            sa.ForeignKey("journals.id"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "source_type", "source_id", name="uq_journals_source"
        ),
        sa.UniqueConstraint(
            "reverses_journal_id", name="uq_journals_reverses"
        ),
    )
    op.create_index("ix_journals_company_id", "journals", ["company_id"])

    op.create_table(
        "journal_lines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "journal_id", sa.Integer(), sa.ForeignKey("journals.id"),
            nullable=False,
        ),
        sa.Column(
            "account_id", sa.Integer(), sa.ForeignKey("accounts.id"),
            nullable=False,
        ),
        sa.Column("debit_amount", MONEY, nullable=False),
        sa.Column("credit_amount", MONEY, nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.CheckConstraint(
            "debit_amount >= 0 AND credit_amount >= 0",
            name="ck_journal_lines_non_negative",
        ),
        sa.CheckConstraint(
            "(debit_amount > 0 AND credit_amount = 0) OR "
            "(credit_amount > 0 AND debit_amount = 0)",
            name="ck_journal_lines_one_side",
        ),
    )
    op.create_index(
        "ix_journal_lines_journal_id", "journal_lines", ["journal_id"]
    )
    op.create_index(
        "ix_journal_lines_account_id", "journal_lines", ["account_id"]
    )

    op.create_table(
        "bank_connections",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("bank_name", sa.String(50), nullable=False),
        sa.Column("account_name", sa.String(100), nullable=False),
        sa.Column("account_number", sa.String(50), nullable=True),
        sa.Column("provider_account_id", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_synced_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_bank_connections_company_id", "bank_connections", ["company_id"]
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "bank_connection_id", sa.Integer(),
            sa.ForeignKey("bank_connections.id"), nullable=False,
        ),
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("merchant", sa.String(100), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("is_reconciled", sa.Boolean(), nullable=False),
        sa.Column("reconciled_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "bank_connection_id", "external_id",
            name="uq_transactions_connection_external",
        ),
    )
    op.create_index(
        "ix_transactions_bank_connection_id",
        "transactions",
        ["bank_connection_id"],
    )

    op.create_table(
        "recurring_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("client_name", sa.String(200), nullable=False),
        sa.Column("interval", recurring_interval_enum, nullable=False),
        sa.Column("status", recurring_status_enum, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("next_run_date", sa.Date(), nullable=False),
        sa.Column("anchor_day", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_recurring_profiles_company_id",
        "recurring_profiles",
        ["company_id"],
    )

    op.create_table(
        "recurring_profile_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "profile_id", sa.Integer(),
            sa.ForeignKey("recurring_profiles.id"), nullable=False,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
    )
    op.create_index(
        "ix_recurring_profile_items_profile_id",
        "recurring_profile_items",
        ["profile_id"],
    )

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("client_name", sa.String(200), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", invoice_status_enum, nullable=False),
        sa.Column("subtotal", MONEY, nullable=False),
        sa.Column("tax_amount", MONEY, nullable=False),
        sa.Column("total_amount", MONEY, nullable=False),
        sa.Column("amount_paid", MONEY, nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "recurring_profile_id", sa.Integer(),
            sa.ForeignKey("recurring_profiles.id"), nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "company_id", "invoice_number", name="uq_invoices_company_number"
        ),
    )
    op.create_index("ix_invoices_company_id", "invoices", ["company_id"])

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"),
            nullable=False,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("line_total", MONEY, nullable=False),
    )
    op.create_index(
        "ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"]
    )

    op.create_table(
        "bills",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("bill_number", sa.String(50), nullable=False),
        sa.Column("supplier_name", sa.String(200), nullable=False),
        sa.Column("bill_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("subtotal", MONEY, nullable=False),
        sa.Column("tax_amount", MONEY, nullable=False),
        sa.Column("total_amount", MONEY, nullable=False),
        sa.Column("expense_account_code", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bills_company_id", "bills", ["company_id"])

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("vendor", sa.String(200), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("tax_amount", MONEY, nullable=False),
        sa.Column("total_amount", MONEY, nullable=False),
        sa.Column("expense_account_code", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_expenses_company_id", "expenses", ["company_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"),
            nullable=False,
        ),
        sa.Column(
            "invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"),
            nullable=False,
        ),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("method", sa.String(50), nullable=False),
        sa.Column("reference", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_payments_company_id", "payments", ["company_id"])
    op.create_index("ix_payments_invoice_id", "payments", ["invoice_id"])


def downgrade() -> None:
    for table in (
        "payments",
        "expenses",
        "bills",
        "invoice_items",
        "invoices",
        "recurring_profile_items",
        "recurring_profiles",
        "transactions",
        "bank_connections",
        "journal_lines",
        "journals",
        "accounts",
        "audit_log",
        "companies",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (
        recurring_status_enum,
        recurring_interval_enum,
        invoice_status_enum,
        source_type_enum,
        normal_balance_enum,
        account_type_enum,
    ):
        enum.drop(bind, checkfirst=True)
