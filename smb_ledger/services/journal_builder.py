"""
Journal entry builder.

Turns a business document into a balanced JournalDraft using a
fixed posting rule per source type. The builder never touches
the database: account codes are resolved later by the
LedgerService, which is also where the draft gets persisted.

Posting rules:
    INVOICE   Dr Accounts Receivable (gross)
              Cr Sales Revenue (net)
              Cr VAT Output (tax, if any)
    BILL,     Dr expense account (net)
    EXPENSE   Dr VAT Input (tax, if any)
              Cr Accounts Payable (gross)
    PAYMENT   Dr Cash and Bank
              Cr Accounts Receivable

Every line amount is rounded exactly once, to the cent. If the
split side then differs from the rounded document total by a
single cent, the largest line on that side absorbs it.
"""

from collections.abc import Callable
from decimal import Decimal, ROUND_HALF_UP

from smb_ledger.errors import ConfigurationError, IntegrityError, ValidationError
from smb_ledger.models.enums import SourceType
from smb_ledger.schemas.ledger import DraftLine, JournalDraft, SourceDocument
from smb_ledger.services.chart_of_accounts_service import (
    ACCOUNTS_PAYABLE,
    ACCOUNTS_RECEIVABLE,
    CASH_AND_BANK,
    OPERATING_EXPENSES,
    SALES_REVENUE,
    VAT_INPUT,
    VAT_OUTPUT,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_cents(value: Decimal) -> Decimal:
    """Round a currency amount to the cent, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _validate_amounts(document: SourceDocument) -> None:
    if to_cents(document.amount) <= 0:
        raise ValidationError(
            f"Document amount must be at least 0.01, got {document.amount}"
        )
    if document.tax_amount < 0:
        raise ValidationError(
            f"Tax amount cannot be negative, got {document.tax_amount}"
        )
    if document.tax_amount > document.amount:
        raise ValidationError(
            f"Tax amount {document.tax_amount} exceeds document "
            f"total {document.amount}"
        )


def _settle_residual(lines: list[DraftLine], total: Decimal) -> None:
    """
    Make each side of the entry sum to the rounded document total.

    A one-cent residual from splitting tax out of the subtotal is
    moved onto the largest line of the side that drifted. Anything
    bigger means the posting rule is wrong.
    """
    for side in ("debit", "credit"):
        side_lines = [line for line in lines if getattr(line, side) > 0]
        if not side_lines:
            continue
        residual = total - sum(
            (getattr(line, side) for line in side_lines), ZERO
        )
        if residual == 0:
            continue
        if abs(residual) > CENT:
            raise IntegrityError(
                f"Rounding residual {residual} on {side} side exceeds one cent"
            )
        largest = max(side_lines, key=lambda line: getattr(line, side))
        setattr(largest, side, getattr(largest, side) + residual)


def _invoice_lines(document: SourceDocument) -> tuple[str, list[DraftLine]]:
    ref = document.reference
    gross = to_cents(document.amount)
    tax = to_cents(document.tax_amount)
    net = to_cents(document.amount - document.tax_amount)

    lines = [
        DraftLine(
            account_code=ACCOUNTS_RECEIVABLE,
            debit=gross,
            description=f"Invoice {ref}",
        ),
        DraftLine(
            account_code=SALES_REVENUE,
            credit=net,
            description=f"Sales - Invoice {ref}",
        ),
    ]
    if tax > 0:
        lines.append(DraftLine(
            account_code=VAT_OUTPUT,
            credit=tax,
            description=f"VAT - Invoice {ref}",
        ))
    return f"Invoice {ref} issued", lines


def _payable_lines(
    document: SourceDocument, label: str
) -> tuple[str, list[DraftLine]]:
    ref = document.reference
    gross = to_cents(document.amount)
    tax = to_cents(document.tax_amount)
    net = to_cents(document.amount - document.tax_amount)
    expense_code = document.counterpart_account_code or OPERATING_EXPENSES

    lines = [
        DraftLine(
            account_code=expense_code,
            debit=net,
            description=f"{label} {ref}",
        ),
    ]
    if tax > 0:
        lines.append(DraftLine(
            account_code=VAT_INPUT,
            debit=tax,
            description=f"VAT Input - {label} {ref}",
        ))
    lines.append(DraftLine(
        account_code=ACCOUNTS_PAYABLE,
        credit=gross,
        description=f"{label} {ref} - Payable",
    ))
    return f"{label} {ref} received", lines


def _bill_lines(document: SourceDocument) -> tuple[str, list[DraftLine]]:
    return _payable_lines(document, "Bill")


def _expense_lines(document: SourceDocument) -> tuple[str, list[DraftLine]]:
    return _payable_lines(document, "Expense")


def _payment_lines(document: SourceDocument) -> tuple[str, list[DraftLine]]:
    ref = document.reference
    amount = to_cents(document.amount)
    lines = [
        DraftLine(
            account_code=CASH_AND_BANK,
            debit=amount,
            description=f"Payment received - {document.method} - Invoice {ref}",
        ),
        DraftLine(
            account_code=ACCOUNTS_RECEIVABLE,
            credit=amount,
            description=f"Payment applied - Invoice {ref}",
        ),
    ]
    return f"Payment received for Invoice {ref}", lines


PostingRule = Callable[[SourceDocument], tuple[str, list[DraftLine]]]

POSTING_RULES: dict[SourceType, PostingRule] = {
    SourceType.INVOICE: _invoice_lines,
    SourceType.BILL: _bill_lines,
    SourceType.EXPENSE: _expense_lines,
    SourceType.PAYMENT: _payment_lines,
}


class JournalBuilder:
    """
    Builds balanced journal drafts from source documents.

    Rules can be overridden per instance, which is how tests
    exercise the residual and integrity checks.
    """

    def __init__(self, rules: dict[SourceType, PostingRule] | None = None):
        self.rules = dict(POSTING_RULES if rules is None else rules)

    def build(self, document: SourceDocument) -> JournalDraft:
        """
        Build the journal draft for a document.

        Raises:
            ConfigurationError: no rule for the document's source type
            ValidationError: amounts are out of range
            IntegrityError: the resulting entry does not balance
        """
        rule = self.rules.get(document.source_type)
        if rule is None:
            raise ConfigurationError(
                f"No posting rule for source type {document.source_type.value}"
            )

        _validate_amounts(document)
        memo, lines = rule(document)
        lines = [
            line for line in lines if line.debit > 0 or line.credit > 0
        ]
        _settle_residual(lines, to_cents(document.amount))

        draft = JournalDraft(
            company_id=document.company_id,
            journal_date=document.document_date,
            source_type=document.source_type,
            source_id=document.source_id,
            memo=memo,
            lines=lines,
        )
        draft.assert_balanced()
        return draft
