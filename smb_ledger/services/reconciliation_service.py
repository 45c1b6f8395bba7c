"""
Reconciliation service.

Bank transactions are marked reconciled once a person (or the
auto-matcher) has tied them to the books. The flag only moves
from False to True; there is no undo.

Matching scores a bank line against open invoices (money in)
and expenses (money out):

    score = 0.5 * amount + 0.3 * date + 0.2 * description

Matching only flips the reconciled flag. It never posts to the
ledger; the documents it matches against were posted when they
were created.
"""

from datetime import date, datetime
from decimal import Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from smb_ledger.config import get_settings
from smb_ledger.errors import NotFoundError
from smb_ledger.models.banking import BankConnection, BankTransaction
from smb_ledger.models.documents import Expense, Invoice
from smb_ledger.models.enums import InvoiceStatus, MatchConfidence
from smb_ledger.schemas.banking import AutoReconcileResult, MatchSuggestion
from smb_ledger.services.audit import record_event

logger = structlog.get_logger(__name__)

AMOUNT_WEIGHT = Decimal("0.5")
DATE_WEIGHT = Decimal("0.3")
DESCRIPTION_WEIGHT = Decimal("0.2")
MINIMUM_SCORE = Decimal("0.4")
HIGH_CONFIDENCE = Decimal("0.85")
MEDIUM_CONFIDENCE = Decimal("0.65")

OPEN_INVOICE_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.PARTIAL)


def amount_similarity(first: Decimal, second: Decimal) -> Decimal:
    """1 for an exact match, stepping down to 0 beyond a 10% difference."""
    diff = abs(first - second)
    if diff == 0:
        return Decimal("1")
    average = (abs(first) + abs(second)) / 2
    if average == 0:
        return Decimal("0")

    ratio = diff / average
    if ratio < Decimal("0.01"):
        return Decimal("0.95")
    if ratio < Decimal("0.05"):
        return Decimal("0.8")
    if ratio < Decimal("0.10"):
        return Decimal("0.6")
    return Decimal("0")


def date_similarity(first: date, second: date) -> Decimal:
    days = abs((first - second).days)
    if days == 0:
        return Decimal("1")
    if days <= 3:
        return Decimal("0.9")
    if days <= 7:
        return Decimal("0.7")
    if days <= 14:
        return Decimal("0.5")
    if days <= 30:
        return Decimal("0.3")
    return Decimal("0")


def string_similarity(first: str, second: str) -> Decimal:
    """
    Case-insensitive similarity between 0 and 1.

    Containment scores 0.8; otherwise the overlap of the two
    character sets (Dice coefficient).
    """
    a = first.lower().strip()
    b = second.lower().strip()
    if a == b:
        return Decimal("1")
    if not a or not b:
        return Decimal("0")

    shorter, longer = sorted((a, b), key=len)
    if shorter in longer:
        return Decimal("0.8")

    chars_a, chars_b = set(a), set(b)
    overlap = len(chars_a & chars_b)
    return Decimal(2 * overlap) / Decimal(len(chars_a) + len(chars_b))


def confidence_for(score: Decimal) -> MatchConfidence:
    if score >= HIGH_CONFIDENCE:
        return MatchConfidence.HIGH
    if score >= MEDIUM_CONFIDENCE:
        return MatchConfidence.MEDIUM
    return MatchConfidence.LOW


def _score(
    amount: Decimal, when: Decimal, description: Decimal, label: str
) -> tuple[Decimal, list[str]]:
    total = (
        amount * AMOUNT_WEIGHT
        + when * DATE_WEIGHT
        + description * DESCRIPTION_WEIGHT
    )
    reasons = []
    if amount > Decimal("0.9"):
        reasons.append("Exact amount match")
    elif amount > Decimal("0.7"):
        reasons.append("Similar amount")
    if when > Decimal("0.9"):
        reasons.append("Same date")
    elif when > Decimal("0.6"):
        reasons.append("Close date proximity")
    if description > Decimal("0.7"):
        reasons.append(label)
    return total.quantize(Decimal("0.0001")), reasons


class ReconciliationService:

    def __init__(self, db: Session):
        self.db = db

    def _transactions_query(self, company_id: int):
        return (
            select(BankTransaction)
            .join(
                BankConnection,
                BankTransaction.bank_connection_id == BankConnection.id,
            )
            .where(BankConnection.company_id == company_id)
        )

    def get_transaction(
        self, company_id: int, transaction_id: int
    ) -> BankTransaction:
        transaction = self.db.execute(
            self._transactions_query(company_id).where(
                BankTransaction.id == transaction_id
            )
        ).scalar_one_or_none()
        if not transaction:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return transaction

    def get_unreconciled_transactions(
        self, company_id: int
    ) -> list[BankTransaction]:
        """Unreconciled bank lines for the company, newest first."""
        transactions = self.db.execute(
            self._transactions_query(company_id)
            .where(BankTransaction.is_reconciled.is_(False))
            .order_by(
                BankTransaction.transaction_date.desc(),
                BankTransaction.id.desc(),
            )
        ).scalars().all()
        return list(transactions)

    def reconcile_transaction(
        self, company_id: int, transaction_id: int
    ) -> BankTransaction:
        """
        Mark a bank transaction reconciled.

        Reconciling an already reconciled transaction changes
        nothing and returns it as it is.
        """
        transaction = self.get_transaction(company_id, transaction_id)
        if transaction.is_reconciled:
            logger.debug(
                "transaction_already_reconciled",
                company_id=company_id,
                transaction_id=transaction_id,
            )
            return transaction

        self._mark_reconciled(company_id, transaction, source="manual")
        return transaction

    def _mark_reconciled(
        self, company_id: int, transaction: BankTransaction, source: str
    ) -> None:
        transaction.is_reconciled = True
        transaction.reconciled_at = datetime.utcnow()
        record_event(
            self.db,
            company_id,
            "transaction_reconciled",
            transaction_id=transaction.id,
            external_id=transaction.external_id,
            source=source,
        )
        self.db.flush()
        logger.info(
            "transaction_reconciled",
            company_id=company_id,
            transaction_id=transaction.id,
            source=source,
        )

    def _open_invoices(self, company_id: int) -> list[Invoice]:
        return list(self.db.execute(
            select(Invoice).where(
                Invoice.company_id == company_id,
                Invoice.status.in_(OPEN_INVOICE_STATUSES),
            )
        ).scalars().all())

    def _expenses(self, company_id: int) -> list[Expense]:
        return list(self.db.execute(
            select(Expense).where(Expense.company_id == company_id)
        ).scalars().all())

    def _best_invoice(
        self, transaction: BankTransaction, invoices: list[Invoice]
    ) -> MatchSuggestion | None:
        best = None
        for invoice in invoices:
            description = Decimal("0")
            if transaction.description:
                description = max(
                    string_similarity(
                        transaction.description, invoice.invoice_number
                    ),
                    string_similarity(
                        transaction.description, invoice.client_name
                    ),
                )
            score, reasons = _score(
                amount_similarity(transaction.amount, invoice.total_amount),
                date_similarity(
                    transaction.transaction_date, invoice.issue_date
                ),
                description,
                "Description matches",
            )
            if score > MINIMUM_SCORE and (best is None or score > best.score):
                best = MatchSuggestion(
                    transaction_id=transaction.id,
                    match_type="invoice",
                    matched_id=invoice.id,
                    confidence=confidence_for(score),
                    score=score,
                    reasons=reasons,
                )
        return best

    def _best_expense(
        self, transaction: BankTransaction, expenses: list[Expense]
    ) -> MatchSuggestion | None:
        best = None
        for expense in expenses:
            description = Decimal("0")
            if transaction.description:
                description = string_similarity(
                    transaction.description,
                    expense.vendor or expense.category or "",
                )
            score, reasons = _score(
                amount_similarity(
                    abs(transaction.amount), expense.total_amount
                ),
                date_similarity(
                    transaction.transaction_date, expense.expense_date
                ),
                description,
                "Vendor/category matches",
            )
            if score > MINIMUM_SCORE and (best is None or score > best.score):
                best = MatchSuggestion(
                    transaction_id=transaction.id,
                    match_type="expense",
                    matched_id=expense.id,
                    confidence=confidence_for(score),
                    score=score,
                    reasons=reasons,
                )
        return best

    def _best_match(
        self,
        transaction: BankTransaction,
        invoices: list[Invoice],
        expenses: list[Expense],
    ) -> MatchSuggestion | None:
        if transaction.amount > 0:
            return self._best_invoice(transaction, invoices)
        if transaction.amount < 0:
            return self._best_expense(transaction, expenses)
        return None

    def suggest_matches(
        self, company_id: int, transaction_id: int
    ) -> list[MatchSuggestion]:
        """Best-scoring candidate documents for one bank line."""
        transaction = self.get_transaction(company_id, transaction_id)
        match = self._best_match(
            transaction,
            self._open_invoices(company_id),
            self._expenses(company_id),
        )
        return [match] if match else []

    def auto_reconcile(
        self, company_id: int, threshold: Decimal | None = None
    ) -> AutoReconcileResult:
        """
        Match every unreconciled transaction and reconcile the sure ones.

        Transactions whose best score reaches the threshold are
        flagged reconciled; weaker matches are returned for review.
        """
        if threshold is None:
            threshold = get_settings().AUTO_MATCH_THRESHOLD

        invoices = self._open_invoices(company_id)
        expenses = self._expenses(company_id)
        auto_matched, needs_review = [], []
        unmatched = 0

        for transaction in self.get_unreconciled_transactions(company_id):
            match = self._best_match(transaction, invoices, expenses)
            if match is None:
                unmatched += 1
            elif match.score >= threshold:
                self._mark_reconciled(company_id, transaction, source="auto")
                auto_matched.append(match)
            else:
                needs_review.append(match)

        logger.info(
            "auto_reconcile_finished",
            company_id=company_id,
            matched=len(auto_matched),
            suggested=len(needs_review),
            unmatched=unmatched,
        )
        return AutoReconcileResult(
            matched=len(auto_matched),
            suggested=len(needs_review),
            unmatched=unmatched,
            auto_matched=auto_matched,
            needs_review=needs_review,
        )
