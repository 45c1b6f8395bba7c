"""
Ledger service: posting journals and reading them back.

This service enforces the fundamental rules:
1. Every journal must balance (debits = credits, to the cent)
2. Journals are immutable; corrections are reversing journals
3. Accounts must exist, belong to the company and be active
4. A source document is posted at most once

No other service writes journals directly. Documents, manual
entries and reversals all go through post_journal_entry().
"""

from datetime import date

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError as StoreIntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from smb_ledger.errors import (
    DuplicatePostingError,
    NotFoundError,
    PersistenceError,
    ValidationError,
    duplicate_posting,
    journal_not_found,
)
from smb_ledger.models.account import Account
from smb_ledger.models.enums import SourceType
from smb_ledger.models.journal import Journal, JournalLine
from smb_ledger.schemas.ledger import (
    DraftLine,
    JournalCreate,
    JournalDraft,
    SourceDocument,
)
from smb_ledger.services.audit import record_event
from smb_ledger.services.chart_of_accounts_service import ChartOfAccountsService
from smb_ledger.services.journal_builder import JournalBuilder

logger = structlog.get_logger(__name__)


class LedgerService:
    """
    All ledger writes pass through this service.

    The service takes a database session as a constructor
    argument. The caller controls the outer transaction and
    decides when to commit or roll back; each posting runs in
    its own SAVEPOINT so a failed posting leaves nothing behind.
    """

    def __init__(self, db: Session, builder: JournalBuilder | None = None):
        self.db = db
        self.builder = builder or JournalBuilder()
        self.chart = ChartOfAccountsService(db)

    def post_journal_entry(self, draft: JournalDraft) -> Journal:
        """
        Persist a journal header and all its lines as one unit.

        Raises:
            IntegrityError: the draft does not balance
            MappingError: an account code is unknown or inactive
            DuplicatePostingError: the source document already has a journal
            PersistenceError: the store rejected the write
        """
        draft.assert_balanced()
        accounts = self.chart.get_accounts_by_codes(
            draft.company_id, {line.account_code for line in draft.lines}
        )
        return self._write(draft, accounts)

    def post_source_document(self, document: SourceDocument) -> Journal:
        """Build the journal for a business document and post it."""
        draft = self.builder.build(document)
        return self.post_journal_entry(draft)

    def post_manual_journal(
        self, company_id: int, request: JournalCreate
    ) -> Journal:
        """Post a manual journal from explicit lines."""
        draft = JournalDraft(
            company_id=company_id,
            journal_date=request.journal_date,
            source_type=SourceType.MANUAL,
            memo=request.memo,
            lines=[
                DraftLine(
                    account_code=line.account_code,
                    debit=line.debit,
                    credit=line.credit,
                    description=line.description,
                )
                for line in request.lines
            ],
        )
        return self.post_journal_entry(draft)

    def reverse_journal(
        self,
        company_id: int,
        journal_id: int,
        reversal_date: date | None = None,
        memo: str | None = None,
    ) -> Journal:
        """
        Cancel a posted journal by posting its mirror image.

        The original is never touched. The reversal swaps every
        debit and credit and points back through
        reverses_journal_id, which is unique, so a journal can
        only be reversed once.
        """
        original = self.get_journal(company_id, journal_id)
        if original.reverses_journal_id is not None:
            raise ValidationError(
                f"Journal {journal_id} is itself a reversal and cannot be reversed"
            )

        draft = JournalDraft(
            company_id=company_id,
            journal_date=reversal_date or date.today(),
            source_type=SourceType.MANUAL,
            memo=memo or f"Reversal of journal {original.id}",
            lines=[
                DraftLine(
                    account_code=line.account.code,
                    debit=line.credit_amount,
                    credit=line.debit_amount,
                    description=f"Reversal: {line.description or original.memo}",
                )
                for line in original.lines
            ],
        )
        draft.assert_balanced()

        # Inactive accounts can still be reversed against.
        accounts = {line.account.code: line.account for line in original.lines}
        return self._write(draft, accounts, reverses_journal_id=original.id)

    def _write(
        self,
        draft: JournalDraft,
        accounts: dict[str, Account],
        reverses_journal_id: int | None = None,
    ) -> Journal:
        try:
            with self.db.begin_nested():
                journal = Journal(
                    company_id=draft.company_id,
                    journal_date=draft.journal_date,
                    source_type=draft.source_type,
                    source_id=draft.source_id,
                    memo=draft.memo,
                    reverses_journal_id=reverses_journal_id,
                )
                self.db.add(journal)
                self.db.flush()

                for line in draft.lines:
                    self.db.add(JournalLine(
                        journal_id=journal.id,
                        account_id=accounts[line.account_code].id,
                        debit_amount=line.debit,
                        credit_amount=line.credit,
                        description=line.description,
                    ))
                self.db.flush()
        except StoreIntegrityError as e:
            self._raise_conflict(draft, reverses_journal_id, e)
        except SQLAlchemyError as e:
            logger.error(
                "journal_write_failed",
                company_id=draft.company_id,
                source_type=draft.source_type.value,
                source_id=draft.source_id,
                error=str(e),
            )
            raise PersistenceError(f"Could not write journal: {e}") from e

        self.db.refresh(journal)
        record_event(
            self.db,
            draft.company_id,
            "journal_reversed" if reverses_journal_id else "journal_posted",
            journal_id=journal.id,
            source_type=draft.source_type.value,
            source_id=draft.source_id,
            reverses_journal_id=reverses_journal_id,
            amount=draft.total_debit,
        )
        logger.info(
            "journal_posted",
            company_id=draft.company_id,
            journal_id=journal.id,
            source_type=draft.source_type.value,
            source_id=draft.source_id,
            lines=len(draft.lines),
            amount=str(draft.total_debit),
        )
        return journal

    def _raise_conflict(
        self,
        draft: JournalDraft,
        reverses_journal_id: int | None,
        error: StoreIntegrityError,
    ) -> None:
        """Translate a unique-constraint violation into a ledger error."""
        if reverses_journal_id is not None and self._reversal_of(
            reverses_journal_id
        ):
            logger.warning(
                "duplicate_reversal_rejected",
                company_id=draft.company_id,
                journal_id=reverses_journal_id,
            )
            raise DuplicatePostingError(
                f"Journal {reverses_journal_id} has already been reversed"
            ) from error

        if draft.source_id is not None and self._journal_for_source(
            draft.source_type, draft.source_id
        ):
            logger.warning(
                "duplicate_posting_rejected",
                company_id=draft.company_id,
                source_type=draft.source_type.value,
                source_id=draft.source_id,
            )
            raise DuplicatePostingError(
                duplicate_posting(draft.source_type.value, draft.source_id)
            ) from error

        logger.error(
            "journal_write_failed",
            company_id=draft.company_id,
            source_type=draft.source_type.value,
            source_id=draft.source_id,
            error=str(error.orig),
        )
        raise PersistenceError(
            f"Could not write journal: {error.orig}"
        ) from error

    def _journal_for_source(
        self, source_type: SourceType, source_id: str
    ) -> Journal | None:
        return self.db.execute(
            select(Journal).where(
                Journal.source_type == source_type,
                Journal.source_id == source_id,
            )
        ).scalar_one_or_none()

    def _reversal_of(self, journal_id: int) -> Journal | None:
        return self.db.execute(
            select(Journal).where(Journal.reverses_journal_id == journal_id)
        ).scalar_one_or_none()

    def find_journal_for_source(
        self, company_id: int, source_type: SourceType, source_id: str
    ) -> Journal | None:
        """Return the journal posted for a source document, if any."""
        journal = self._journal_for_source(source_type, source_id)
        if journal is None or journal.company_id != company_id:
            return None
        return journal

    def get_journal(self, company_id: int, journal_id: int) -> Journal:
        """Get a journal with its lines."""
        journal = self.db.execute(
            select(Journal)
            .options(selectinload(Journal.lines).selectinload(JournalLine.account))
            .where(Journal.id == journal_id, Journal.company_id == company_id)
        ).scalar_one_or_none()
        if not journal:
            raise NotFoundError(journal_not_found(journal_id))
        return journal

    def list_journals(
        self,
        company_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
        source_type: SourceType | None = None,
    ) -> list[Journal]:
        """Return the company's journals, newest first."""
        query = (
            select(Journal)
            .options(selectinload(Journal.lines))
            .where(Journal.company_id == company_id)
        )
        if start_date:
            query = query.where(Journal.journal_date >= start_date)
        if end_date:
            query = query.where(Journal.journal_date <= end_date)
        if source_type:
            query = query.where(Journal.source_type == source_type)

        journals = self.db.execute(
            query.order_by(Journal.journal_date.desc(), Journal.id.desc())
        ).scalars().all()
        return list(journals)

    def get_lines_by_account(
        self, company_id: int, account_id: int
    ) -> list[JournalLine]:
        """Return every line posted to an account, newest journal first."""
        lines = self.db.execute(
            select(JournalLine)
            .join(Journal, JournalLine.journal_id == Journal.id)
            .where(
                Journal.company_id == company_id,
                JournalLine.account_id == account_id,
            )
            .order_by(Journal.journal_date.desc(), JournalLine.id.desc())
        ).scalars().all()
        return list(lines)
