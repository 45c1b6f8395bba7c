"""
Bank sync service.

Pulls transactions from the bank feed provider into the
transactions table. Each connection is synced independently: one
failing bank does not stop the others, and its partial import is
rolled back to the connection's SAVEPOINT.
"""

from datetime import date, datetime, timedelta

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smb_ledger.config import get_settings
from smb_ledger.errors import LedgerError, NotFoundError
from smb_ledger.integrations.bank_feed import (
    BankFeedClient,
    BankFeedError,
    BankFeedProvider,
)
from smb_ledger.models.banking import BankConnection, BankTransaction
from smb_ledger.schemas.banking import BankConnectionCreate, ConnectionSyncResult
from smb_ledger.services.audit import record_event
from smb_ledger.services.company_service import CompanyService

logger = structlog.get_logger(__name__)


class BankSyncService:

    def __init__(self, db: Session, provider: BankFeedProvider | None = None):
        self.db = db
        self._provider = provider

    @property
    def provider(self) -> BankFeedProvider:
        if self._provider is None:
            self._provider = BankFeedClient()
        return self._provider

    def create_connection(
        self, company_id: int, request: BankConnectionCreate
    ) -> BankConnection:
        CompanyService(self.db).get_company(company_id)
        connection = BankConnection(
            company_id=company_id,
            bank_name=request.bank_name,
            account_name=request.account_name,
            account_number=request.account_number,
            provider_account_id=request.provider_account_id,
        )
        self.db.add(connection)
        self.db.flush()
        return connection

    def list_connections(
        self, company_id: int, active_only: bool = True
    ) -> list[BankConnection]:
        query = select(BankConnection).where(
            BankConnection.company_id == company_id
        )
        if active_only:
            query = query.where(BankConnection.is_active.is_(True))
        return list(
            self.db.execute(query.order_by(BankConnection.id)).scalars().all()
        )

    def sync_company(
        self,
        company_id: int,
        connection_id: int | None = None,
        lookback_days: int | None = None,
        today: date | None = None,
    ) -> list[ConnectionSyncResult]:
        """
        Import new bank transactions for a company's active connections.

        Returns one result per connection. A failed connection has
        its error message set and imported == 0.
        """
        lookback = lookback_days or get_settings().BANK_SYNC_LOOKBACK_DAYS
        to_date = today or date.today()
        from_date = to_date - timedelta(days=lookback)

        connections = self.list_connections(company_id)
        if connection_id is not None:
            connections = [c for c in connections if c.id == connection_id]
            if not connections:
                raise NotFoundError(
                    f"Bank connection {connection_id} not found"
                )

        results = []
        for connection in connections:
            try:
                with self.db.begin_nested():
                    result = self._sync_connection(
                        connection, from_date, to_date
                    )
            except (BankFeedError, LedgerError, SQLAlchemyError) as e:
                logger.error(
                    "bank_sync_connection_failed",
                    company_id=company_id,
                    connection_id=connection.id,
                    error=str(e),
                )
                result = ConnectionSyncResult(
                    connection_id=connection.id, error=str(e)
                )
            results.append(result)

        record_event(
            self.db,
            company_id,
            "bank_sync",
            connections=len(results),
            imported=sum(r.imported for r in results),
            failed=sum(1 for r in results if r.error),
        )
        self.db.flush()
        return results

    def _sync_connection(
        self, connection: BankConnection, from_date: date, to_date: date
    ) -> ConnectionSyncResult:
        feed = self.provider.get_transactions(connection, from_date, to_date)

        known = set(self.db.execute(
            select(BankTransaction.external_id).where(
                BankTransaction.bank_connection_id == connection.id
            )
        ).scalars().all())

        result = ConnectionSyncResult(connection_id=connection.id)
        for item in feed:
            if item.external_id in known:
                result.skipped += 1
                continue
            self.db.add(BankTransaction(
                bank_connection_id=connection.id,
                external_id=item.external_id,
                transaction_date=item.transaction_date,
                amount=item.amount,
                description=item.description,
                merchant=item.merchant,
                category=item.category,
            ))
            known.add(item.external_id)
            result.imported += 1

        connection.last_synced_at = datetime.utcnow()
        self.db.flush()

        logger.info(
            "bank_sync_connection_finished",
            company_id=connection.company_id,
            connection_id=connection.id,
            imported=result.imported,
            skipped=result.skipped,
        )
        return result
