"""Bank feed provider client."""

from datetime import date
from typing import Any, Protocol

import httpx
import structlog
from pydantic import ValidationError as SchemaError

from smb_ledger.config import get_settings
from smb_ledger.models.banking import BankConnection
from smb_ledger.schemas.banking import FeedTransaction

logger = structlog.get_logger(__name__)


class BankFeedError(Exception):
    """The bank feed provider failed or returned something unusable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BankFeedProvider(Protocol):
    """Anything that can list a connection's bank transactions."""

    def get_transactions(
        self, connection: BankConnection, from_date: date, to_date: date
    ) -> list[FeedTransaction]:
        ...


class BankFeedClient:
    """Synchronous HTTP client for the bank feed provider."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.BANK_FEED_URL).rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.BANK_FEED_TIMEOUT),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BankFeedClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def get_transactions(
        self, connection: BankConnection, from_date: date, to_date: date
    ) -> list[FeedTransaction]:
        """Fetch the connection's transactions between two dates, inclusive."""
        account_ref = connection.provider_account_id or str(connection.id)
        try:
            response = self._client.get(
                f"/accounts/{account_ref}/transactions",
                params={
                    "from": from_date.isoformat(),
                    "to": to_date.isoformat(),
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BankFeedError(
                f"Bank feed returned {e.response.status_code} for "
                f"connection {connection.id}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise BankFeedError(
                f"Bank feed request failed for connection {connection.id}: {e}"
            ) from e

        payload = response.json()
        if isinstance(payload, dict):
            payload = payload.get("transactions", [])
        if not isinstance(payload, list):
            raise BankFeedError("Invalid bank feed response format")

        try:
            transactions = [FeedTransaction.model_validate(item) for item in payload]
        except SchemaError as e:
            raise BankFeedError(f"Malformed bank feed transaction: {e}") from e

        logger.debug(
            "bank_feed_fetched",
            connection_id=connection.id,
            count=len(transactions),
        )
        return transactions
