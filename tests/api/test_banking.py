"""
API tests for bank connections, feed sync and reconciliation.
"""

from datetime import date
from decimal import Decimal

import pytest

from smb_ledger.api.banking import get_bank_feed
from smb_ledger.main import app
from smb_ledger.schemas.banking import FeedTransaction


class StaticFeed:
    """Returns the same transactions for every connection."""

    def __init__(self, transactions):
        self.transactions = transactions

    def get_transactions(self, connection, from_date, to_date):
        return list(self.transactions)


@pytest.fixture
def feed(client):
    feed = StaticFeed([
        FeedTransaction(
            external_id="tx-1",
            transaction_date=date(2026, 3, 10),
            amount=Decimal("1150.00"),
            description="Acme Corp INV-00001",
        ),
        FeedTransaction(
            external_id="tx-2",
            transaction_date=date(2026, 3, 11),
            amount=Decimal("-42.00"),
            description="Bank charges",
        ),
    ])
    app.dependency_overrides[get_bank_feed] = lambda: feed
    return feed


def create_connection(client, company_id):
    response = client.post(
        f"/companies/{company_id}/bank-connections",
        json={
            "bank_name": "FNB",
            "account_name": "Business Cheque",
            "provider_account_id": "acc-1",
        },
    )
    assert response.status_code == 201
    return response.json()


def sync(client, company_id):
    response = client.post(f"/companies/{company_id}/banking/sync", json={})
    assert response.status_code == 200
    return response.json()


class TestBankConnections:

    def test_create_and_list(self, client, company):
        connection = create_connection(client, company.id)

        listed = client.get(f"/companies/{company.id}/bank-connections")

        assert connection["is_active"] is True
        assert connection["last_synced_at"] is None
        assert [c["id"] for c in listed.json()] == [connection["id"]]

    def test_unknown_company_is_404(self, client):
        response = client.post(
            "/companies/999/bank-connections",
            json={"bank_name": "FNB", "account_name": "Cheque"},
        )

        assert response.status_code == 404


class TestSync:

    def test_sync_imports_then_skips(self, client, company, feed):
        connection = create_connection(client, company.id)

        first = sync(client, company.id)
        second = sync(client, company.id)

        assert first == [{
            "connection_id": connection["id"],
            "imported": 2,
            "skipped": 0,
            "error": None,
        }]
        assert second[0]["imported"] == 0
        assert second[0]["skipped"] == 2

    def test_unknown_connection_is_404(self, client, company, feed):
        create_connection(client, company.id)

        response = client.post(
            f"/companies/{company.id}/banking/sync",
            json={"connection_id": 999},
        )

        assert response.status_code == 404


class TestReconciliation:

    def test_unreconciled_then_reconcile(self, client, company, feed):
        create_connection(client, company.id)
        sync(client, company.id)
        base = f"/companies/{company.id}/reconciliation"

        unreconciled = client.get(f"{base}/unreconciled").json()
        assert [t["external_id"] for t in unreconciled] == ["tx-2", "tx-1"]

        transaction_id = unreconciled[0]["id"]
        first = client.post(f"{base}/{transaction_id}/reconcile")
        again = client.post(f"{base}/{transaction_id}/reconcile")

        assert first.status_code == 200
        assert first.json()["is_reconciled"] is True
        assert again.json()["reconciled_at"] == first.json()["reconciled_at"]
        assert len(client.get(f"{base}/unreconciled").json()) == 1

    def test_other_company_cannot_reconcile(
        self, client, company, other_company, feed
    ):
        create_connection(client, company.id)
        sync(client, company.id)
        transaction_id = client.get(
            f"/companies/{company.id}/reconciliation/unreconciled"
        ).json()[0]["id"]

        response = client.post(
            f"/companies/{other_company.id}/reconciliation/"
            f"{transaction_id}/reconcile"
        )

        assert response.status_code == 404

    def test_suggestions_and_auto_reconcile(self, client, company, feed):
        invoice = client.post(
            f"/companies/{company.id}/invoices",
            json={
                "client_name": "Acme Corp",
                "issue_date": "2026-03-10",
                "due_date": "2026-04-10",
                "items": [{
                    "description": "Consulting",
                    "quantity": "10",
                    "unit_price": "100.00",
                    "tax_rate": "15",
                }],
            },
        ).json()
        client.post(
            f"/companies/{company.id}/invoices/{invoice['id']}/sent",
            json={"delivered": True},
        )
        create_connection(client, company.id)
        sync(client, company.id)
        base = f"/companies/{company.id}/reconciliation"
        deposit = next(
            t for t in client.get(f"{base}/unreconciled").json()
            if t["external_id"] == "tx-1"
        )

        suggestions = client.get(f"{base}/{deposit['id']}/suggestions").json()
        result = client.post(f"{base}/auto").json()

        assert suggestions[0]["match_type"] == "invoice"
        assert suggestions[0]["matched_id"] == invoice["id"]
        assert suggestions[0]["confidence"] == "HIGH"
        assert "Exact amount match" in suggestions[0]["reasons"]
        assert result["matched"] == 1
        assert result["unmatched"] == 1
        remaining = client.get(f"{base}/unreconciled").json()
        assert [t["external_id"] for t in remaining] == ["tx-2"]
