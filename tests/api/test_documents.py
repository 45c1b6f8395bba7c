"""
API tests for invoices, payments, bills and expenses.
"""

from decimal import Decimal


def invoice_body(**overrides):
    body = {
        "client_name": "Acme Corp",
        "issue_date": "2026-03-01",
        "due_date": "2026-03-31",
        "items": [
            {
                "description": "Consulting",
                "quantity": "10",
                "unit_price": "100.00",
                "tax_rate": "15",
            },
        ],
    }
    body.update(overrides)
    return body


def create_invoice(client, company_id, **overrides):
    response = client.post(
        f"/companies/{company_id}/invoices", json=invoice_body(**overrides)
    )
    assert response.status_code == 201
    return response.json()


class TestInvoices:

    def test_create_invoice_posts_journal(self, client, company):
        invoice = create_invoice(client, company.id)

        assert invoice["invoice_number"] == "INV-00001"
        assert invoice["status"] == "DRAFT"
        assert Decimal(invoice["total_amount"]) == Decimal("1150.00")

        journals = client.get(
            f"/companies/{company.id}/journals",
            params={"source_type": "INVOICE"},
        ).json()
        assert len(journals) == 1
        assert journals[0]["source_id"] == str(invoice["id"])

    def test_due_before_issue_is_422(self, client, company):
        response = client.post(
            f"/companies/{company.id}/invoices",
            json=invoice_body(due_date="2026-02-01"),
        )

        assert response.status_code == 422
        assert response.json()["error_type"] == "ValidationError"

    def test_invoice_without_items_rejected(self, client, company):
        response = client.post(
            f"/companies/{company.id}/invoices", json=invoice_body(items=[])
        )

        assert response.status_code == 422

    def test_mark_sent(self, client, company):
        invoice = create_invoice(client, company.id)
        url = f"/companies/{company.id}/invoices/{invoice['id']}/sent"

        not_delivered = client.post(url, json={"delivered": False})
        delivered = client.post(url, json={"delivered": True})

        assert not_delivered.json()["status"] == "DRAFT"
        assert delivered.json()["status"] == "SENT"

    def test_list_by_status(self, client, company):
        create_invoice(client, company.id)

        sent = client.get(
            f"/companies/{company.id}/invoices", params={"status": "SENT"}
        )
        drafts = client.get(
            f"/companies/{company.id}/invoices", params={"status": "DRAFT"}
        )

        assert sent.json() == []
        assert len(drafts.json()) == 1

    def test_unknown_invoice_is_404(self, client, company):
        response = client.get(f"/companies/{company.id}/invoices/999")

        assert response.status_code == 404


class TestPayments:

    def test_payment_marks_invoice_paid(self, client, company):
        invoice = create_invoice(client, company.id)

        response = client.post(
            f"/companies/{company.id}/payments",
            json={
                "invoice_id": invoice["id"],
                "payment_date": "2026-03-15",
                "amount": "1150.00",
            },
        )

        assert response.status_code == 201
        fetched = client.get(
            f"/companies/{company.id}/invoices/{invoice['id']}"
        ).json()
        assert fetched["status"] == "PAID"
        assert Decimal(fetched["amount_paid"]) == Decimal("1150.00")

    def test_overpayment_is_422(self, client, company):
        invoice = create_invoice(client, company.id)

        response = client.post(
            f"/companies/{company.id}/payments",
            json={
                "invoice_id": invoice["id"],
                "payment_date": "2026-03-15",
                "amount": "5000.00",
            },
        )

        assert response.status_code == 422
        assert "exceeds balance due" in response.json()["error"]


class TestPayables:

    def test_create_bill(self, client, company):
        response = client.post(
            f"/companies/{company.id}/bills",
            json={
                "bill_number": "SUP-1",
                "supplier_name": "Power Co",
                "bill_date": "2026-03-01",
                "due_date": "2026-03-20",
                "items": [{
                    "description": "Electricity",
                    "quantity": "1",
                    "unit_price": "400.00",
                    "tax_rate": "15",
                }],
                "expense_account_code": "5220",
            },
        )

        assert response.status_code == 201
        assert Decimal(response.json()["total_amount"]) == Decimal("460.00")

    def test_expense_with_unknown_account_is_400(self, client, company):
        response = client.post(
            f"/companies/{company.id}/expenses",
            json={
                "description": "Lunch",
                "expense_date": "2026-03-01",
                "amount": "80.00",
                "expense_account_code": "5999",
            },
        )

        assert response.status_code == 400
        assert response.json()["error_type"] == "MappingError"

    def test_create_expense(self, client, company):
        response = client.post(
            f"/companies/{company.id}/expenses",
            json={
                "description": "Printer paper",
                "expense_date": "2026-03-01",
                "amount": "200.00",
                "tax_rate": "15",
                "vendor": "Office Depot",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["total_amount"]) == Decimal("230.00")
        assert data["expense_account_code"] == "5200"
