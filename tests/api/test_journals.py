"""
API tests for manual journals and reversals.
"""

from decimal import Decimal


def journal_body(debit="250.00", credit="250.00", debit_code="5230"):
    return {
        "journal_date": "2026-03-05",
        "memo": "Petty cash stationery",
        "lines": [
            {"account_code": debit_code, "debit": debit},
            {"account_code": "1110", "credit": credit},
        ],
    }


def post_journal(client, company_id, **kwargs):
    return client.post(
        f"/companies/{company_id}/journals", json=journal_body(**kwargs)
    )


class TestManualJournals:

    def test_post_balanced_journal(self, client, company):
        response = post_journal(client, company.id)

        assert response.status_code == 201
        data = response.json()
        assert data["source_type"] == "MANUAL"
        assert len(data["lines"]) == 2
        assert Decimal(data["lines"][0]["debit_amount"]) == Decimal("250.00")

    def test_unbalanced_journal_is_rejected(self, client, company):
        response = post_journal(client, company.id, credit="200.00")

        assert response.status_code == 400
        assert response.json()["error_type"] == "IntegrityError"
        assert client.get(f"/companies/{company.id}/journals").json() == []

    def test_unknown_account_code(self, client, company):
        response = post_journal(client, company.id, debit_code="5999")

        assert response.status_code == 400
        assert response.json()["error_type"] == "MappingError"

    def test_two_sided_line_fails_request_validation(self, client, company):
        body = journal_body()
        body["lines"][0]["credit"] = "250.00"

        response = client.post(f"/companies/{company.id}/journals", json=body)

        assert response.status_code == 422

    def test_get_and_list(self, client, company):
        journal_id = post_journal(client, company.id).json()["id"]

        fetched = client.get(f"/companies/{company.id}/journals/{journal_id}")
        listed = client.get(
            f"/companies/{company.id}/journals",
            params={"source_type": "MANUAL", "start_date": "2026-03-01"},
        )

        assert fetched.status_code == 200
        assert [j["id"] for j in listed.json()] == [journal_id]

    def test_journal_of_other_company_is_404(self, client, company, other_company):
        journal_id = post_journal(client, company.id).json()["id"]

        response = client.get(
            f"/companies/{other_company.id}/journals/{journal_id}"
        )

        assert response.status_code == 404


class TestReversals:

    def test_reverse_journal(self, client, company):
        journal_id = post_journal(client, company.id).json()["id"]

        response = client.post(
            f"/companies/{company.id}/journals/{journal_id}/reverse",
            json={"reversal_date": "2026-03-06"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["reverses_journal_id"] == journal_id
        assert data["journal_date"] == "2026-03-06"

    def test_second_reversal_is_409(self, client, company):
        journal_id = post_journal(client, company.id).json()["id"]
        url = f"/companies/{company.id}/journals/{journal_id}/reverse"
        client.post(url, json={})

        response = client.post(url, json={})

        assert response.status_code == 409
        assert response.json()["error_type"] == "DuplicatePostingError"

    def test_reversal_cannot_be_reversed(self, client, company):
        journal_id = post_journal(client, company.id).json()["id"]
        reversal_id = client.post(
            f"/companies/{company.id}/journals/{journal_id}/reverse", json={}
        ).json()["id"]

        response = client.post(
            f"/companies/{company.id}/journals/{reversal_id}/reverse", json={}
        )

        assert response.status_code == 422
        assert response.json()["error_type"] == "ValidationError"
