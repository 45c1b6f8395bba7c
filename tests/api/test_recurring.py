"""
API tests for recurring invoice profiles.
"""


def create_profile(client, company_id, start_date="2026-01-31"):
    response = client.post(
        f"/companies/{company_id}/recurring-profiles",
        json={
            "client_name": "Retainer Client",
            "interval": "MONTHLY",
            "start_date": start_date,
            "items": [{
                "description": "Retainer",
                "quantity": "1",
                "unit_price": "1000.00",
                "tax_rate": "15",
            }],
        },
    )
    assert response.status_code == 201
    return response.json()


class TestRecurringProfiles:

    def test_create_and_list(self, client, company):
        profile = create_profile(client, company.id)

        listed = client.get(f"/companies/{company.id}/recurring-profiles")

        assert profile["status"] == "ACTIVE"
        assert profile["next_run_date"] == "2026-01-31"
        assert [p["id"] for p in listed.json()] == [profile["id"]]

    def test_process_generates_invoice(self, client, company):
        profile = create_profile(client, company.id)
        base = f"/companies/{company.id}/recurring-profiles"

        result = client.post(f"{base}/process", json={"today": "2026-01-31"})

        assert result.status_code == 200
        assert result.json()["processed"] == 1
        invoice_id = result.json()["invoices_created"][0]
        invoice = client.get(
            f"/companies/{company.id}/invoices/{invoice_id}"
        ).json()
        assert invoice["recurring_profile_id"] == profile["id"]
        listed = client.get(base).json()
        assert listed[0]["next_run_date"] == "2026-02-28"

    def test_paused_profile_not_processed(self, client, company):
        profile = create_profile(client, company.id)
        base = f"/companies/{company.id}/recurring-profiles"

        paused = client.post(f"{base}/{profile['id']}/pause")
        result = client.post(f"{base}/process", json={"today": "2026-02-01"})
        resumed = client.post(f"{base}/{profile['id']}/resume")

        assert paused.json()["status"] == "PAUSED"
        assert result.json()["processed"] == 0
        assert resumed.json()["status"] == "ACTIVE"

    def test_unknown_profile_is_404(self, client, company):
        response = client.post(
            f"/companies/{company.id}/recurring-profiles/999/pause"
        )

        assert response.status_code == 404
