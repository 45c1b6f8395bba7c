"""
API tests for company onboarding and the chart of accounts.
"""


def create_company(client, name="Acme Trading", **fields):
    response = client.post("/companies", json={"name": name, **fields})
    assert response.status_code == 201
    return response.json()


class TestCompanies:

    def test_onboarding_seeds_chart(self, client):
        data = create_company(client, currency="USD")

        assert data["company"]["name"] == "Acme Trading"
        assert data["company"]["currency"] == "USD"
        assert data["accounts_created"] == 22

    def test_default_currency(self, client):
        data = create_company(client)

        assert data["company"]["currency"] == "ZAR"

    def test_get_company(self, client):
        company_id = create_company(client)["company"]["id"]

        response = client.get(f"/companies/{company_id}")

        assert response.status_code == 200
        assert response.json()["id"] == company_id

    def test_unknown_company_is_404(self, client):
        response = client.get("/companies/999")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error_type"] == "NotFoundError"

    def test_blank_name_rejected(self, client):
        response = client.post("/companies", json={"name": ""})

        assert response.status_code == 422


class TestAccounts:

    def test_list_chart(self, client):
        company_id = create_company(client)["company"]["id"]

        response = client.get(f"/companies/{company_id}/accounts")

        codes = [a["code"] for a in response.json()]
        assert response.status_code == 200
        assert codes == sorted(codes)
        assert "4100" in codes

    def test_create_custom_account(self, client):
        company_id = create_company(client)["company"]["id"]

        response = client.post(
            f"/companies/{company_id}/accounts",
            json={
                "code": "5240",
                "name": "Software Subscriptions",
                "account_type": "EXPENSE",
                "parent_code": "5200",
            },
        )

        assert response.status_code == 201
        assert response.json()["normal_balance"] == "DEBIT"

    def test_duplicate_code_is_409(self, client):
        company_id = create_company(client)["company"]["id"]

        response = client.post(
            f"/companies/{company_id}/accounts",
            json={"code": "4100", "name": "Sales", "account_type": "REVENUE"},
        )

        assert response.status_code == 409
        assert response.json()["error_type"] == "ConflictError"

    def test_deactivate_hides_account(self, client):
        company_id = create_company(client)["company"]["id"]
        accounts = client.get(f"/companies/{company_id}/accounts").json()
        rent = next(a for a in accounts if a["code"] == "5210")

        response = client.post(
            f"/companies/{company_id}/accounts/{rent['id']}/deactivate"
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        codes = [
            a["code"]
            for a in client.get(f"/companies/{company_id}/accounts").json()
        ]
        assert "5210" not in codes
