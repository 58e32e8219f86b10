import pytest


class TestApi:
    """Integration tests for the HTTP layer"""

    @pytest.fixture
    def customer_id(self, client):
        response = client.post("/api/customers", json={"name": "Dana Reyes", "address": "12 Elm St"})
        assert response.status_code == 200
        return response.json()["id"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_invoice_payment_flow(self, client, customer_id):
        response = client.post("/api/invoices", json={
            "customer_id": customer_id,
            "items": [{"description": "Labor", "quantity": 2, "unit_price": 50}],
        })
        assert response.status_code == 200
        invoice = response.json()
        assert invoice["invoice_number"] == "INV-0001"
        assert invoice["total"] == 107.75
        assert invoice["status"] == "draft"

        assert client.post(f"/api/invoices/{invoice['id']}/send").json()["status"] == "sent"

        client.post("/api/payments", json={"invoice_id": invoice["id"], "amount": 50})
        partial = client.get(f"/api/invoices/{invoice['id']}").json()
        assert partial["status"] == "partial"
        assert partial["amount_paid"] == 50.0
        assert partial["balance_due"] == 57.75

        client.post("/api/payments", json={"invoice_id": invoice["id"], "amount": 57.75, "method": "card"})
        paid = client.get(f"/api/invoices/{invoice['id']}").json()
        assert paid["status"] == "paid"
        assert paid["balance_due"] == 0.0
        assert paid["paid_at"] is not None
        assert len(paid["payments"]) == 2

    def test_quote_conversion(self, client, customer_id):
        client.put("/api/settings", json={"tax_rate": "0"})
        quote = client.post("/api/quotes", json={
            "customer_id": customer_id,
            "title": "Repipe",
            "items": [{"description": "Copper", "quantity": 1, "unit_price": 200}],
        }).json()
        assert quote["quote_number"] == "Q-0001"
        assert quote["total"] == 200.0

        response = client.post(f"/api/quotes/{quote['id']}/convert")
        assert response.status_code == 200
        job = client.get(f"/api/jobs/{response.json()['job_id']}").json()
        assert job["estimated_total"] == 200.0
        assert job["line_items"] == quote["items"]
        assert job["customer_name"] == "Dana Reyes"

        again = client.post(f"/api/quotes/{quote['id']}/convert")
        assert again.status_code == 409
        assert "already converted" in again.json()["error"]

    def test_convert_with_schedule_body(self, client, customer_id):
        quote = client.post("/api/quotes", json={"customer_id": customer_id}).json()
        response = client.post(f"/api/quotes/{quote['id']}/convert",
                               json={"scheduled_date": "2026-03-02", "scheduled_time": "09:00"})

        job = client.get(f"/api/jobs/{response.json()['job_id']}").json()
        assert job["scheduled_date"] == "2026-03-02"
        assert client.get("/api/jobs", params={"date": "2026-03-02"}).json()[0]["id"] == job["id"]

    @pytest.mark.parametrize("path", [
        "/api/customers/99",
        "/api/jobs/99",
        "/api/quotes/99",
        "/api/invoices/99",
        "/api/portal/unknown-token",
    ])
    def test_not_found(self, client, path):
        response = client.get(path)

        assert response.status_code == 404
        assert response.json()["error"].endswith("not found")

    def test_payment_for_missing_invoice(self, client):
        response = client.post("/api/payments", json={"invoice_id": 99, "amount": 10})

        assert response.status_code == 404
        assert client.get("/api/payments").json() == []

    @pytest.mark.parametrize("path,body", [
        ("/api/customers", {}),
        ("/api/customers", {"name": ""}),
        ("/api/payments", {"invoice_id": 1, "amount": 0}),
        ("/api/payments", {"invoice_id": 1, "amount": "lots"}),
        ("/api/quotes", {"customer_id": 1, "items": [{"quantity": -1, "unit_price": 5}]}),
        ("/api/jobs", {"customer_id": 1, "status": "done"}),
        ("/api/payments", {"invoice_id": 1, "amount": 1e30}),
        ("/api/payments", {"invoice_id": 1, "amount": 2e12}),
        ("/api/invoices", {"customer_id": 1, "items": [{"quantity": 1e20, "unit_price": 1e10}]}),
        ("/api/products", {"name": "Gold tap", "price": 1e30}),
    ])
    def test_validation_errors(self, client, customer_id, path, body):
        response = client.post(path, json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation error"
        assert response.json()["details"]

    def test_unknown_customer_reference(self, client):
        response = client.post("/api/quotes", json={"customer_id": 42})

        assert response.status_code == 400
        assert response.json()["details"] == {"customer_id": 42}

    def test_invoice_update_rejects_paid_status(self, client, customer_id):
        invoice = client.post("/api/invoices", json={"customer_id": customer_id}).json()
        response = client.put(f"/api/invoices/{invoice['id']}", json={"status": "paid"})

        assert response.status_code == 400

    def test_settings_round_trip(self, client):
        response = client.put("/api/settings", json={"company_name": "Acme Drains", "tax_rate": "6.5"})

        assert response.status_code == 200
        assert client.get("/api/settings").json()["company_name"] == "Acme Drains"
        assert client.put("/api/settings", json={"tax_rate": "200"}).status_code == 400

    def test_delete_returns_success(self, client, customer_id):
        team = client.post("/api/team", json={"name": "Sam"}).json()

        assert client.delete(f"/api/team/{team['id']}").json() == {"success": True}
        assert client.delete(f"/api/customers/{customer_id}").json() == {"success": True}
        assert client.delete(f"/api/customers/{customer_id}").status_code == 404

    def test_portal(self, client, customer_id):
        token = client.post(f"/api/customers/{customer_id}/portal-token").json()["portal_token"]

        view = client.get(f"/api/portal/{token}")
        assert view.status_code == 200
        assert view.json()["customer"]["name"] == "Dana Reyes"

        request = client.post(f"/api/portal/{token}/requests", json={"title": "Leaky faucet"})
        assert request.status_code == 200
        assert request.json()["customer_id"] == customer_id
        assert client.get("/api/requests", params={"customer_id": customer_id}).json()[0]["title"] == "Leaky faucet"

    def test_reports(self, client, customer_id):
        client.post("/api/jobs", json={"customer_id": customer_id})

        assert client.get("/api/dashboard").json()["stats"]["total_customers"] == 1
        assert client.get("/api/reports/jobs").json()["scheduled"] == 1
        assert len(client.get("/api/reports/revenue", params={"months": 3}).json()) == 3
        assert client.get("/api/reports/revenue", params={"months": 0}).status_code == 400

    def test_changes_persist_to_data_file(self, app_settings):
        from fastapi.testclient import TestClient

        from field_ops.api.app import create_app

        with TestClient(create_app(settings=app_settings)) as client:
            client.post("/api/customers", json={"name": "Dana Reyes"})

        with TestClient(create_app(settings=app_settings)) as client:
            assert [c["name"] for c in client.get("/api/customers").json()] == ["Dana Reyes"]
            assert client.post("/api/customers", json={"name": "Lee"}).json()["id"] == 2

    def test_settings_with_numeric_tax_rate(self, app_settings):
        from fastapi.testclient import TestClient

        from field_ops.api.app import create_app
        from field_ops.services.document_store import SETTINGS_KEY, DocumentStore, MemoryBackend

        store = DocumentStore(MemoryBackend({SETTINGS_KEY: {"tax_rate": 8}}))
        with TestClient(create_app(settings=app_settings, store=store)) as client:
            response = client.get("/api/settings")

        assert response.status_code == 200
        assert response.json()["tax_rate"] == "8"
