"""Integration tests for the admin and webhook event endpoints"""

import pytest
from datetime import timedelta
from httpx import AsyncClient

from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatusRecord
from invoice_tracker.domain.webhook_event import WebhookEvent


class TestAdminAPI:

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, auth_headers):
        await client.post("/api/invoice-status", json={"invoice_number": "INV-1"})
        await client.post(
            "/api/invoice-callback",
            json={"invoice_number": "INV-2", "status": "failed"},
            headers=auth_headers,
        )

        response = await client.get("/api/admin/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total_invoices"] == 2
        assert data["by_status"]["pending"] == 1
        assert data["by_status"]["failed"] == 1
        assert data["total_webhook_events"] == 1

    @pytest.mark.asyncio
    async def test_cleanup(self, client: AsyncClient, db_session):
        old = utc_now() - timedelta(hours=30)
        db_session.add(InvoiceStatusRecord(invoice_number="INV-OLD", created_at=old, updated_at=old))
        db_session.add(InvoiceStatusRecord(invoice_number="INV-NEW"))
        db_session.add(WebhookEvent(event_type="invoice_callback", payload={}, received_at=old))
        await db_session.commit()

        response = await client.post("/api/admin/cleanup", params={"max_age_hours": 24})

        assert response.status_code == 200
        assert response.json()["invoices"] == 1
        assert response.json()["webhook_events"] == 1

        stats = (await client.get("/api/admin/stats")).json()
        assert stats["total_invoices"] == 1

    @pytest.mark.asyncio
    async def test_cleanup_rejects_negative_age(self, client: AsyncClient):
        response = await client.post("/api/admin/cleanup", params={"max_age_hours": -1})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_webhook_events_pagination(self, client: AsyncClient, db_session):
        for i in range(3):
            db_session.add(WebhookEvent(event_type="invoice_callback", invoice_number=f"INV-{i}", payload={}))
        await db_session.commit()

        response = await client.get("/api/webhook-events", params={"limit": 2})

        data = response.json()
        assert len(data["data"]) == 2
        assert data["pagination"] == {"total": 3, "limit": 2, "offset": 0, "has_more": True}

    @pytest.mark.asyncio
    async def test_webhook_events_limit_bounds(self, client: AsyncClient):
        response = await client.get("/api/webhook-events", params={"limit": 0})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_invoices_by_status(self, client: AsyncClient, auth_headers):
        await client.post("/api/invoice-status", json={"invoice_number": "INV-1"})
        await client.post(
            "/api/invoice-callback",
            json={"invoice_number": "INV-2", "status": "failed", "error": "Template missing"},
            headers=auth_headers,
        )

        response = await client.get("/api/admin/invoices", params={"status": "failed"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "failed"
        assert [item["invoice_number"] for item in data["data"]] == ["INV-2"]
        assert data["data"][0]["error_message"] == "Template missing"
        assert data["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_list_invoices_rejects_unknown_status(self, client: AsyncClient):
        response = await client.get("/api/admin/invoices", params={"status": "archived"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
