"""Integration tests for POST /api/invoice-callback"""

import pytest
from httpx import AsyncClient

PDF_URL = "https://files.example.com/invoices/INV-2025-001.pdf"
CALLBACK_PATH = "/api/invoice-callback"


class TestInvoiceCallbackAPI:

    @pytest.mark.asyncio
    async def test_success_callback_end_to_end(self, client: AsyncClient, auth_headers):
        """A success callback for an unseen invoice creates and completes it"""
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-001", "status": "success", "pdf_url": PDF_URL},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Invoice callback processed successfully"
        assert data["invoice_number"] == "INV-2025-001"
        assert data["status"] == "completed"
        assert data["pdf_url"] == PDF_URL
        assert "received_at" in data

        status_response = await client.get("/api/invoice-status/INV-2025-001")
        assert status_response.status_code == 200
        status = status_response.json()
        assert status["status"] == "completed"
        assert status["pdf_url"] == PDF_URL

    @pytest.mark.asyncio
    async def test_api_key_header_accepted(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-002", "status": "done", "download_url": PDF_URL},
            headers={"X-API-Key": auth_headers["Authorization"].split(" ", 1)[1]},
        )

        assert response.status_code == 200
        assert response.json()["pdf_url"] == PDF_URL

    @pytest.mark.asyncio
    async def test_failed_callback(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-003", "status": "error", "error": "Template missing"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        status = (await client.get("/api/invoice-status/INV-2025-003")).json()
        assert status["status"] == "failed"
        assert status["error_message"] == "Template missing"

    @pytest.mark.asyncio
    async def test_failed_callback_with_bad_url_is_recorded(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH,
            json={
                "invoice_number": "INV-2025-006",
                "status": "failed",
                "url": "/scenarios/42",
                "error_message": "Template missing",
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        status = (await client.get("/api/invoice-status/INV-2025-006")).json()
        assert status["status"] == "failed"
        assert status["pdf_url"] is None
        assert status["error_message"] == "Template missing"

    @pytest.mark.asyncio
    async def test_processing_callback(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-004", "status": "processing"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "generating"

    @pytest.mark.asyncio
    async def test_missing_credentials_do_not_mutate(self, client: AsyncClient):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-005", "status": "success", "pdf_url": PDF_URL},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

        status = (await client.get("/api/invoice-status/INV-2025-005")).json()
        assert status["status"] == "pending"
        assert status["pdf_url"] is None
        assert status["message"] == "Invoice submitted, waiting for processing"

    @pytest.mark.asyncio
    async def test_wrong_secret(self, client: AsyncClient):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-005", "status": "failed"},
            headers={"Authorization": "Bearer wrong"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid authorization token"

    @pytest.mark.asyncio
    async def test_auth_checked_before_body(self, client: AsyncClient):
        response = await client.post(
            CALLBACK_PATH, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_success_without_url_rejected(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-006", "status": "success"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        stats = (await client.get("/api/admin/stats")).json()
        assert stats["total_invoices"] == 0

    @pytest.mark.asyncio
    async def test_relative_url_rejected(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH,
            json={"invoice_number": "INV-2025-006", "status": "success", "pdf_url": "/files/x.pdf"},
            headers=auth_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"{not json", b"[1, 2]", b'"text"'])
    async def test_malformed_body(self, client: AsyncClient, auth_headers, body):
        response = await client.post(
            CALLBACK_PATH,
            content=body,
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_missing_invoice_number(self, client: AsyncClient, auth_headers):
        response = await client.post(
            CALLBACK_PATH, json={"status": "failed"}, headers=auth_headers
        )

        assert response.status_code == 400
        fields = [d["field"] for d in response.json()["error"]["details"]]
        assert "invoice_number" in fields

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
    async def test_other_methods_not_allowed(self, client: AsyncClient, method):
        response = await client.request(method, CALLBACK_PATH)

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    @pytest.mark.asyncio
    async def test_callback_is_logged(self, client: AsyncClient, auth_headers):
        payload = {"invoice_number": "INV-2025-007", "status": "success", "pdfUrl": PDF_URL}
        await client.post(CALLBACK_PATH, json=payload, headers=auth_headers)

        response = await client.get(
            "/api/webhook-events", params={"invoice_number": "INV-2025-007"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total"] == 1
        event = data["data"][0]
        assert event["event_type"] == "invoice_callback"
        assert event["payload"] == payload
        assert event["processed_result"]["persisted"] is True

    @pytest.mark.asyncio
    async def test_security_headers(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
