"""Integration tests for POST /api/invoices"""

import json
import httpx
import pytest
from httpx import AsyncClient

PDF_URL = "https://files.example.com/invoices/INV-2025-001.pdf"

INVOICE = {
    "invoice_number": "INV-2025-001",
    "invoice_date": "2025-01-15",
    "due_date": "2025-02-14",
    "client_name": "Acme Corp",
    "client_email": "billing@acme.example",
    "line_items": [
        {"description": "Website redesign", "quantity": "1", "unit_price": "2500.00"},
        {"description": "Hosting", "quantity": "3", "unit_price": "19.99"},
    ],
    "tax_rate": "8.25",
}


class TestInvoicesAPI:

    @pytest.mark.asyncio
    async def test_submit_invoice(self, client: AsyncClient, workflow_requests):
        response = await client.post("/api/invoices", json=INVOICE)

        assert response.status_code == 200
        data = response.json()
        assert data["invoice_number"] == "INV-2025-001"
        assert data["status"] == "generating"
        assert data["submitted"] is True
        assert float(data["total_due"]) == 2771.17

        sent = json.loads(workflow_requests[0].content)
        assert sent["item2"] == "Hosting"
        assert sent["total2"] == 59.97
        assert sent["source"] == "invoice-tracker"

        status = (await client.get("/api/invoice-status/INV-2025-001")).json()
        assert status["status"] == "generating"

    @pytest.mark.asyncio
    async def test_synchronous_pdf(self, client: AsyncClient, workflow_responses):
        workflow_responses.append(httpx.Response(200, json={"pdf_url": PDF_URL}))

        response = await client.post("/api/invoices", json=INVOICE)

        assert response.json()["status"] == "completed"
        assert response.json()["pdf_url"] == PDF_URL

    @pytest.mark.asyncio
    async def test_relative_url_response_is_not_a_pdf(self, client: AsyncClient, workflow_responses):
        workflow_responses.append(httpx.Response(200, json={"url": "/scenarios/42"}))

        response = await client.post("/api/invoices", json=INVOICE)

        assert response.status_code == 200
        assert response.json()["status"] == "generating"
        assert response.json()["pdf_url"] is None

        status = (await client.get("/api/invoice-status/INV-2025-001")).json()
        assert status["status"] == "generating"
        assert status["pdf_url"] is None

    @pytest.mark.asyncio
    async def test_workflow_failure(self, client: AsyncClient, workflow_responses):
        workflow_responses.append(httpx.Response(502, text="Bad Gateway"))

        response = await client.post("/api/invoices", json=INVOICE)

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "WORKFLOW_SUBMISSION_FAILED"

        status = (await client.get("/api/invoice-status/INV-2025-001")).json()
        assert status["status"] == "failed"
        assert "502" in status["error_message"]

    @pytest.mark.asyncio
    async def test_generated_invoice_number(self, client: AsyncClient):
        body = {k: v for k, v in INVOICE.items() if k != "invoice_number"}

        response = await client.post("/api/invoices", json=body)

        assert response.status_code == 200
        assert response.json()["invoice_number"].startswith("INV-")

    @pytest.mark.asyncio
    async def test_validation_error(self, client: AsyncClient, workflow_requests):
        response = await client.post("/api/invoices", json={**INVOICE, "line_items": []})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert workflow_requests == []
