"""HTTP client for the invoice tracker API"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class InvoiceStatusClientError(Exception):
    """Non-2xx answer or transport failure talking to the tracker API"""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class InvoiceStatusClient:
    """
    Thin async wrapper around the tracker endpoints

    Usage:
        async with InvoiceStatusClient("http://localhost:8000") as client:
            status = await client.get_status("INV-2025-001")
    """

    def __init__(
        self,
        base_url: str,
        api_prefix: str = "/api",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_prefix = api_prefix.rstrip("/")
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "InvoiceStatusClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _invoice_path(self, invoice_number: str) -> str:
        return f"{self.api_prefix}/invoice-status/{quote(invoice_number, safe='')}"

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise InvoiceStatusClientError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            code, message = None, f"HTTP {response.status_code}"
            try:
                error = response.json().get("error") or {}
                code = error.get("code")
                message = error.get("message") or message
            except (ValueError, AttributeError):
                pass
            raise InvoiceStatusClientError(message, status_code=response.status_code, code=code)

        return response.json()

    async def get_status(self, invoice_number: str) -> Dict[str, Any]:
        return await self._request("GET", self._invoice_path(invoice_number))

    async def ensure_invoice(self, invoice_number: str, status: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"invoice_number": invoice_number}
        if status is not None:
            body["status"] = status
        return await self._request("POST", f"{self.api_prefix}/invoice-status", json=body)

    async def report_failure(self, invoice_number: str, error_message: str) -> Dict[str, Any]:
        """Mark an invoice failed when submission broke on the client side"""
        logger.warning(f"Reporting failure for {invoice_number}: {error_message}")
        return await self._request(
            "PATCH",
            self._invoice_path(invoice_number),
            json={"status": "failed", "error_message": error_message},
        )

    async def submit_invoice(self, invoice: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"{self.api_prefix}/invoices", json=invoice)
