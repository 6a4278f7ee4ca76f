"""Workflow Service Implementations

Provides the HTTP webhook implementation of the PDF generation workflow.
"""

import logging
from typing import Any, Dict, Optional
import httpx
from invoice_tracker.app.services.workflow_service import WorkflowService, WorkflowSubmissionError
from invoice_tracker.shared.urls import is_absolute_http_url

logger = logging.getLogger(__name__)

# Keys under which workflows return a synchronously generated PDF
PDF_URL_RESPONSE_KEYS = ("pdf_url", "pdfUrl", "download_url", "url")


class WebhookWorkflowService(WorkflowService):
    """
    Workflow service that POSTs the invoice to an automation webhook

    A non-2xx answer or a transport error is a submission failure. A 2xx
    answer that is not JSON is treated as accepted. Only absolute http(s)
    URLs count as a synchronously generated PDF.
    """

    def __init__(
        self,
        webhook_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook workflow service

        Args:
            webhook_url: URL to POST invoices to
            token: Optional bearer token for the webhook
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.webhook_url = webhook_url
        self.token = token
        self.timeout = timeout
        self.transport = transport

    async def submit_invoice(self, payload: Dict[str, Any]) -> Optional[str]:
        if not self.webhook_url:
            raise WorkflowSubmissionError("No workflow webhook URL configured")

        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.info(f"Submitting invoice {payload.get('invoice_number')} to workflow")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise WorkflowSubmissionError(f"Workflow request failed: {e}") from e

        if response.is_error:
            logger.warning(f"Workflow error response ({response.status_code}): {response.text[:500]}")
            raise WorkflowSubmissionError(
                f"Workflow request failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            data = response.json()
        except ValueError:
            return None

        if not isinstance(data, dict):
            return None

        for key in PDF_URL_RESPONSE_KEYS:
            value = data.get(key)
            if not value:
                continue
            if is_absolute_http_url(value):
                return value
            logger.warning(f"Ignoring non-URL {key!r} in workflow response: {value!r}")
        return None
