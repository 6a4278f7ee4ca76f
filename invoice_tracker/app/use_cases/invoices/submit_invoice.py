"""SubmitInvoice Use Case

Hands an invoice to the external PDF generation workflow and starts
tracking it.
"""

import logging
import random
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple
from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.shared.urls import is_absolute_http_url
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.app.services.workflow_service import WorkflowService, WorkflowSubmissionError
from invoice_tracker.domain.invoice_status import InvoiceStatus
from .dtos import LineItemDTO, SubmitInvoiceCommandDTO, SubmitInvoiceResponseDTO

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_totals(
    line_items: List[LineItemDTO], tax_rate: Decimal
) -> Tuple[List[LineItemDTO], Decimal, Decimal, Decimal]:
    """
    Compute line totals, subtotal, taxes and total due (rounded to cents)

    Returns:
        (priced line items, subtotal, taxes, total_due)
    """
    priced = [
        item.model_copy(update={"total": _money(item.quantity * item.unit_price)})
        for item in line_items
    ]
    subtotal = sum((item.total for item in priced), Decimal("0"))
    taxes = _money(subtotal * tax_rate / Decimal("100"))
    return priced, _money(subtotal), taxes, _money(subtotal + taxes)


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """Format: INV-YYYYMMDD-NNN with a random three digit suffix"""
    now = now or datetime.now(timezone.utc)
    return f"INV-{now.strftime('%Y%m%d')}-{random.randint(0, 999):03d}"


def build_workflow_payload(
    command: SubmitInvoiceCommandDTO,
    invoice_number: str,
    line_items: List[LineItemDTO],
    subtotal: Decimal,
    taxes: Decimal,
    total_due: Decimal,
    source: str,
) -> Dict[str, Any]:
    """
    Workflow webhook payload

    Line items are sent twice: as numbered item/price/quantity/total
    placeholders for document templates, and as a structured list.
    """
    placeholders: Dict[str, Any] = {}
    for index, item in enumerate(line_items, start=1):
        placeholders[f"item{index}"] = item.description
        placeholders[f"price{index}"] = float(item.unit_price)
        placeholders[f"quantity{index}"] = float(item.quantity)
        placeholders[f"total{index}"] = float(item.total)

    return {
        "invoice_number": invoice_number,
        "invoice_date": command.invoice_date,
        "due_date": command.due_date,
        "client_name": command.client_name,
        "client_address": command.client_address,
        "client_city": command.client_city,
        "client_state_zip": command.client_state_zip,
        "client_email": command.client_email,
        "client_phone": command.client_phone,
        **placeholders,
        "line_items": [item.model_dump(mode="json") for item in line_items],
        "subtotal": float(subtotal),
        "tax_rate": float(command.tax_rate),
        "taxes": float(taxes),
        "total_due": float(total_due),
        "notes": command.notes,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": source,
    }


class SubmitInvoice:
    """
    Use Case: Submit invoice for PDF generation

    Flow:
    1. Compute totals and assign an invoice number if missing
    2. Create the tracking record (pending)
    3. POST the invoice to the workflow
    4. On success mark generating (or completed when a PDF URL came back)
    5. On failure mark failed and report WORKFLOW_SUBMISSION_FAILED
    """

    def __init__(
        self,
        manager: InvoiceStatusManager,
        workflow_service: WorkflowService,
        source: str = "invoice-tracker",
    ):
        self.manager = manager
        self.workflow_service = workflow_service
        self.source = source

    async def execute(self, command: SubmitInvoiceCommandDTO) -> Result[SubmitInvoiceResponseDTO]:
        invoice_number = command.invoice_number or generate_invoice_number()
        line_items, subtotal, taxes, total_due = calculate_totals(
            command.line_items, command.tax_rate
        )

        def response(status: InvoiceStatus, submitted: bool, message: str, pdf_url=None):
            return SubmitInvoiceResponseDTO(
                invoice_number=invoice_number,
                status=status.value,
                submitted=submitted,
                pdf_url=pdf_url,
                subtotal=subtotal,
                taxes=taxes,
                total_due=total_due,
                message=message,
            )

        try:
            await self.manager.create_invoice(invoice_number)
        except StorageError as e:
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message="Failed to create invoice tracking record",
                    reason=str(e),
                )
            )

        payload = build_workflow_payload(
            command, invoice_number, line_items, subtotal, taxes, total_due, self.source
        )

        try:
            pdf_url = await self.workflow_service.submit_invoice(payload)
        except WorkflowSubmissionError as e:
            logger.error(f"Workflow submission failed for {invoice_number}: {e}")
            try:
                await self.manager.mark_failed(invoice_number, str(e))
            except StorageError as storage_error:
                logger.error(
                    f"Failed to record submission failure for {invoice_number}: {storage_error}"
                )
            return Return.err(
                Error(
                    code="WORKFLOW_SUBMISSION_FAILED",
                    message=f"Invoice {invoice_number} could not be submitted for generation",
                    reason=str(e),
                )
            )

        if pdf_url is not None and not is_absolute_http_url(pdf_url):
            logger.warning(f"Workflow returned an invalid PDF URL for {invoice_number}: {pdf_url!r}")
            pdf_url = None

        try:
            if pdf_url:
                await self.manager.mark_completed(invoice_number, pdf_url)
            else:
                await self.manager.mark_generating(invoice_number)
        except StorageError as e:
            # The workflow already has the invoice; the callback will catch up
            logger.error(f"Failed to record submission of {invoice_number}: {e}")

        logger.info(f"Invoice {invoice_number} submitted for generation")

        if pdf_url:
            return Return.ok(response(InvoiceStatus.COMPLETED, True, "Invoice generated", pdf_url))
        return Return.ok(
            response(InvoiceStatus.GENERATING, True, "Invoice submitted successfully")
        )
