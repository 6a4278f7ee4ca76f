"""IngestCallback Use Case

Applies a workflow completion notice to the invoice record store.
Store failures are logged and the callback is still acknowledged.
"""

import logging
import time
from typing import Optional
from invoice_tracker.shared.result import Result, Return
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.app.services.unit_of_work import UnitOfWork
from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatus
from invoice_tracker.domain.webhook_event import WebhookEvent
from .dtos import CallbackCommandDTO, CallbackAckDTO

logger = logging.getLogger(__name__)

CALLBACK_EVENT_TYPE = "invoice_callback"
DEFAULT_FAILURE_MESSAGE = "Processing failed"


class IngestCallback:
    """
    Use Case: Record the outcome reported by the PDF generation workflow

    Business Rules:
    1. An unseen invoice number is created on first reference
    2. completed -> mark_completed(pdf_url), failed -> mark_failed(message),
       generating -> mark_generating
    3. Repeated callbacks overwrite each other (last write wins)
    4. Store failures never turn into a failed acknowledgement
    5. Every callback is appended to the webhook event log (best-effort)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        manager: InvoiceStatusManager,
        event_repo: Optional[WebhookEventRepository] = None,
    ):
        self.uow = uow
        self.manager = manager
        self.event_repo = event_repo

    async def execute(self, command: CallbackCommandDTO) -> Result[CallbackAckDTO]:
        started = time.perf_counter()
        received_at = utc_now()

        logger.info(
            f"Processing callback for invoice: {command.invoice_number}, "
            f"status: {command.status.value}"
        )

        persisted = await self.apply(command)

        ack = CallbackAckDTO(
            invoice_number=command.invoice_number,
            status=command.status.value,
            pdf_url=command.pdf_url,
            received_at=received_at,
        )

        await self._record_event(
            command,
            ack,
            persisted=persisted,
            processing_time_ms=int((time.perf_counter() - started) * 1000),
        )
        return Return.ok(ack)

    async def apply(self, command: CallbackCommandDTO) -> bool:
        """Write the callback outcome to the store; False when the store failed"""
        invoice_number = command.invoice_number
        try:
            await self.manager.create_invoice(invoice_number)

            if command.status == InvoiceStatus.COMPLETED:
                await self.manager.mark_completed(invoice_number, command.pdf_url)
            elif command.status == InvoiceStatus.FAILED:
                await self.manager.mark_failed(
                    invoice_number, command.error_message or DEFAULT_FAILURE_MESSAGE
                )
            else:
                await self.manager.mark_generating(invoice_number)
        except StorageError as e:
            logger.error(
                f"Failed to persist callback for invoice {invoice_number} "
                f"(status={command.status.value}): {e}"
            )
            return False

        logger.info(f"Invoice {invoice_number} marked as {command.status.value}")
        return True

    async def _record_event(
        self,
        command: CallbackCommandDTO,
        ack: CallbackAckDTO,
        persisted: bool,
        processing_time_ms: int,
    ) -> None:
        if self.event_repo is None:
            return

        processed_result = ack.model_dump(mode="json")
        processed_result["persisted"] = persisted

        event = WebhookEvent(
            event_type=CALLBACK_EVENT_TYPE,
            invoice_number=command.invoice_number,
            payload=command.raw_payload,
            processed_result=processed_result,
            received_at=ack.received_at,
            processing_time_ms=processing_time_ms,
        )
        try:
            await self.event_repo.create(event)
            await self.uow.commit()
        except Exception as e:
            logger.error(f"Failed to store webhook event for {command.invoice_number}: {e}")
            await self.uow.rollback()
