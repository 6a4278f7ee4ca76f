"""IngestWorkflowEvent Use Case

Dispatches event envelopes ({event_type, payload, metadata}) sent by the
automation workflow. Invoice events update the record store through the
same path as direct callbacks; every envelope is appended to the webhook
event log, including unsupported event types.
"""

import logging
import time
from typing import Any, Dict, Optional
from pydantic import ValidationError
from invoice_tracker.shared.result import Result, Return
from invoice_tracker.shared.urls import is_absolute_http_url
from invoice_tracker.shared.validation import validation_details
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.app.services.unit_of_work import UnitOfWork
from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatus
from invoice_tracker.domain.webhook_event import WebhookEvent
from .dtos import (
    CallbackCommandDTO,
    DataProcessedPayloadDTO,
    InvoiceProcessedPayloadDTO,
    WorkflowCompletedPayloadDTO,
    WorkflowEventAckDTO,
    WorkflowEventCommandDTO,
)
from .ingest_callback import IngestCallback

logger = logging.getLogger(__name__)

SUPPORTED_EVENT_TYPES = (
    "invoice_processed",
    "invoice_generated",
    "data_processed",
    "workflow_completed",
)

INVOICE_PROCESSED_STATUS = {
    "error": InvoiceStatus.FAILED,
    "pending": InvoiceStatus.GENERATING,
    "processing": InvoiceStatus.GENERATING,
}


def _invalid(error: str, exc: ValidationError) -> Dict[str, Any]:
    return {"success": False, "error": error, "details": validation_details(exc.errors())}


def _invoice_number_of(command: WorkflowEventCommandDTO) -> Optional[str]:
    for source in (command.event_metadata or {}, command.payload):
        value = source.get("invoice_number")
        if isinstance(value, str) and value.strip():
            return value
    return None


class IngestWorkflowEvent:
    """
    Use Case: Process an automation workflow event envelope

    Event types:
    - invoice_processed: full invoice outcome; success with a PDF URL
      completes, error fails, anything else marks generating
    - invoice_generated: completes the invoice when both number and PDF
      URL are present, otherwise only makes sure the record exists
    - data_processed / workflow_completed: validated and acknowledged
    - anything else: acknowledged as unsupported

    A malformed payload yields success=false in the result but the
    envelope itself is still acknowledged and logged.
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
        self.callbacks = IngestCallback(uow, manager)
        self._handlers = {
            "invoice_processed": self._invoice_processed,
            "invoice_generated": self._invoice_generated,
            "data_processed": self._data_processed,
            "workflow_completed": self._workflow_completed,
        }

    async def execute(self, command: WorkflowEventCommandDTO) -> Result[WorkflowEventAckDTO]:
        started = time.perf_counter()
        logger.info(f"Processing workflow event: {command.event_type}")

        handler = self._handlers.get(command.event_type)
        if handler is None:
            logger.info(f"Unsupported workflow event type: {command.event_type}")
            result = {
                "success": False,
                "message": f"Event type '{command.event_type}' is not supported",
                "supported_types": list(SUPPORTED_EVENT_TYPES),
            }
        else:
            result = await handler(command.payload)

        ack = WorkflowEventAckDTO(
            event_type=command.event_type,
            processed_at=utc_now(),
            processing_time_ms=int((time.perf_counter() - started) * 1000),
            result=result,
        )
        await self._record_event(command, ack)

        logger.info(
            f"Workflow event {command.event_type} processed ({ack.processing_time_ms}ms)"
        )
        return Return.ok(ack)

    async def _invoice_processed(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = InvoiceProcessedPayloadDTO.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Invalid invoice_processed payload: {e.error_count()} error(s)")
            return _invalid("Invalid invoice data format", e)

        if data.status == "success" and data.pdf_url:
            status = InvoiceStatus.COMPLETED
        else:
            status = INVOICE_PROCESSED_STATUS.get(data.status, InvoiceStatus.GENERATING)

        persisted = await self.callbacks.apply(
            CallbackCommandDTO(
                invoice_number=data.invoice_number,
                status=status,
                pdf_url=data.pdf_url if status == InvoiceStatus.COMPLETED else None,
                error_message=data.message,
                raw_payload=payload,
            )
        )
        return {
            "success": True,
            "message": f"Invoice {data.invoice_number} processed successfully",
            "invoice_number": data.invoice_number,
            "status": status.value,
            "pdf_url": data.pdf_url,
            "persisted": persisted,
        }

    async def _invoice_generated(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        invoice_number = payload.get("invoice_number")
        pdf_url = payload.get("pdf_url")
        if not is_absolute_http_url(pdf_url):
            pdf_url = None

        result: Dict[str, Any] = {
            "success": True,
            "message": "Invoice generation completed",
            "pdf_url": pdf_url,
        }
        if not isinstance(invoice_number, str) or not invoice_number.strip():
            return result

        if pdf_url:
            persisted = await self.callbacks.apply(
                CallbackCommandDTO(
                    invoice_number=invoice_number,
                    status=InvoiceStatus.COMPLETED,
                    pdf_url=pdf_url,
                    raw_payload=payload,
                )
            )
        else:
            persisted = await self._ensure_invoice(invoice_number)

        result["invoice_number"] = invoice_number
        result["persisted"] = persisted
        return result

    async def _data_processed(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = DataProcessedPayloadDTO.model_validate(payload)
        except ValidationError as e:
            return _invalid("Invalid data processing format", e)

        return {
            "success": True,
            "message": f"Data processing completed for ID: {data.id}",
            "id": data.id,
            "status": data.status,
            "timestamp": data.timestamp,
        }

    async def _workflow_completed(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            data = WorkflowCompletedPayloadDTO.model_validate(payload)
        except ValidationError as e:
            return _invalid("Invalid workflow completion format", e)

        if data.status == "error":
            logger.error(f"Workflow {data.workflow_id} failed: {data.errors}")
            return {
                "success": False,
                "message": f"Workflow {data.workflow_id} failed",
                "workflow_id": data.workflow_id,
                "execution_id": data.execution_id,
                "errors": data.errors or [],
            }

        return {
            "success": True,
            "message": f"Workflow {data.workflow_id} completed successfully",
            "workflow_id": data.workflow_id,
            "execution_id": data.execution_id,
            "duration": data.duration,
            "results": data.results,
        }

    async def _ensure_invoice(self, invoice_number: str) -> bool:
        try:
            await self.manager.create_invoice(invoice_number)
        except StorageError as e:
            logger.error(f"Failed to create invoice {invoice_number}: {e}")
            return False
        return True

    async def _record_event(
        self, command: WorkflowEventCommandDTO, ack: WorkflowEventAckDTO
    ) -> None:
        if self.event_repo is None:
            return

        event = WebhookEvent(
            event_type=command.event_type,
            invoice_number=_invoice_number_of(command),
            payload=command.payload,
            event_metadata=command.event_metadata,
            processed_result=ack.result,
            received_at=ack.processed_at,
            processing_time_ms=ack.processing_time_ms,
        )
        try:
            await self.event_repo.create(event)
            await self.uow.commit()
        except Exception as e:
            logger.error(f"Failed to store workflow event {command.event_type}: {e}")
            await self.uow.rollback()
