"""GetInvoiceStatus Use Case

Read path for polling clients. An unknown invoice is not an error: the
record may simply not exist yet, so a synthetic pending view is returned.
"""

import logging
from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.invoice_status import InvoiceStatus
from .dtos import InvoiceStatusResponseDTO

logger = logging.getLogger(__name__)

PENDING_MESSAGE = "Invoice submitted, waiting for processing"


class GetInvoiceStatus:

    def __init__(self, manager: InvoiceStatusManager):
        self.manager = manager

    async def execute(self, invoice_number: str) -> Result[InvoiceStatusResponseDTO]:
        try:
            record = await self.manager.get_status(invoice_number)
        except StorageError as e:
            logger.error(f"Failed to read status for {invoice_number}: {e}")
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message="Failed to read invoice status",
                    reason=str(e),
                )
            )

        if record is None:
            now = utc_now()
            return Return.ok(
                InvoiceStatusResponseDTO(
                    invoice_number=invoice_number,
                    status=InvoiceStatus.PENDING.value,
                    created_at=now,
                    updated_at=now,
                    message=PENDING_MESSAGE,
                )
            )

        logger.debug(f"Retrieved status for {invoice_number}: {record.status.value}")
        return Return.ok(
            InvoiceStatusResponseDTO.from_record(
                record, message="Invoice status retrieved successfully"
            )
        )
