"""UpdateInvoiceStatus Use Case

Direct status update used for manual correction and for the submitting
client reporting its own failure.
"""

import logging
from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from .dtos import UpdateInvoiceStatusCommandDTO, InvoiceStatusResponseDTO

logger = logging.getLogger(__name__)


class UpdateInvoiceStatus:
    """
    Use Case: Partially update an existing invoice status record

    Business Rules:
    1. The record must already exist (INVOICE_NOT_FOUND otherwise)
    2. Only fields set on the command are written
    3. Any status may replace any other
    """

    def __init__(self, manager: InvoiceStatusManager):
        self.manager = manager

    async def execute(self, command: UpdateInvoiceStatusCommandDTO) -> Result[InvoiceStatusResponseDTO]:
        changes = {
            name: getattr(command, name)
            for name in ("status", "pdf_url", "error_message")
            if name in command.model_fields_set
        }

        try:
            record = await self.manager.update_status(command.invoice_number, **changes)
        except StorageError as e:
            logger.error(f"Failed to update status for {command.invoice_number}: {e}")
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message="Failed to update invoice status",
                    reason=str(e),
                )
            )

        if record is None:
            return Return.err(
                Error(
                    code="INVOICE_NOT_FOUND",
                    message=f"Invoice {command.invoice_number} not found",
                )
            )

        return Return.ok(
            InvoiceStatusResponseDTO.from_record(
                record, message="Invoice status updated successfully"
            )
        )
