"""EnsureInvoice Use Case

Pre-flight call made before submitting to the workflow: creates the
tracking record if absent and optionally sets its status.
"""

from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.services.invoice_status_manager import InvoiceStatusManager
from .dtos import EnsureInvoiceCommandDTO, EnsureInvoiceResponseDTO, InvoiceStatusResponseDTO


class EnsureInvoice:

    def __init__(self, manager: InvoiceStatusManager):
        self.manager = manager

    async def execute(self, command: EnsureInvoiceCommandDTO) -> Result[EnsureInvoiceResponseDTO]:
        try:
            existing = await self.manager.get_status(command.invoice_number)
            record = existing or await self.manager.create_invoice(command.invoice_number)

            if command.status is not None:
                record = await self.manager.update_status(
                    command.invoice_number, status=command.status
                ) or record
        except StorageError as e:
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message="Failed to ensure invoice",
                    reason=str(e),
                )
            )

        return Return.ok(
            EnsureInvoiceResponseDTO(
                created=existing is None,
                invoice=InvoiceStatusResponseDTO.from_record(record),
                message="Invoice ensured" if existing else "Invoice created",
            )
        )
