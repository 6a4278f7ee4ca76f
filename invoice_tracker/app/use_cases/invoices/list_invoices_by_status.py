"""ListInvoicesByStatus Use Case"""

from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import (
    InvoiceStatusRepository,
    StorageError,
)
from invoice_tracker.domain.invoice_status import InvoiceStatus
from .dtos import InvoiceStatusResponseDTO, ListInvoicesResponseDTO, PaginationDTO


class ListInvoicesByStatus:
    """Page through invoices in one status, most recently updated first"""

    def __init__(self, invoice_repo: InvoiceStatusRepository):
        self.invoice_repo = invoice_repo

    async def execute(
        self, status: InvoiceStatus, limit: int = 50, offset: int = 0
    ) -> Result[ListInvoicesResponseDTO]:
        try:
            records = await self.invoice_repo.list_by_status(status, limit=limit, offset=offset)
            counts = await self.invoice_repo.count_by_status()
        except StorageError as e:
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message=f"Failed to list {status.value} invoices",
                    reason=str(e),
                )
            )

        total = counts.get(status, 0)
        return Return.ok(
            ListInvoicesResponseDTO(
                status=status.value,
                data=[InvoiceStatusResponseDTO.from_record(r) for r in records],
                pagination=PaginationDTO(
                    total=total,
                    limit=limit,
                    offset=offset,
                    has_more=offset + limit < total,
                ),
            )
        )
