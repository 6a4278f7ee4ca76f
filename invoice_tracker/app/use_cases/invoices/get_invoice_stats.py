"""GetInvoiceStats Use Case"""

from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import (
    InvoiceStatusRepository,
    StorageError,
)
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from .dtos import InvoiceStatsDTO


class GetInvoiceStats:

    def __init__(
        self,
        invoice_repo: InvoiceStatusRepository,
        event_repo: WebhookEventRepository,
    ):
        self.invoice_repo = invoice_repo
        self.event_repo = event_repo

    async def execute(self) -> Result[InvoiceStatsDTO]:
        try:
            counts = await self.invoice_repo.count_by_status()
            total_events = await self.event_repo.count()
        except StorageError as e:
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message="Failed to collect invoice statistics",
                    reason=str(e),
                )
            )

        return Return.ok(
            InvoiceStatsDTO(
                total_invoices=sum(counts.values()),
                by_status={status.value: count for status, count in counts.items()},
                total_webhook_events=total_events,
            )
        )
