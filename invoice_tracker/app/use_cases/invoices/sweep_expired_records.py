"""SweepExpiredRecords Use Case

Age-based cleanup of invoice status records and webhook events.
"""

import logging
import time
from datetime import timedelta
from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import InvoiceStatusRepository
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from invoice_tracker.app.services.unit_of_work import UnitOfWork
from invoice_tracker.domain.base import utc_now
from .dtos import SweepResultDTO

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_HOURS = 24


class SweepExpiredRecords:
    """
    Use Case: Delete invoices and webhook events older than max age

    Invoices are swept by created_at, events by received_at. Both deletes
    commit together; events are not cascaded from invoices.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceStatusRepository,
        event_repo: WebhookEventRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.event_repo = event_repo

    async def execute(self, max_age_hours: float = DEFAULT_MAX_AGE_HOURS) -> Result[SweepResultDTO]:
        if max_age_hours < 0:
            return Return.err(
                Error(
                    code="VALIDATION_ERROR",
                    message="max_age_hours must not be negative",
                )
            )

        started = time.perf_counter()
        max_age = timedelta(hours=max_age_hours)

        try:
            invoices = await self.invoice_repo.sweep(max_age)
            events = await self.event_repo.sweep(max_age)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SWEEP_FAILED",
                    message="Failed to clean up old records",
                    reason=str(e),
                )
            )

        logger.info(f"Cleaned up {invoices} old invoices and {events} old webhook events")

        return Return.ok(
            SweepResultDTO(
                invoices=invoices,
                webhook_events=events,
                max_age_hours=max_age_hours,
                swept_at=utc_now(),
                execution_time_ms=int((time.perf_counter() - started) * 1000),
            )
        )
