"""In-memory Webhook Event Repository

Process-local event log with the same ordering and sweep semantics as
the SQLAlchemy implementation.
"""

from datetime import timedelta
from typing import List, Optional
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.webhook_event import WebhookEvent


class InMemoryWebhookEventRepository(WebhookEventRepository):

    def __init__(self):
        self.events: List[WebhookEvent] = []
        self._next_id = 1

    def _matching(self, event_type: Optional[str], invoice_number: Optional[str]) -> List[WebhookEvent]:
        return [
            e for e in self.events
            if (not event_type or e.event_type == event_type)
            and (not invoice_number or e.invoice_number == invoice_number)
        ]

    async def create(self, event: WebhookEvent) -> WebhookEvent:
        event.id = self._next_id
        self._next_id += 1
        self.events.append(event)
        return event

    async def list(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WebhookEvent]:
        matches = sorted(
            self._matching(event_type, invoice_number),
            key=lambda e: (e.received_at, e.id),
            reverse=True,
        )
        return matches[offset:offset + limit]

    async def count(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> int:
        return len(self._matching(event_type, invoice_number))

    async def sweep(self, max_age: timedelta) -> int:
        cutoff = utc_now() - max_age
        kept = [e for e in self.events if e.received_at >= cutoff]
        removed = len(self.events) - len(kept)
        self.events = kept
        return removed
