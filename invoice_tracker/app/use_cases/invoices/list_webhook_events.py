"""ListWebhookEvents Use Case"""

from typing import Optional
from invoice_tracker.shared.result import Result, Return, Error
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from .dtos import ListWebhookEventsResponseDTO, PaginationDTO, WebhookEventDTO


class ListWebhookEvents:

    def __init__(self, event_repo: WebhookEventRepository):
        self.event_repo = event_repo

    async def execute(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[ListWebhookEventsResponseDTO]:
        try:
            events = await self.event_repo.list(
                event_type=event_type,
                invoice_number=invoice_number,
                limit=limit,
                offset=offset,
            )
            total = await self.event_repo.count(
                event_type=event_type, invoice_number=invoice_number
            )
        except StorageError as e:
            return Return.err(
                Error(
                    code="STORAGE_ERROR",
                    message="Failed to list webhook events",
                    reason=str(e),
                )
            )

        return Return.ok(
            ListWebhookEventsResponseDTO(
                data=[WebhookEventDTO.model_validate(e, from_attributes=True) for e in events],
                pagination=PaginationDTO(
                    total=total,
                    limit=limit,
                    offset=offset,
                    has_more=offset + limit < total,
                ),
            )
        )
