"""SQLAlchemy Webhook Event Repository Implementation"""

from datetime import timedelta
from typing import List, Optional
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_tracker.app.repositories.invoice_status_repository import StorageError
from invoice_tracker.app.repositories.webhook_event_repository import WebhookEventRepository
from invoice_tracker.domain.base import utc_now
from invoice_tracker.domain.webhook_event import WebhookEvent


class SqlAlchemyWebhookEventRepository(WebhookEventRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _filtered(statement, event_type: Optional[str], invoice_number: Optional[str]):
        if event_type:
            statement = statement.where(WebhookEvent.event_type == event_type)
        if invoice_number:
            statement = statement.where(WebhookEvent.invoice_number == invoice_number)
        return statement

    async def create(self, event: WebhookEvent) -> WebhookEvent:
        try:
            self.session.add(event)
            await self.session.flush()
            await self.session.refresh(event)
        except SQLAlchemyError as e:
            raise StorageError("Failed to record webhook event", e) from e
        return event

    async def list(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WebhookEvent]:
        statement = self._filtered(select(WebhookEvent), event_type, invoice_number)
        statement = statement.order_by(WebhookEvent.received_at.desc(), WebhookEvent.id.desc())
        statement = statement.limit(limit).offset(offset)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError("Failed to list webhook events", e) from e
        return list(result.scalars().all())

    async def count(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(WebhookEvent), event_type, invoice_number
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError("Failed to count webhook events", e) from e
        return result.scalar_one()

    async def sweep(self, max_age: timedelta) -> int:
        cutoff = utc_now() - max_age
        statement = delete(WebhookEvent).where(WebhookEvent.received_at < cutoff)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise StorageError("Failed to sweep webhook events", e) from e
        return result.rowcount or 0
