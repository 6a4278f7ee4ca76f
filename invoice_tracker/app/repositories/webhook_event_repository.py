"""Webhook Event Repository Interface"""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Optional
from invoice_tracker.domain.webhook_event import WebhookEvent


class WebhookEventRepository(ABC):

    @abstractmethod
    async def create(self, event: WebhookEvent) -> WebhookEvent:
        pass

    @abstractmethod
    async def list(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WebhookEvent]:
        """List events newest first, optionally filtered"""
        pass

    @abstractmethod
    async def count(
        self,
        event_type: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> int:
        pass

    @abstractmethod
    async def sweep(self, max_age: timedelta) -> int:
        """Delete events received before now - max_age"""
        pass
