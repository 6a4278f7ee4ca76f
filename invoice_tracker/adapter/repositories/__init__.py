from .invoice_status_repository import SqlAlchemyInvoiceStatusRepository
from .in_memory_invoice_status_repository import InMemoryInvoiceStatusRepository
from .webhook_event_repository import SqlAlchemyWebhookEventRepository
from .in_memory_webhook_event_repository import InMemoryWebhookEventRepository

__all__ = [
    "SqlAlchemyInvoiceStatusRepository",
    "InMemoryInvoiceStatusRepository",
    "SqlAlchemyWebhookEventRepository",
    "InMemoryWebhookEventRepository",
]
