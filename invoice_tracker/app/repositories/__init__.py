from .invoice_status_repository import (
    InvoiceStatusRepository,
    StorageError,
    UPDATABLE_FIELDS,
)
from .webhook_event_repository import WebhookEventRepository

__all__ = [
    "InvoiceStatusRepository",
    "StorageError",
    "UPDATABLE_FIELDS",
    "WebhookEventRepository",
]
