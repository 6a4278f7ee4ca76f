from .base import BaseModel, UTCDateTime, as_utc, utc_now, next_timestamp
from .invoice_status import InvoiceStatus, InvoiceStatusRecord
from .webhook_event import WebhookEvent

__all__ = [
    "BaseModel",
    "UTCDateTime",
    "as_utc",
    "utc_now",
    "next_timestamp",
    "InvoiceStatus",
    "InvoiceStatusRecord",
    "WebhookEvent",
]
