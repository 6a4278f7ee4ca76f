"""Invoice status tracking use cases"""
from .get_invoice_status import GetInvoiceStatus
from .update_invoice_status import UpdateInvoiceStatus
from .ensure_invoice import EnsureInvoice
from .ingest_callback import IngestCallback
from .ingest_workflow_event import IngestWorkflowEvent
from .submit_invoice import SubmitInvoice
from .list_webhook_events import ListWebhookEvents
from .get_invoice_stats import GetInvoiceStats
from .list_invoices_by_status import ListInvoicesByStatus
from .sweep_expired_records import SweepExpiredRecords
from .dtos import (
    InvoiceStatusResponseDTO,
    UpdateInvoiceStatusCommandDTO,
    EnsureInvoiceCommandDTO,
    EnsureInvoiceResponseDTO,
    CallbackCommandDTO,
    CallbackAckDTO,
    WorkflowEventCommandDTO,
    WorkflowEventAckDTO,
    LineItemDTO,
    SubmitInvoiceCommandDTO,
    SubmitInvoiceResponseDTO,
    WebhookEventDTO,
    PaginationDTO,
    ListWebhookEventsResponseDTO,
    InvoiceStatsDTO,
    SweepResultDTO,
    ListInvoicesResponseDTO,
)

__all__ = [
    "GetInvoiceStatus",
    "UpdateInvoiceStatus",
    "EnsureInvoice",
    "IngestCallback",
    "IngestWorkflowEvent",
    "SubmitInvoice",
    "ListWebhookEvents",
    "GetInvoiceStats",
    "ListInvoicesByStatus",
    "SweepExpiredRecords",
    "InvoiceStatusResponseDTO",
    "UpdateInvoiceStatusCommandDTO",
    "EnsureInvoiceCommandDTO",
    "EnsureInvoiceResponseDTO",
    "CallbackCommandDTO",
    "CallbackAckDTO",
    "WorkflowEventCommandDTO",
    "WorkflowEventAckDTO",
    "LineItemDTO",
    "SubmitInvoiceCommandDTO",
    "SubmitInvoiceResponseDTO",
    "WebhookEventDTO",
    "PaginationDTO",
    "ListWebhookEventsResponseDTO",
    "InvoiceStatsDTO",
    "SweepResultDTO",
    "ListInvoicesResponseDTO",
]
