"""Data Transfer Objects for Invoice Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any, List, Literal
from pydantic import BaseModel, Field, field_validator

from invoice_tracker.domain.invoice_status import InvoiceStatus, InvoiceStatusRecord
from invoice_tracker.shared.urls import is_absolute_http_url

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class InvoiceStatusResponseDTO(BaseModel):
    """
    Response DTO for an invoice status record

    Also used for the synthetic pending view of an unknown invoice.
    """

    invoice_number: str = Field(..., description="Invoice number")
    status: str = Field(..., description="pending, generating, completed or failed")
    pdf_url: Optional[str] = Field(default=None, description="Generated PDF URL")
    error_message: Optional[str] = Field(default=None, description="Failure reason")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    message: Optional[str] = Field(default=None, description="Human-readable note")

    @classmethod
    def from_record(
        cls, record: InvoiceStatusRecord, message: Optional[str] = None
    ) -> "InvoiceStatusResponseDTO":
        return cls(
            invoice_number=record.invoice_number,
            status=InvoiceStatus(record.status).value,
            pdf_url=record.pdf_url,
            error_message=record.error_message,
            created_at=record.created_at,
            updated_at=record.updated_at,
            message=message,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_number": "INV-2025-001",
                "status": "completed",
                "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf",
                "error_message": None,
                "created_at": "2025-01-15T10:00:00",
                "updated_at": "2025-01-15T10:00:42",
                "message": "Invoice status retrieved successfully"
            }
        }


class UpdateInvoiceStatusCommandDTO(BaseModel):
    """
    Command DTO for a partial status update

    Only fields explicitly set on the command are written (model_fields_set).
    """

    invoice_number: str
    status: Optional[InvoiceStatus] = None
    pdf_url: Optional[str] = None
    error_message: Optional[str] = None


class EnsureInvoiceCommandDTO(BaseModel):
    invoice_number: str
    status: Optional[InvoiceStatus] = None


class EnsureInvoiceResponseDTO(BaseModel):
    success: bool = True
    created: bool
    invoice: InvoiceStatusResponseDTO
    message: str


class CallbackCommandDTO(BaseModel):
    """
    Normalized workflow callback

    Produced by the callback request schema after alias normalization;
    status is one of generating, completed or failed.
    """

    invoice_number: str
    status: InvoiceStatus
    pdf_url: Optional[str] = None
    error_message: Optional[str] = None
    raw_payload: Dict[str, Any] = Field(default_factory=dict)


class CallbackAckDTO(BaseModel):
    """Acknowledgement returned to the workflow"""

    success: bool = True
    message: str = "Invoice callback processed successfully"
    invoice_number: str
    status: str
    pdf_url: Optional[str] = None
    received_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Invoice callback processed successfully",
                "invoice_number": "INV-2025-001",
                "status": "completed",
                "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf",
                "received_at": "2025-01-15T10:00:42Z"
            }
        }


class LineItemDTO(BaseModel):
    description: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal = Decimal("0")


class SubmitInvoiceCommandDTO(BaseModel):
    """
    Command DTO for submitting an invoice to the PDF workflow

    Totals are computed by the use case; invoice_number is generated
    when omitted.
    """

    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    due_date: Optional[str] = None
    client_name: str = ""
    client_address: str = ""
    client_city: str = ""
    client_state_zip: str = ""
    client_email: str = ""
    client_phone: str = ""
    line_items: List[LineItemDTO] = Field(default_factory=list)
    tax_rate: Decimal = Decimal("0")
    notes: str = ""


class SubmitInvoiceResponseDTO(BaseModel):
    invoice_number: str
    status: str
    submitted: bool
    pdf_url: Optional[str] = None
    subtotal: Decimal
    taxes: Decimal
    total_due: Decimal
    message: str


class WebhookEventDTO(BaseModel):
    id: int
    event_type: str
    invoice_number: Optional[str] = None
    payload: Dict[str, Any]
    event_metadata: Optional[Dict[str, Any]] = None
    processed_result: Optional[Dict[str, Any]] = None
    received_at: datetime
    processing_time_ms: Optional[int] = None


class PaginationDTO(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ListWebhookEventsResponseDTO(BaseModel):
    success: bool = True
    data: List[WebhookEventDTO]
    pagination: PaginationDTO


class InvoiceStatsDTO(BaseModel):
    total_invoices: int
    by_status: Dict[str, int]
    total_webhook_events: int


class SweepResultDTO(BaseModel):
    invoices: int = Field(..., description="Invoice records removed")
    webhook_events: int = Field(..., description="Webhook events removed")
    max_age_hours: float
    swept_at: datetime
    execution_time_ms: int


class WorkflowEventCommandDTO(BaseModel):
    """Event envelope sent by the automation workflow"""

    event_type: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    event_metadata: Optional[Dict[str, Any]] = None


class WorkflowEventAckDTO(BaseModel):
    success: bool = True
    message: str = "Webhook processed successfully"
    event_type: str
    processed_at: datetime
    processing_time_ms: int
    result: Dict[str, Any]

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "Webhook processed successfully",
                "event_type": "invoice_processed",
                "processed_at": "2025-01-15T10:00:42Z",
                "processing_time_ms": 12,
                "result": {
                    "success": True,
                    "message": "Invoice INV-2025-001 processed successfully",
                    "invoice_number": "INV-2025-001",
                    "status": "completed",
                    "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf",
                    "persisted": True
                }
            }
        }


class InvoiceProcessedPayloadDTO(BaseModel):
    """Payload of an invoice_processed event"""

    invoice_number: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1)
    total_due: float = Field(..., gt=0)
    invoice_date: str = Field(..., pattern=DATE_PATTERN)
    due_date: str = Field(..., pattern=DATE_PATTERN)
    status: Literal["success", "error", "pending", "processing"]
    pdf_url: Optional[str] = None
    message: Optional[str] = None
    client_email: Optional[str] = None
    subtotal: Optional[float] = None
    tax_amount: Optional[float] = None

    @field_validator("pdf_url")
    @classmethod
    def validate_pdf_url(cls, v):
        if v is not None and not is_absolute_http_url(v):
            raise ValueError("PDF URL must be an absolute http(s) URL")
        return v


class DataProcessedPayloadDTO(BaseModel):
    id: str
    timestamp: str
    status: Literal["completed", "failed", "partial"]


class WorkflowCompletedPayloadDTO(BaseModel):
    workflow_id: str = Field(..., alias="workflowId")
    execution_id: str = Field(..., alias="executionId")
    status: Literal["success", "error", "timeout"]
    duration: Optional[float] = None
    results: Optional[Dict[str, Any]] = None
    errors: Optional[List[str]] = None


class ListInvoicesResponseDTO(BaseModel):
    success: bool = True
    status: str
    data: List[InvoiceStatusResponseDTO]
    pagination: PaginationDTO
