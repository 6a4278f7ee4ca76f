"""Request schemas for the invoice status endpoints"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from invoice_tracker.shared.urls import is_absolute_http_url
from invoice_tracker.domain.invoice_status import InvoiceStatus


class UpdateInvoiceStatusSchema(BaseModel):
    """
    Request schema for PATCH /api/invoice-status/{invoice_number}

    Only fields present in the body are applied.
    """

    status: Optional[InvoiceStatus] = Field(
        default=None,
        description="pending, generating, completed or failed"
    )

    pdf_url: Optional[str] = Field(
        default=None,
        description="Generated PDF URL"
    )

    error_message: Optional[str] = Field(
        default=None,
        description="Failure reason"
    )

    @field_validator("pdf_url")
    @classmethod
    def validate_pdf_url(cls, v):
        if v is not None and not is_absolute_http_url(v):
            raise ValueError("PDF URL must be an absolute http(s) URL")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "status": "failed",
                "error_message": "Workflow webhook returned 502"
            }
        }


class EnsureInvoiceSchema(BaseModel):
    """Request schema for POST /api/invoice-status"""

    invoice_number: str = Field(
        ...,
        min_length=1,
        description="Invoice number (required, non-empty)"
    )

    status: Optional[InvoiceStatus] = Field(
        default=None,
        description="Optional status to set after ensuring the record"
    )
