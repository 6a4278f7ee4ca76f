"""Request schema for the workflow callback

Different workflows name the same fields differently. The aliases are
resolved here, once, before validation:

- status tokens map onto generating / completed / failed
- the first non-empty URL alias becomes pdf_url on success notices
  (URLs on failure or processing notices are dropped)
- the first non-empty message alias becomes error_message
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from invoice_tracker.shared.urls import is_absolute_http_url
from invoice_tracker.domain.invoice_status import InvoiceStatus

STATUS_ALIASES: Dict[str, InvoiceStatus] = {
    "success": InvoiceStatus.COMPLETED,
    "completed": InvoiceStatus.COMPLETED,
    "done": InvoiceStatus.COMPLETED,
    "failed": InvoiceStatus.FAILED,
    "error": InvoiceStatus.FAILED,
    "failure": InvoiceStatus.FAILED,
    "processing": InvoiceStatus.GENERATING,
    "generating": InvoiceStatus.GENERATING,
    "pending": InvoiceStatus.GENERATING,
    "in_progress": InvoiceStatus.GENERATING,
}

PDF_URL_ALIASES = ("pdf_url", "download_url", "pdfUrl", "file_url", "url")

ERROR_MESSAGE_ALIASES = ("error_message", "message", "error")


def _first_present(data: Dict[str, Any], keys) -> Optional[Any]:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return None


class InvoiceCallbackSchema(BaseModel):
    """
    Request schema for POST /api/invoice-callback

    Unknown keys are ignored; the raw body is kept separately for the
    webhook event log.
    """

    invoice_number: str = Field(
        ...,
        min_length=1,
        description="Invoice number (required, non-empty)"
    )

    status: InvoiceStatus = Field(
        ...,
        description="Normalized status (generating, completed or failed)"
    )

    pdf_url: Optional[str] = Field(
        default=None,
        description="Generated PDF URL (required when status is completed)"
    )

    error_message: Optional[str] = Field(
        default=None,
        description="Failure reason"
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        normalized = {"invoice_number": data.get("invoice_number")}

        status = data.get("status")
        if isinstance(status, str):
            status = STATUS_ALIASES.get(status.strip().lower(), status)
        normalized["status"] = status

        # URLs only matter on success notices
        if status == InvoiceStatus.COMPLETED:
            normalized["pdf_url"] = _first_present(data, PDF_URL_ALIASES)
        else:
            normalized["pdf_url"] = None

        error_message = _first_present(data, ERROR_MESSAGE_ALIASES)
        normalized["error_message"] = error_message if isinstance(error_message, str) else None
        return normalized

    @field_validator("invoice_number")
    @classmethod
    def validate_invoice_number(cls, v):
        if not v.strip():
            raise ValueError("Invoice number is required")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v == InvoiceStatus.PENDING:
            raise ValueError("Callback status must denote success, failure or processing")
        return v

    @field_validator("pdf_url")
    @classmethod
    def validate_pdf_url(cls, v):
        if v is not None and (not isinstance(v, str) or not is_absolute_http_url(v)):
            raise ValueError("PDF URL must be an absolute http(s) URL")
        return v

    @model_validator(mode="after")
    def require_url_on_success(self):
        if self.status == InvoiceStatus.COMPLETED and not self.pdf_url:
            raise ValueError("Successful invoices require pdf_url or download_url")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_number": "INV-2025-001",
                "status": "success",
                "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf"
            }
        }
