"""Invoice Status Domain Entity

Tracks PDF generation status for a submitted invoice.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Enum as SAEnum, String, Text
from invoice_tracker.domain.base import BaseModel, UTCDateTime, utc_now


class InvoiceStatus(str, Enum):
    """Invoice generation status types"""
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class InvoiceStatusRecord(BaseModel, table=True):
    """
    InvoiceStatusRecord - Generation status of a single invoice

    Domain Rules:
    - invoice_number is the primary key (one record per invoice)
    - pdf_url is set when status reaches completed
    - error_message is set when status reaches failed
    - Any status may overwrite any other (no transition table)
    - updated_at is refreshed on every mutation and never precedes created_at
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index("ix_invoices_status", "status"),
        Index("ix_invoices_created_at", "created_at"),
    )

    invoice_number: str = Field(
        sa_column=Column(String(100), primary_key=True),
        description="Unique invoice number (e.g., INV-2025-001)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        sa_column=Column(
            SAEnum(
                InvoiceStatus,
                name="invoice_status",
                native_enum=False,
                create_constraint=True,
                length=20,
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
        ),
        description="Generation status (pending, generating, completed, failed)"
    )

    pdf_url: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Absolute URL of the generated PDF"
    )

    error_message: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Failure reason reported by the workflow or the client"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False),
        description="Record creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False),
        description="Last update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "invoice_number": "INV-2025-001",
                "status": "completed",
                "pdf_url": "https://files.example.com/invoices/INV-2025-001.pdf",
                "error_message": None,
                "created_at": "2025-01-15T10:00:00Z",
                "updated_at": "2025-01-15T10:00:42Z"
            }
        }
