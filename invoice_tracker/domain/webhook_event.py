"""Webhook Event Domain Entity

Append-only log of callbacks and envelope events received from the PDF
generation workflow.
The link to invoices is by invoice_number only (no foreign key).
"""

from datetime import datetime
from typing import Optional, Any, Dict
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Integer, JSON, String
from invoice_tracker.domain.base import BaseModel, UTCDateTime, utc_now


class WebhookEvent(BaseModel, table=True):
    __tablename__ = "webhook_events"
    __table_args__ = (
        Index("ix_webhook_events_event_type", "event_type"),
        Index("ix_webhook_events_invoice_number", "invoice_number"),
        Index("ix_webhook_events_received_at", "received_at"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
    )

    event_type: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Event type (e.g., invoice_callback)"
    )

    invoice_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Invoice the event refers to, if any"
    )

    payload: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Raw request body"
    )

    event_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Envelope metadata sent alongside the payload (scenario, execution, source)"
    )

    processed_result: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Outcome returned to the caller"
    )

    received_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False),
    )

    processing_time_ms: Optional[int] = Field(default=None)
