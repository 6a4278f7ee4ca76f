"""Request schema for invoice submission"""

import re
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d()\-]{7,}$")
MAX_UNIT_PRICE = Decimal("1000000")


class LineItemSchema(BaseModel):
    description: str = Field(..., description="Service or product description")
    quantity: Decimal = Field(default=Decimal("1"), gt=0, description="Quantity (must be > 0)")
    unit_price: Decimal = Field(..., gt=0, description="Unit price (must be > 0)")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if not v.strip():
            raise ValueError("Description is required")
        return v

    @field_validator("unit_price")
    @classmethod
    def validate_unit_price(cls, v):
        if v >= MAX_UNIT_PRICE:
            raise ValueError("Price must be less than 1,000,000")
        return v


class SubmitInvoiceSchema(BaseModel):
    """
    Request schema for POST /api/invoices

    Either client_name or client_email is required.
    """

    invoice_number: Optional[str] = Field(
        default=None,
        description="Invoice number; generated as INV-YYYYMMDD-NNN when omitted"
    )
    invoice_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    due_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    client_name: str = ""
    client_address: str = ""
    client_city: str = ""
    client_state_zip: str = ""
    client_email: str = ""
    client_phone: str = ""
    line_items: List[LineItemSchema] = Field(..., min_length=1)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    notes: str = ""

    @field_validator("client_email")
    @classmethod
    def validate_email(cls, v):
        if v.strip() and not EMAIL_PATTERN.match(v.strip()):
            raise ValueError("Please enter a valid email address")
        return v.strip()

    @field_validator("client_phone")
    @classmethod
    def validate_phone(cls, v):
        if v.strip() and not PHONE_PATTERN.match(re.sub(r"\s", "", v)):
            raise ValueError("Please enter a valid phone number")
        return v.strip()

    @model_validator(mode="after")
    def require_client_identity(self):
        if not self.client_name.strip() and not self.client_email:
            raise ValueError("Either client name or email is required")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_number": "INV-2025-001",
                "invoice_date": "2025-01-15",
                "due_date": "2025-02-14",
                "client_name": "Acme Corp",
                "client_email": "billing@acme.example",
                "line_items": [
                    {"description": "Website redesign", "quantity": "1", "unit_price": "2500.00"}
                ],
                "tax_rate": "8.25"
            }
        }
