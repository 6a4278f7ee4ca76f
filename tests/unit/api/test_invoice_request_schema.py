"""Unit tests for invoice submission validation"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from invoice_tracker.api.schemas.invoice_request import SubmitInvoiceSchema


def _invoice(**overrides):
    data = {
        "client_name": "Acme Corp",
        "line_items": [{"description": "Consulting", "quantity": "2", "unit_price": "150.00"}],
        "tax_rate": "10",
    }
    data.update(overrides)
    return data


class TestSubmitInvoiceSchema:

    def test_valid_invoice(self):
        schema = SubmitInvoiceSchema.model_validate(_invoice())

        assert schema.line_items[0].quantity == Decimal("2")
        assert schema.tax_rate == Decimal("10")

    def test_email_alone_identifies_client(self):
        schema = SubmitInvoiceSchema.model_validate(
            _invoice(client_name="", client_email="billing@acme.example")
        )
        assert schema.client_email == "billing@acme.example"

    def test_client_identity_required(self):
        with pytest.raises(ValidationError):
            SubmitInvoiceSchema.model_validate(_invoice(client_name=""))

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            SubmitInvoiceSchema.model_validate(_invoice(client_email="not-an-email"))

    def test_invalid_phone(self):
        with pytest.raises(ValidationError):
            SubmitInvoiceSchema.model_validate(_invoice(client_phone="call me"))

    def test_valid_phone(self):
        schema = SubmitInvoiceSchema.model_validate(_invoice(client_phone="+1 (555) 123-4567"))
        assert schema.client_phone == "+1 (555) 123-4567"

    @pytest.mark.parametrize("tax_rate", ["-1", "100.01"])
    def test_tax_rate_bounds(self, tax_rate):
        with pytest.raises(ValidationError):
            SubmitInvoiceSchema.model_validate(_invoice(tax_rate=tax_rate))

    def test_line_items_required(self):
        with pytest.raises(ValidationError):
            SubmitInvoiceSchema.model_validate(_invoice(line_items=[]))

    @pytest.mark.parametrize(
        "item",
        [
            {"description": "Consulting", "quantity": "0", "unit_price": "10"},
            {"description": "Consulting", "quantity": "1", "unit_price": "0"},
            {"description": "Consulting", "quantity": "1", "unit_price": "1000000"},
            {"description": "  ", "quantity": "1", "unit_price": "10"},
        ],
    )
    def test_line_item_rules(self, item):
        with pytest.raises(ValidationError):
            SubmitInvoiceSchema.model_validate(_invoice(line_items=[item]))
