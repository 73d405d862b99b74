"""Tests for input models and settings."""

import base64
import json

import pytest
from decimal import Decimal
from pydantic import ValidationError

from peppol_ubl.config import Settings
from peppol_ubl.core.models import CreditNote, Invoice, InvoiceLine, MonetaryTotals, TaxTotals


class TestBusinessDocument:
    """Test cases for Invoice and CreditNote models."""

    def test_kind(self, sample_invoice, sample_credit_note):
        assert sample_invoice.kind == "invoice"
        assert sample_credit_note.kind == "credit_note"

    def test_models_are_frozen(self, sample_invoice):
        with pytest.raises(ValidationError):
            sample_invoice.note = "changed"

    def test_pdf_data_base64_in_json(self, sample_invoice):
        doc = sample_invoice.model_copy(update={"pdf_data": b"%PDF-1.4"})
        payload = json.loads(doc.model_dump_json())

        assert payload["pdf_data"] == base64.b64encode(b"%PDF-1.4").decode("ascii")
        assert Invoice.model_validate_json(doc.model_dump_json()).pdf_data == b"%PDF-1.4"

    def test_has_attachment(self, sample_invoice):
        assert not sample_invoice.has_attachment
        assert sample_invoice.model_copy(update={"pdf_filename": "a.pdf"}).has_attachment
        assert sample_invoice.model_copy(update={"pdf_data": b"x"}).has_attachment

    def test_empty_id_rejected(self, supplier, customer):
        with pytest.raises(ValidationError):
            CreditNote(id="", supplier=supplier, customer=customer)

    def test_wrong_kind_rejected(self, sample_invoice):
        payload = sample_invoice.model_dump(mode="json")

        with pytest.raises(ValidationError):
            CreditNote.model_validate(payload)


class TestInvoiceLine:
    """Test cases for InvoiceLine."""

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            InvoiceLine(name="Item", quantity=Decimal("-1"))

    def test_rate_above_hundred_rejected(self):
        with pytest.raises(ValidationError):
            InvoiceLine(name="Item", tax_percentage=Decimal("101"))

    def test_decimals_from_json_strings(self):
        line = InvoiceLine.model_validate_json(
            '{"name": "Item", "quantity": "2.5", "price": "19.99", "tax_percentage": "21"}'
        )

        assert line.quantity == Decimal("2.5")
        assert line.price == Decimal("19.99")


class TestMonetaryTotals:
    """Test cases for MonetaryTotals."""

    def test_from_tax_totals(self):
        totals = MonetaryTotals.from_tax_totals(
            TaxTotals(line_extension_amount=Decimal("1000.00"), tax_amount=Decimal("210.00"))
        )

        assert totals.tax_exclusive_amount == Decimal("1000.00")
        assert totals.tax_inclusive_amount == Decimal("1210.00")
        assert totals.payable_amount == Decimal("1210.00")


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self, settings):
        assert settings.payment_means_code == "1"
        assert settings.attachment_classification_id == "UBL.BE"
        assert settings.max_attachment_size_bytes == 10 * 1024 * 1024
        assert settings.validate_output is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_MEANS_CODE", "58")
        monkeypatch.setenv("VALIDATE_OUTPUT", "true")

        settings = Settings(_env_file=None)

        assert settings.payment_means_code == "58"
        assert settings.validate_output is True

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_allowed_origins="https://a.example, https://b.example")

        assert settings.cors_allowed_origins == ["https://a.example", "https://b.example"]

    def test_attachment_limit_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_attachment_size_mb=0)
