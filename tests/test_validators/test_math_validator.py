"""Tests for mathematical validator."""

import pytest
from datetime import date

from peppol_ubl.exporters import CreditNoteExporter, InvoiceExporter
from peppol_ubl.validators import MathValidator


@pytest.fixture
def invoice_xml(sample_invoice, settings) -> bytes:
    return InvoiceExporter(settings=settings).export(sample_invoice, issue_date=date(2024, 1, 15))


class TestMathValidator:
    """Test cases for MathValidator."""

    def setup_method(self):
        """Setup test fixtures."""
        self.validator = MathValidator()

    def test_valid_document_passes(self, invoice_xml):
        """Test that a generated document passes validation."""
        result = self.validator.validate(invoice_xml)

        assert result.is_valid
        assert len(result.errors) == 0
        assert len(result.warnings) == 0

    def test_valid_credit_note_passes(self, sample_credit_note, settings):
        xml = CreditNoteExporter(settings=settings).export(sample_credit_note)

        assert self.validator.validate(xml).is_valid

    def test_intra_community_passes(self, intra_community_invoice, settings):
        xml = InvoiceExporter(settings=settings).export(intra_community_invoice)

        assert self.validator.validate(xml).is_valid

    def test_wrong_payable_fails(self, invoice_xml):
        """Test that wrong payable amount is detected."""
        xml = invoice_xml.replace(
            b'<cbc:PayableAmount currencyID="EUR">1475.00<',
            b'<cbc:PayableAmount currencyID="EUR">1476.00<',
        )

        result = self.validator.validate(xml)

        assert not result.is_valid
        assert any("BR-CO-16" in err for err in result.errors)

    def test_wrong_line_amount_fails(self, invoice_xml):
        """Test that wrong line total is detected."""
        xml = invoice_xml.replace(
            b'<cbc:LineExtensionAmount currencyID="EUR">250.00<',
            b'<cbc:LineExtensionAmount currencyID="EUR">251.00<',
        )

        result = self.validator.validate(xml)

        assert not result.is_valid
        assert any("BR-CO-10" in err for err in result.errors)

    def test_wrong_tax_total_fails(self, invoice_xml):
        xml = invoice_xml.replace(
            b'<cbc:TaxAmount currencyID="EUR">225.00<',
            b'<cbc:TaxAmount currencyID="EUR">226.00<',
        )

        result = self.validator.validate(xml)

        assert not result.is_valid
        assert any("BR-CO-14" in err for err in result.errors)
        assert any("BR-CO-15" in err for err in result.errors)

    def test_subtotal_rate_mismatch_warns(self, invoice_xml):
        """Test that a subtotal far from taxable x rate only warns."""
        xml = invoice_xml.replace(b"<cbc:Percent>21</cbc:Percent>", b"<cbc:Percent>25</cbc:Percent>")

        result = self.validator.validate(xml)

        assert result.is_valid
        assert any("S 25%" in w for w in result.warnings)

    def test_missing_totals_fail(self):
        xml = (
            b'<Invoice xmlns="urn:oasis:names:specification:ubl:schema:xsd:Invoice-2" '
            b'xmlns:cbc="urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2">'
            b"<cbc:ID>1</cbc:ID></Invoice>"
        )

        result = self.validator.validate(xml)

        assert not result.is_valid

    def test_malformed_xml_left_to_schema_validator(self):
        assert self.validator.validate(b"<Invoice>").is_valid
