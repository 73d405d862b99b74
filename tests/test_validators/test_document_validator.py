"""Tests for the combined document self-check."""

from peppol_ubl.exporters import InvoiceExporter
from peppol_ubl.validators import validate_document


class TestValidateDocument:
    """Test cases for validate_document."""

    def test_generated_invoice_valid(self, sample_invoice, settings):
        xml = InvoiceExporter(settings=settings).export(sample_invoice)

        result = validate_document(xml, settings=settings)

        assert result.is_valid
        assert result.errors == []

    def test_malformed_reports_only_parse_error(self, settings):
        result = validate_document(b"not xml", settings=settings)

        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Malformed xml document")

    def test_errors_from_all_validators_merged(self, intra_community_invoice, settings):
        xml = InvoiceExporter(settings=settings).export(intra_community_invoice)
        xml = xml.replace(
            b'<cbc:PayableAmount currencyID="EUR">2500.00<',
            b'<cbc:PayableAmount currencyID="EUR">2600.00<',
        )
        xml = xml.replace(b"<cbc:Percent>0</cbc:Percent>", b"<cbc:Percent>19</cbc:Percent>")

        result = validate_document(xml, settings=settings)

        assert not result.is_valid
        assert any("BR-CO-16" in err for err in result.errors)
        assert any("BR-IC-06" in err for err in result.errors)
