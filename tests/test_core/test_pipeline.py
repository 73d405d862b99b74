"""Tests for the document generation pipeline."""

from datetime import date

from peppol_ubl.config import Settings
from peppol_ubl.core.pipeline import DocumentPipeline
from peppol_ubl.exporters import CreditNoteExporter, InvoiceExporter


class TestDocumentPipeline:
    """Test cases for DocumentPipeline."""

    def setup_method(self):
        """Setup test fixtures."""
        self.pipeline = DocumentPipeline(
            settings=Settings(_env_file=None),
            clock=lambda: date(2024, 1, 15),
        )

    def test_generates_invoice(self, sample_invoice):
        result = self.pipeline.generate(sample_invoice)

        assert result.filename == "INV-2024-001.xml"
        assert result.media_type == "application/xml"
        assert b"<cbc:InvoiceTypeCode>380</cbc:InvoiceTypeCode>" in result.content
        assert b"<cbc:IssueDate>2024-01-15</cbc:IssueDate>" in result.content

    def test_generates_credit_note(self, sample_credit_note):
        result = self.pipeline.generate(sample_credit_note)

        assert result.filename == "CN-2024-001.xml"
        assert b"<cbc:CreditNoteTypeCode>381</cbc:CreditNoteTypeCode>" in result.content

    def test_exporters_cached_per_kind(self, sample_invoice, sample_credit_note):
        first = self.pipeline.exporter_for(sample_invoice)

        assert self.pipeline.exporter_for(sample_invoice) is first
        assert self.pipeline.exporter_for(sample_credit_note) is not first

    def test_exporter_matches_document_type(self, sample_invoice, sample_credit_note):
        assert isinstance(self.pipeline.exporter_for(sample_invoice), InvoiceExporter)
        assert isinstance(self.pipeline.exporter_for(sample_credit_note), CreditNoteExporter)

    def test_no_validation_by_default(self, sample_invoice):
        assert self.pipeline.generate(sample_invoice).validation is None

    def test_validation_on_request(self, sample_invoice):
        result = self.pipeline.generate(sample_invoice, validate=True)

        assert result.validation is not None
        assert result.validation.is_valid

    def test_validation_from_settings(self, intra_community_invoice):
        pipeline = DocumentPipeline(settings=Settings(_env_file=None, validate_output=True))

        result = pipeline.generate(intra_community_invoice)

        assert result.validation is not None
        assert result.validation.is_valid, result.validation.errors

    def test_explicit_issue_date(self, sample_invoice):
        result = self.pipeline.generate(sample_invoice, issue_date=date(2024, 3, 1))

        assert b"<cbc:DueDate>2024-03-31</cbc:DueDate>" in result.content
