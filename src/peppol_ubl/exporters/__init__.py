"""Document exporters for Peppol UBL formats."""

from .attachments import embed_attachment, embed_attachment_file
from .base import BaseExporter
from .ubl_exporter import (
    CREDIT_NOTE_KIND,
    INVOICE_KIND,
    CreditNoteExporter,
    DocumentKind,
    InvoiceExporter,
    UBLDocumentExporter,
    get_exporter,
)

__all__ = [
    "BaseExporter",
    "CREDIT_NOTE_KIND",
    "CreditNoteExporter",
    "DocumentKind",
    "INVOICE_KIND",
    "InvoiceExporter",
    "UBLDocumentExporter",
    "embed_attachment",
    "embed_attachment_file",
    "get_exporter",
]
