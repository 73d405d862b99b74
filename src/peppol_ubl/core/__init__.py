"""Core module - models, tax engine and pipeline."""

from .errors import (
    AttachmentError,
    DocumentGenerationError,
    MalformedPeppolIdentifierError,
    SerializationError,
)
from .models import (
    Address,
    BusinessDocument,
    CreditNote,
    DocumentType,
    EndpointId,
    Invoice,
    InvoiceLine,
    LineAmounts,
    MonetaryTotals,
    Party,
    ResolvedTaxCategory,
    TaxSubtotal,
    TaxTotals,
)
from .money import round_amount
from .tax import aggregate_taxes, compute_line_amounts, resolve_tax_category
from .vat import normalize_vat_id, split_peppol_id

__all__ = [
    "Address",
    "AttachmentError",
    "BusinessDocument",
    "CreditNote",
    "DocumentGenerationError",
    "DocumentType",
    "EndpointId",
    "Invoice",
    "InvoiceLine",
    "LineAmounts",
    "MalformedPeppolIdentifierError",
    "MonetaryTotals",
    "Party",
    "ResolvedTaxCategory",
    "SerializationError",
    "TaxSubtotal",
    "TaxTotals",
    "aggregate_taxes",
    "compute_line_amounts",
    "normalize_vat_id",
    "resolve_tax_category",
    "round_amount",
    "split_peppol_id",
]
