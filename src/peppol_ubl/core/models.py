"""Pydantic models for business documents and computed tax results."""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .money import ZERO, round_amount


class DocumentType(str, Enum):
    """Kind of business document."""

    INVOICE = "invoice"
    CREDIT_NOTE = "credit_note"


class Address(BaseModel):
    """Postal address. Country-only addresses are valid."""

    model_config = ConfigDict(frozen=True)

    street_name: str | None = None
    city_name: str | None = None
    postal_zone: str | None = None
    country_code: str | None = Field(default=None, min_length=2, max_length=2)


class Party(BaseModel):
    """Supplier or customer party."""

    model_config = ConfigDict(frozen=True)

    name: str
    registration_name: str | None = Field(
        default=None, description="Legal registration name, defaults to name"
    )
    vat_id: str = Field(default="", description="Raw VAT identifier, normalized on output")
    peppol_id: str = Field(..., description="Compound endpoint id, e.g. '9925:BE0123456789'")
    address: Address = Field(default_factory=Address)


class InvoiceLine(BaseModel):
    """One invoice or credit note line."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    price: Decimal = Field(default=Decimal("0"), ge=0, description="Unit price before tax")
    tax_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    tax_category_id: str = Field(default="", description="UNCL5305 code; empty means S")
    tax_category_name: str = ""
    tax_exemption_code: str = Field(default="", description="Exemption reason code (BT-121)")
    tax_exemption_reason: str = Field(default="", description="Exemption reason text (BT-120)")


class BusinessDocument(BaseModel):
    """
    Flat business-level description of an invoice or credit note.

    The model is read-only during generation; exporters never store
    assembly state on it.
    """

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    id: str = Field(..., min_length=1, description="Document number")
    customization_id: str = ""
    profile_id: str = ""

    supplier: Party
    customer: Party

    # Intra-community supply needs a delivery (BT-72/BT-80) or an invoicing period (BG-14)
    delivery_address: Address | None = None
    actual_delivery_date: date | None = None
    invoice_period_start: date | None = None
    invoice_period_end: date | None = None

    iban: str = ""
    bic: str = ""
    note: str = ""

    lines: list[InvoiceLine] = Field(default_factory=list)

    pdf_filename: str = ""
    pdf_data: bytes | None = Field(default=None, description="Raw PDF bytes (base64 in JSON)")
    pdf_description: str = ""

    @property
    def has_attachment(self) -> bool:
        return bool(self.pdf_filename) or bool(self.pdf_data)


class Invoice(BusinessDocument):
    """Commercial invoice (type code 380)."""

    kind: Literal["invoice"] = "invoice"


class CreditNote(BusinessDocument):
    """Credit note (type code 381)."""

    kind: Literal["credit_note"] = "credit_note"


class EndpointId(BaseModel):
    """Electronic routing endpoint split from a compound Peppol id."""

    model_config = ConfigDict(frozen=True)

    scheme_id: str
    value: str


class ResolvedTaxCategory(BaseModel):
    """Effective tax category of a line after defaults and policies."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    rate: Decimal
    exemption_reason_code: str | None = None
    exemption_reason: str | None = None


class LineAmounts(BaseModel):
    """Rounded taxable and tax amount of a single line."""

    model_config = ConfigDict(frozen=True)

    taxable: Decimal
    tax: Decimal


class TaxSubtotal(BaseModel):
    """Aggregated amounts for one (rate, category) pair."""

    taxable_amount: Decimal = Field(..., description="Sum of line amounts before tax")
    tax_amount: Decimal = Field(..., description="Sum of line tax amounts")
    category: ResolvedTaxCategory


class TaxTotals(BaseModel):
    """Result of aggregating all lines of a document."""

    line_extension_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    subtotals: list[TaxSubtotal] = Field(default_factory=list)


class MonetaryTotals(BaseModel):
    """Document level totals (no allowances, charges or prepayments)."""

    line_extension_amount: Decimal
    tax_exclusive_amount: Decimal
    tax_inclusive_amount: Decimal
    payable_amount: Decimal

    @classmethod
    def from_tax_totals(cls, totals: TaxTotals) -> "MonetaryTotals":
        inclusive = round_amount(totals.line_extension_amount + totals.tax_amount)
        return cls(
            line_extension_amount=totals.line_extension_amount,
            tax_exclusive_amount=totals.line_extension_amount,
            tax_inclusive_amount=inclusive,
            payable_amount=inclusive,
        )
