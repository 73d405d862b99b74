"""UBL 2.1 / Peppol BIS 3.0 Invoice and CreditNote exporter."""

import logging
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable
from xml.etree.ElementTree import Element, indent, tostring

from ..config import Settings, get_settings
from ..core.errors import SerializationError
from ..core.models import (
    Address,
    BusinessDocument,
    DocumentType,
    InvoiceLine,
    MonetaryTotals,
    Party,
    ResolvedTaxCategory,
    TaxTotals,
)
from ..core.money import format_amount, format_decimal
from ..core.tax import aggregate_taxes, compute_line_amounts, resolve_tax_category
from ..core.vat import normalize_vat_id, split_peppol_id
from .attachments import PDF_MIME_TYPE, embed_attachment, embed_attachment_file
from .base import UBL_CAC_NAMESPACE, UBL_CBC_NAMESPACE, BaseExporter, add_cac, add_cbc

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

DOCUMENT_CURRENCY = "EUR"
DUE_DATE_OFFSET_DAYS = 30
# UN/ECE Rec 20 "ZZ": mutually defined, the model has no units of measure
QUANTITY_UNIT_CODE = "ZZ"
TAX_SCHEME_ID = "VAT"

# Characters outside the XML 1.0 Char production
INVALID_XML_CHARS = re.compile(r"[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")
REPLACEMENT_CHAR = "\uFFFD"


@dataclass(frozen=True)
class DocumentKind:
    """Element names and codes that differ between invoices and credit notes."""

    document_type: DocumentType
    root_tag: str
    namespace: str
    type_code_tag: str
    type_code: str
    has_due_date: bool
    line_tag: str
    quantity_tag: str
    line_tax_total: bool
    attachment_description: str


INVOICE_KIND = DocumentKind(
    document_type=DocumentType.INVOICE,
    root_tag="Invoice",
    namespace="urn:oasis:names:specification:ubl:schema:xsd:Invoice-2",
    type_code_tag="InvoiceTypeCode",
    type_code="380",
    has_due_date=True,
    line_tag="InvoiceLine",
    quantity_tag="InvoicedQuantity",
    line_tax_total=True,
    attachment_description="Invoice",
)

CREDIT_NOTE_KIND = DocumentKind(
    document_type=DocumentType.CREDIT_NOTE,
    root_tag="CreditNote",
    namespace="urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2",
    type_code_tag="CreditNoteTypeCode",
    type_code="381",
    has_due_date=False,
    line_tag="CreditNoteLine",
    quantity_tag="CreditedQuantity",
    line_tax_total=False,
    attachment_description="CreditNote",
)


class UBLDocumentExporter(BaseExporter):
    """
    Assemble a Peppol BIS Billing 3.0 UBL document.

    One exporter serves both document kinds; everything that differs is
    carried by the ``DocumentKind`` descriptor. Every call builds a fresh
    element tree and never writes to the input document.
    """

    def __init__(
        self,
        kind: DocumentKind = INVOICE_KIND,
        settings: Settings | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.kind = kind
        self.settings = settings or get_settings()
        self.clock = clock

    @property
    def format_name(self) -> str:
        return f"Peppol BIS Billing 3.0 {self.kind.root_tag}"

    @property
    def file_extension(self) -> str:
        return "xml"

    @property
    def mime_type(self) -> str:
        return "application/xml"

    def export(self, document: BusinessDocument, issue_date: date | None = None) -> bytes:
        """Generate the UBL XML bytes for a document."""
        if document.kind != self.kind.document_type.value:
            raise ValueError(
                f"{self.kind.root_tag} exporter cannot export a {document.kind} document"
            )

        issue_date = issue_date or self.clock()
        logger.info(
            f"Generating {self.kind.root_tag} {document.id} "
            f"with {len(document.lines)} lines"
        )

        root = self.build_tree(document, issue_date)
        return self.serialize(root)

    def build_tree(self, document: BusinessDocument, issue_date: date) -> Element:
        """Compose the complete document element tree."""
        root = Element(
            self.kind.root_tag,
            {
                "xmlns": self.kind.namespace,
                "xmlns:cac": UBL_CAC_NAMESPACE,
                "xmlns:cbc": UBL_CBC_NAMESPACE,
            },
        )

        # Header
        add_cbc(root, "CustomizationID", document.customization_id or self.settings.default_customization_id)
        add_cbc(root, "ProfileID", document.profile_id or self.settings.default_profile_id)
        add_cbc(root, "ID", document.id)
        add_cbc(root, "IssueDate", issue_date.isoformat())
        if self.kind.has_due_date:
            add_cbc(root, "DueDate", (issue_date + timedelta(days=DUE_DATE_OFFSET_DAYS)).isoformat())
        add_cbc(root, self.kind.type_code_tag, self.kind.type_code)
        add_cbc(root, "DocumentCurrencyCode", DOCUMENT_CURRENCY)

        if document.invoice_period_start and document.invoice_period_end:
            period = add_cac(root, "InvoicePeriod")
            add_cbc(period, "StartDate", document.invoice_period_start.isoformat())
            add_cbc(period, "EndDate", document.invoice_period_end.isoformat())

        # No separate purchase order concept: the order reference is the document id
        order_reference = add_cac(root, "OrderReference")
        add_cbc(order_reference, "ID", document.id)

        if document.has_attachment:
            root.extend(self._build_attachments(document))

        # Parties
        self._add_party(add_cac(root, "AccountingSupplierParty"), document.supplier)
        self._add_party(add_cac(root, "AccountingCustomerParty"), document.customer)

        self._add_delivery(root, document)
        self._add_payment_means(root, document)

        if document.note:
            terms = add_cac(root, "PaymentTerms")
            add_cbc(terms, "Note", document.note)

        # Totals
        totals = aggregate_taxes(document.lines)
        self._add_tax_total(root, totals)
        self._add_monetary_total(root, MonetaryTotals.from_tax_totals(totals))

        for index, line in enumerate(document.lines, start=1):
            root.append(self.build_line(index, line))

        return root

    def build_line(self, index: int, line: InvoiceLine) -> Element:
        """
        Build one line element.

        Args:
            index: 1-based position of the line in the document
            line: Input line

        Returns:
            InvoiceLine or CreditNoteLine element
        """
        category = resolve_tax_category(line)
        amounts = compute_line_amounts(line, category)

        elem = Element(f"cac:{self.kind.line_tag}")
        add_cbc(elem, "ID", str(index))
        add_cbc(elem, self.kind.quantity_tag, format_decimal(line.quantity), unit=QUANTITY_UNIT_CODE)
        add_cbc(elem, "LineExtensionAmount", format_amount(amounts.taxable), currency=DOCUMENT_CURRENCY)

        if self.kind.line_tax_total:
            line_tax = add_cac(elem, "TaxTotal")
            add_cbc(line_tax, "TaxAmount", format_amount(amounts.tax), currency=DOCUMENT_CURRENCY)

        item = add_cac(elem, "Item")
        if line.description:
            add_cbc(item, "Description", line.description)
        add_cbc(item, "Name", line.name)
        self._add_tax_category(add_cac(item, "ClassifiedTaxCategory"), category)

        price = add_cac(elem, "Price")
        add_cbc(price, "PriceAmount", format_decimal(line.price), currency=DOCUMENT_CURRENCY)
        return elem

    def serialize(self, root: Element) -> bytes:
        """
        Serialize the tree with a fixed prolog and two-space indentation.

        Characters XML 1.0 cannot carry are replaced with U+FFFD so the
        output is always well-formed.

        Raises:
            SerializationError: If the encoder rejects the tree
        """
        try:
            self._replace_invalid_chars(root)
            indent(root, space="  ")
            body = tostring(root, encoding="unicode")
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e
        return (XML_DECLARATION + body).encode("utf-8")

    def _replace_invalid_chars(self, root: Element) -> None:
        replaced = 0
        for elem in root.iter():
            if isinstance(elem.text, str):
                elem.text, count = INVALID_XML_CHARS.subn(REPLACEMENT_CHAR, elem.text)
                replaced += count
            for name, value in list(elem.attrib.items()):
                if isinstance(value, str):
                    elem.attrib[name], count = INVALID_XML_CHARS.subn(REPLACEMENT_CHAR, value)
                    replaced += count
        if replaced:
            logger.warning(f"Replaced {replaced} characters not allowed in XML")

    def _build_attachments(self, document: BusinessDocument) -> list[Element]:
        if document.pdf_data:
            return embed_attachment(
                document.pdf_data,
                PDF_MIME_TYPE,
                document.pdf_filename,
                document.pdf_description,
                document.id,
                settings=self.settings,
            )
        return embed_attachment_file(
            document.pdf_filename,
            self.kind.attachment_description,
            document.id,
            settings=self.settings,
        )

    def _add_party(self, parent: Element, party: Party) -> None:
        """Helper to add Party details."""
        party_elem = add_cac(parent, "Party")

        endpoint = split_peppol_id(party.peppol_id)
        add_cbc(party_elem, "EndpointID", endpoint.value, scheme_id=endpoint.scheme_id)

        name_elem = add_cac(party_elem, "PartyName")
        add_cbc(name_elem, "Name", party.name)

        self._add_address(add_cac(party_elem, "PostalAddress"), party.address)

        if party.vat_id:
            tax_scheme = add_cac(party_elem, "PartyTaxScheme")
            add_cbc(tax_scheme, "CompanyID", normalize_vat_id(party.vat_id, party.address.country_code))
            scheme = add_cac(tax_scheme, "TaxScheme")
            add_cbc(scheme, "ID", TAX_SCHEME_ID)

        legal_entity = add_cac(party_elem, "PartyLegalEntity")
        add_cbc(legal_entity, "RegistrationName", party.registration_name or party.name)

    def _add_address(self, addr_elem: Element, address: Address) -> None:
        if address.street_name:
            add_cbc(addr_elem, "StreetName", address.street_name)
        if address.city_name:
            add_cbc(addr_elem, "CityName", address.city_name)
        if address.postal_zone:
            add_cbc(addr_elem, "PostalZone", address.postal_zone)
        if address.country_code:
            country = add_cac(addr_elem, "Country")
            add_cbc(country, "IdentificationCode", address.country_code)

    def _add_delivery(self, root: Element, document: BusinessDocument) -> None:
        if document.delivery_address is None and document.actual_delivery_date is None:
            return

        delivery = add_cac(root, "Delivery")
        if document.actual_delivery_date:
            add_cbc(delivery, "ActualDeliveryDate", document.actual_delivery_date.isoformat())

        # Date-only deliveries keep an empty location
        location = add_cac(delivery, "DeliveryLocation")
        if document.delivery_address is not None:
            self._add_address(add_cac(location, "Address"), document.delivery_address)

    def _add_payment_means(self, root: Element, document: BusinessDocument) -> None:
        means = add_cac(root, "PaymentMeans")
        add_cbc(means, "PaymentMeansCode", self.settings.payment_means_code)

        account = add_cac(means, "PayeeFinancialAccount")
        add_cbc(account, "ID", document.iban)
        if document.bic:
            branch = add_cac(account, "FinancialInstitutionBranch")
            add_cbc(branch, "ID", document.bic)

    def _add_tax_category(self, category_elem: Element, category: ResolvedTaxCategory) -> None:
        add_cbc(category_elem, "ID", category.code)
        add_cbc(category_elem, "Name", category.name)
        add_cbc(category_elem, "Percent", format_decimal(category.rate))
        if category.exemption_reason_code:
            add_cbc(category_elem, "TaxExemptionReasonCode", category.exemption_reason_code)
        if category.exemption_reason:
            add_cbc(category_elem, "TaxExemptionReason", category.exemption_reason)
        scheme = add_cac(category_elem, "TaxScheme")
        add_cbc(scheme, "ID", TAX_SCHEME_ID)

    def _add_tax_total(self, root: Element, totals: TaxTotals) -> None:
        tax_total = add_cac(root, "TaxTotal")
        add_cbc(tax_total, "TaxAmount", format_amount(totals.tax_amount), currency=DOCUMENT_CURRENCY)

        for subtotal in totals.subtotals:
            subtotal_elem = add_cac(tax_total, "TaxSubtotal")
            add_cbc(subtotal_elem, "TaxableAmount", format_amount(subtotal.taxable_amount), currency=DOCUMENT_CURRENCY)
            add_cbc(subtotal_elem, "TaxAmount", format_amount(subtotal.tax_amount), currency=DOCUMENT_CURRENCY)
            self._add_tax_category(add_cac(subtotal_elem, "TaxCategory"), subtotal.category)

    def _add_monetary_total(self, root: Element, totals: MonetaryTotals) -> None:
        legal_total = add_cac(root, "LegalMonetaryTotal")
        add_cbc(legal_total, "LineExtensionAmount", format_amount(totals.line_extension_amount), currency=DOCUMENT_CURRENCY)
        add_cbc(legal_total, "TaxExclusiveAmount", format_amount(totals.tax_exclusive_amount), currency=DOCUMENT_CURRENCY)
        add_cbc(legal_total, "TaxInclusiveAmount", format_amount(totals.tax_inclusive_amount), currency=DOCUMENT_CURRENCY)
        add_cbc(legal_total, "PayableAmount", format_amount(totals.payable_amount), currency=DOCUMENT_CURRENCY)


class InvoiceExporter(UBLDocumentExporter):
    """Exporter for Peppol UBL invoices (type code 380)."""

    def __init__(self, settings: Settings | None = None, clock: Callable[[], date] = date.today):
        super().__init__(INVOICE_KIND, settings=settings, clock=clock)


class CreditNoteExporter(UBLDocumentExporter):
    """Exporter for Peppol UBL credit notes (type code 381)."""

    def __init__(self, settings: Settings | None = None, clock: Callable[[], date] = date.today):
        super().__init__(CREDIT_NOTE_KIND, settings=settings, clock=clock)


EXPORTERS: dict[DocumentType, type[UBLDocumentExporter]] = {
    DocumentType.INVOICE: InvoiceExporter,
    DocumentType.CREDIT_NOTE: CreditNoteExporter,
}


def get_exporter(
    document_type: DocumentType,
    settings: Settings | None = None,
    clock: Callable[[], date] = date.today,
) -> UBLDocumentExporter:
    """Return the exporter for a document kind."""
    return EXPORTERS[document_type](settings=settings, clock=clock)
