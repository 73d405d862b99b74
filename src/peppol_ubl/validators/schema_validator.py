"""Well-formedness and element order checks for UBL 2.1 documents."""

import logging
from pathlib import Path

from lxml import etree

from .base import UBL_NAMESPACES, ValidationResult, parse_ubl

logger = logging.getLogger(__name__)

ROOT_NAMESPACES: dict[str, str] = {
    "Invoice": "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2",
    "CreditNote": "urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2",
}

# Child sequences of the UBL 2.1 aggregates the generator emits
INVOICE_SEQUENCE = (
    "UBLExtensions", "UBLVersionID", "CustomizationID", "ProfileID", "ProfileExecutionID",
    "ID", "CopyIndicator", "UUID", "IssueDate", "IssueTime", "DueDate", "InvoiceTypeCode",
    "Note", "TaxPointDate", "DocumentCurrencyCode", "TaxCurrencyCode", "PricingCurrencyCode",
    "PaymentCurrencyCode", "PaymentAlternativeCurrencyCode", "AccountingCostCode",
    "AccountingCost", "LineCountNumeric", "BuyerReference", "InvoicePeriod", "OrderReference",
    "BillingReference", "DespatchDocumentReference", "ReceiptDocumentReference",
    "StatementDocumentReference", "OriginatorDocumentReference", "ContractDocumentReference",
    "AdditionalDocumentReference", "ProjectReference", "Signature", "AccountingSupplierParty",
    "AccountingCustomerParty", "PayeeParty", "BuyerCustomerParty", "SellerSupplierParty",
    "TaxRepresentativeParty", "Delivery", "DeliveryTerms", "PaymentMeans", "PaymentTerms",
    "PrepaidPayment", "AllowanceCharge", "TaxExchangeRate", "PricingExchangeRate",
    "PaymentExchangeRate", "PaymentAlternativeExchangeRate", "TaxTotal", "WithholdingTaxTotal",
    "LegalMonetaryTotal", "InvoiceLine",
)

CREDIT_NOTE_SEQUENCE = (
    "UBLExtensions", "UBLVersionID", "CustomizationID", "ProfileID", "ProfileExecutionID",
    "ID", "CopyIndicator", "UUID", "IssueDate", "IssueTime", "TaxPointDate",
    "CreditNoteTypeCode", "Note", "DocumentCurrencyCode", "TaxCurrencyCode",
    "PricingCurrencyCode", "PaymentCurrencyCode", "PaymentAlternativeCurrencyCode",
    "AccountingCostCode", "AccountingCost", "LineCountNumeric", "BuyerReference",
    "InvoicePeriod", "DiscrepancyResponse", "OrderReference", "BillingReference",
    "DespatchDocumentReference", "ReceiptDocumentReference", "ContractDocumentReference",
    "AdditionalDocumentReference", "StatementDocumentReference", "OriginatorDocumentReference",
    "Signature", "AccountingSupplierParty", "AccountingCustomerParty", "PayeeParty",
    "BuyerCustomerParty", "SellerSupplierParty", "TaxRepresentativeParty", "Delivery",
    "DeliveryTerms", "PaymentMeans", "PaymentTerms", "TaxExchangeRate", "PricingExchangeRate",
    "PaymentExchangeRate", "PaymentAlternativeExchangeRate", "AllowanceCharge", "TaxTotal",
    "LegalMonetaryTotal", "CreditNoteLine",
)

PARTY_SEQUENCE = (
    "MarkCareIndicator", "MarkAttentionIndicator", "WebsiteURI", "LogoReferenceID",
    "EndpointID", "IndustryClassificationCode", "PartyIdentification", "PartyName",
    "Language", "PostalAddress", "PhysicalLocation", "PartyTaxScheme", "PartyLegalEntity",
    "Contact", "Person", "AgentParty", "ServiceProviderParty", "PowerOfAttorney",
    "FinancialAccount",
)

ADDRESS_SEQUENCE = (
    "ID", "AddressTypeCode", "AddressFormatCode", "Postbox", "Floor", "Room", "StreetName",
    "AdditionalStreetName", "BlockName", "BuildingName", "BuildingNumber", "InhouseMail",
    "Department", "MarkAttention", "MarkCare", "PlotIdentification", "CitySubdivisionName",
    "CityName", "PostalZone", "CountrySubentity", "CountrySubentityCode", "Region", "District",
    "TimezoneOffset", "AddressLine", "Country", "LocationCoordinate",
)

TAX_CATEGORY_SEQUENCE = (
    "ID", "Name", "Percent", "BaseUnitMeasure", "PerUnitAmount", "TaxExemptionReasonCode",
    "TaxExemptionReason", "TierRange", "TierRatePercent", "TaxScheme",
)

TAX_SUBTOTAL_SEQUENCE = (
    "TaxableAmount", "TaxAmount", "CalculationSequenceNumeric", "TransactionCurrencyTaxAmount",
    "Percent", "BaseUnitMeasure", "PerUnitAmount", "TierRange", "TierRatePercent", "TaxCategory",
)

MONETARY_TOTAL_SEQUENCE = (
    "LineExtensionAmount", "TaxExclusiveAmount", "TaxInclusiveAmount", "AllowanceTotalAmount",
    "ChargeTotalAmount", "PrepaidAmount", "PayableRoundingAmount", "PayableAmount",
    "PayableAlternativeAmount",
)

DOCUMENT_REFERENCE_SEQUENCE = (
    "ID", "CopyIndicator", "UUID", "IssueDate", "IssueTime", "DocumentTypeCode", "DocumentType",
    "XPath", "LanguageID", "LocaleCode", "VersionID", "DocumentStatusCode",
    "DocumentDescription", "Attachment", "ValidityPeriod", "IssuerParty", "ResultOfVerification",
)

DELIVERY_SEQUENCE = (
    "ID", "Quantity", "MinimumQuantity", "MaximumQuantity", "ActualDeliveryDate",
    "ActualDeliveryTime", "LatestDeliveryDate", "LatestDeliveryTime", "ReleaseID", "TrackingID",
    "DeliveryAddress", "DeliveryLocation", "AlternativeDeliveryLocation",
    "RequestedDeliveryPeriod", "PromisedDeliveryPeriod", "EstimatedDeliveryPeriod",
    "CarrierParty", "DeliveryParty", "NotifyParty", "Despatch", "DeliveryTerms",
    "MinimumDeliveryUnit", "MaximumDeliveryUnit", "Shipment",
)

INVOICE_LINE_SEQUENCE = (
    "ID", "UUID", "Note", "InvoicedQuantity", "LineExtensionAmount", "TaxPointDate",
    "AccountingCostCode", "AccountingCost", "PaymentPurposeCode", "FreeOfChargeIndicator",
    "InvoicePeriod", "OrderLineReference", "DespatchLineReference", "ReceiptLineReference",
    "BillingReference", "DocumentReference", "PricingReference", "OriginatorParty", "Delivery",
    "PaymentTerms", "AllowanceCharge", "TaxTotal", "WithholdingTaxTotal", "Item", "Price",
    "DeliveryTerms", "SubInvoiceLine", "ItemPriceExtension",
)

CREDIT_NOTE_LINE_SEQUENCE = (
    "ID", "UUID", "Note", "CreditedQuantity", "LineExtensionAmount", "TaxPointDate",
    "AccountingCostCode", "AccountingCost", "PaymentPurposeCode", "FreeOfChargeIndicator",
    "InvoicePeriod", "OrderLineReference", "DiscrepancyResponse", "DespatchLineReference",
    "ReceiptLineReference", "BillingReference", "DocumentReference", "PricingReference",
    "OriginatorParty", "Delivery", "TaxTotal", "AllowanceCharge", "Item", "Price",
    "DeliveryTerms", "SubCreditNoteLine", "ItemPriceExtension",
)

ITEM_SEQUENCE = (
    "Description", "PackQuantity", "PackSizeNumeric", "CatalogueIndicator", "Name",
    "HazardousRiskIndicator", "AdditionalInformation", "Keyword", "BrandName", "ModelName",
    "BuyersItemIdentification", "SellersItemIdentification", "ManufacturersItemIdentification",
    "StandardItemIdentification", "CatalogueItemIdentification", "AdditionalItemIdentification",
    "CatalogueDocumentReference", "ItemSpecificationDocumentReference", "OriginCountry",
    "CommodityClassification", "TransactionConditions", "HazardousItem",
    "ClassifiedTaxCategory", "AdditionalItemProperty", "ManufacturerParty",
    "InformationContentProviderParty", "OriginAddress", "ItemInstance", "Certificate",
    "Dimension",
)

AGGREGATE_SEQUENCES: dict[str, tuple[str, ...]] = {
    "Party": PARTY_SEQUENCE,
    "PostalAddress": ADDRESS_SEQUENCE,
    "Address": ADDRESS_SEQUENCE,
    "TaxCategory": TAX_CATEGORY_SEQUENCE,
    "ClassifiedTaxCategory": TAX_CATEGORY_SEQUENCE,
    "TaxSubtotal": TAX_SUBTOTAL_SEQUENCE,
    "LegalMonetaryTotal": MONETARY_TOTAL_SEQUENCE,
    "AdditionalDocumentReference": DOCUMENT_REFERENCE_SEQUENCE,
    "Delivery": DELIVERY_SEQUENCE,
    "InvoiceLine": INVOICE_LINE_SEQUENCE,
    "CreditNoteLine": CREDIT_NOTE_LINE_SEQUENCE,
    "Item": ITEM_SEQUENCE,
}

ROOT_SEQUENCES: dict[str, tuple[str, ...]] = {
    "Invoice": INVOICE_SEQUENCE,
    "CreditNote": CREDIT_NOTE_SEQUENCE,
}

COMPONENT_NAMESPACES = frozenset(UBL_NAMESPACES.values())


class SchemaValidator:
    """
    Check that a document is well-formed and follows the UBL element order.

    This covers the subset of the schema the generator can get wrong. When
    XSD paths are configured, full schema validation runs in addition.
    """

    def __init__(
        self,
        invoice_xsd: Path | None = None,
        credit_note_xsd: Path | None = None,
    ):
        self.xsd_paths: dict[str, Path | None] = {
            "Invoice": invoice_xsd,
            "CreditNote": credit_note_xsd,
        }
        self._schemas: dict[str, etree.XMLSchema] = {}

    def validate(self, xml_bytes: bytes) -> ValidationResult:
        """
        Validate document structure.

        Args:
            xml_bytes: Serialized Invoice or CreditNote

        Returns:
            ValidationResult with structural errors
        """
        try:
            root = parse_ubl(xml_bytes)
        except etree.XMLSyntaxError as e:
            return ValidationResult(is_valid=False, errors=[f"Malformed xml document: {e}"])

        qname = etree.QName(root)
        expected_namespace = ROOT_NAMESPACES.get(qname.localname)
        if expected_namespace is None or qname.namespace != expected_namespace:
            return ValidationResult(
                is_valid=False,
                errors=[f"Root element {root.tag} is not a UBL Invoice or CreditNote"],
            )

        errors = self._check_sequence(root, ROOT_SEQUENCES[qname.localname])
        for element in root.iter():
            if not isinstance(element.tag, str) or element is root:
                continue
            sequence = AGGREGATE_SEQUENCES.get(etree.QName(element).localname)
            if sequence is not None and len(element):
                errors.extend(self._check_sequence(element, sequence))

        schema_result = self._validate_xsd(root, qname.localname)
        result = ValidationResult(is_valid=not errors, errors=errors)
        return result.merge(schema_result)

    def _check_sequence(self, parent: etree._Element, sequence: tuple[str, ...]) -> list[str]:
        errors = []
        position = 0
        parent_name = etree.QName(parent).localname
        for child in parent:
            if not isinstance(child.tag, str):
                continue
            child_qname = etree.QName(child)
            name = child_qname.localname
            if child_qname.namespace not in COMPONENT_NAMESPACES or name not in sequence:
                errors.append(f"This element is not expected: {name} in {parent_name}")
                continue
            index = sequence.index(name)
            if index < position:
                errors.append(f"This element is not expected: {name} in {parent_name} (out of order)")
                continue
            position = index
        return errors

    def _validate_xsd(self, root: etree._Element, root_name: str) -> ValidationResult:
        path = self.xsd_paths.get(root_name)
        if path is None:
            return ValidationResult(is_valid=True)

        schema = self._schemas.get(root_name)
        if schema is None:
            logger.info(f"Loading UBL schema {path}")
            schema = etree.XMLSchema(etree.parse(str(path)))
            self._schemas[root_name] = schema

        if schema.validate(root):
            return ValidationResult(is_valid=True)
        return ValidationResult(
            is_valid=False,
            errors=[f"XSD: {error.message} (line {error.line})" for error in schema.error_log],
        )
