"""Tax and VAT validation."""

import re
from decimal import Decimal

from lxml import etree

from ..core.tax import INTRA_COMMUNITY_CODE
from .base import UBL_NAMESPACES, ValidationResult, parse_ubl, read_amount


# VAT ID format patterns by VAT prefix (Greece uses EL)
VAT_ID_PATTERNS: dict[str, str] = {
    "AT": r"^ATU\d{8}$",
    "BE": r"^BE[01]\d{9}$",
    "BG": r"^BG\d{9,10}$",
    "CY": r"^CY\d{8}[A-Z]$",
    "CZ": r"^CZ\d{8,10}$",
    "DE": r"^DE\d{9}$",
    "DK": r"^DK\d{8}$",
    "EE": r"^EE\d{9}$",
    "EL": r"^EL\d{9}$",
    "ES": r"^ES[A-Z0-9]\d{7}[A-Z0-9]$",
    "FI": r"^FI\d{8}$",
    "FR": r"^FR[A-Z0-9]{2}\d{9}$",
    "GB": r"^GB(\d{9}|\d{12}|(GD|HA)\d{3})$",
    "HR": r"^HR\d{11}$",
    "HU": r"^HU\d{8}$",
    "IE": r"^IE\d{7}[A-Z]{1,2}$",
    "IT": r"^IT\d{11}$",
    "LT": r"^LT(\d{9}|\d{12})$",
    "LU": r"^LU\d{8}$",
    "LV": r"^LV\d{11}$",
    "MT": r"^MT\d{8}$",
    "NL": r"^NL\d{9}B\d{2}$",
    "PL": r"^PL\d{10}$",
    "PT": r"^PT\d{9}$",
    "RO": r"^RO\d{2,10}$",
    "SE": r"^SE\d{12}$",
    "SI": r"^SI\d{8}$",
    "SK": r"^SK\d{10}$",
}

PARTY_VAT_PATH = "cac:Party/cac:PartyTaxScheme/cbc:CompanyID"


class TaxValidator:
    """
    Validate tax-related information.

    Applies the Peppol intra-community (BR-IC) rules when category K is
    used and checks VAT ID formats.
    """

    def validate(self, xml_bytes: bytes) -> ValidationResult:
        """
        Validate tax-related aspects of the document.

        Args:
            xml_bytes: Serialized Invoice or CreditNote

        Returns:
            ValidationResult with any issues found
        """
        try:
            root = parse_ubl(xml_bytes)
        except etree.XMLSyntaxError:
            return ValidationResult(is_valid=True)

        result = ValidationResult(is_valid=True)
        result = result.merge(self._validate_vat_ids(root))
        result = result.merge(self._validate_intra_community(root))
        return result

    def _validate_vat_ids(self, root: etree._Element) -> ValidationResult:
        """Validate VAT ID formats."""
        warnings = []

        for role, path in (
            ("Supplier", "cac:AccountingSupplierParty"),
            ("Customer", "cac:AccountingCustomerParty"),
        ):
            vat_id = root.findtext(f"{path}/{PARTY_VAT_PATH}", namespaces=UBL_NAMESPACES)
            if vat_id and not self._is_valid_vat_format(vat_id):
                warnings.append(f"{role} VAT ID '{vat_id}' may have invalid format")

        # Warnings don't fail validation
        return ValidationResult(is_valid=True, warnings=warnings)

    def _validate_intra_community(self, root: etree._Element) -> ValidationResult:
        """Check the BR-IC rules for intra-community supply."""
        categories = root.findall(".//cac:ClassifiedTaxCategory", namespaces=UBL_NAMESPACES)
        subtotals = [
            subtotal
            for subtotal in root.findall("cac:TaxTotal/cac:TaxSubtotal", namespaces=UBL_NAMESPACES)
            if subtotal.findtext("cac:TaxCategory/cbc:ID", namespaces=UBL_NAMESPACES)
            == INTRA_COMMUNITY_CODE
        ]
        k_categories = [
            category
            for category in categories
            if category.findtext("cbc:ID", namespaces=UBL_NAMESPACES) == INTRA_COMMUNITY_CODE
        ]
        if not subtotals and not k_categories:
            return ValidationResult(is_valid=True)

        errors = []

        # BR-IC-02, BR-IC-03
        for rule, role, path in (
            ("BR-IC-02", "Seller", "cac:AccountingSupplierParty"),
            ("BR-IC-03", "Buyer", "cac:AccountingCustomerParty"),
        ):
            if not root.findtext(f"{path}/{PARTY_VAT_PATH}", namespaces=UBL_NAMESPACES):
                errors.append(f"[{rule}] {role} VAT identifier is required for intra-community supply")

        # BR-IC-05, BR-IC-06
        for category in k_categories:
            percent = read_amount(category, "cbc:Percent")
            if percent != Decimal("0"):
                errors.append(f"[BR-IC-05] Intra-community line rate must be 0, got {percent}")

        for subtotal in subtotals:
            percent = read_amount(subtotal, "cac:TaxCategory/cbc:Percent")
            if percent != Decimal("0"):
                errors.append(f"[BR-IC-06] Intra-community subtotal rate must be 0, got {percent}")
            # BR-IC-09
            tax = read_amount(subtotal, "cbc:TaxAmount")
            if tax != Decimal("0"):
                errors.append(f"[BR-IC-09] Intra-community subtotal tax must be 0, got {tax}")
            # BR-IC-10
            code = subtotal.findtext("cac:TaxCategory/cbc:TaxExemptionReasonCode", namespaces=UBL_NAMESPACES)
            reason = subtotal.findtext("cac:TaxCategory/cbc:TaxExemptionReason", namespaces=UBL_NAMESPACES)
            if not code and not reason:
                errors.append("[BR-IC-10] Intra-community subtotal needs an exemption reason code or text")

        # BR-IC-11
        has_delivery_date = root.find("cac:Delivery/cbc:ActualDeliveryDate", namespaces=UBL_NAMESPACES) is not None
        has_period = root.find("cac:InvoicePeriod", namespaces=UBL_NAMESPACES) is not None
        if not has_delivery_date and not has_period:
            errors.append("[BR-IC-11] Intra-community supply needs an actual delivery date or invoicing period")

        # BR-IC-12
        country = root.findtext(
            "cac:Delivery/cac:DeliveryLocation/cac:Address/cac:Country/cbc:IdentificationCode",
            namespaces=UBL_NAMESPACES,
        )
        if not country:
            errors.append("[BR-IC-12] Intra-community supply needs a deliver-to country code")

        return ValidationResult(is_valid=not errors, errors=errors)

    def _is_valid_vat_format(self, vat_id: str) -> bool:
        """
        Check if VAT ID matches expected format for its country.

        Args:
            vat_id: VAT ID to validate

        Returns:
            True if format is valid or unknown country
        """
        # Clean the VAT ID
        vat_id = vat_id.upper().replace(" ", "").replace("-", "").replace(".", "")

        pattern = VAT_ID_PATTERNS.get(vat_id[:2])
        if pattern is None:
            # Unknown format, assume valid
            return True
        return bool(re.match(pattern, vat_id))
