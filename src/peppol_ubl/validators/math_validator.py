"""Arithmetic consistency checks on generated UBL documents."""

from decimal import Decimal

from lxml import etree

from ..core.money import ZERO, round_amount
from .base import UBL_NAMESPACES, ValidationResult, parse_ubl, read_amount


class MathValidator:
    """
    Validate totals of a generated document against Peppol BR-CO rules.

    All values are compared exactly at two decimals; the generator rounds
    every amount where it is computed, so any difference is a defect.
    """

    # Peppol tolerates one currency unit on BR-S-09 style per-category checks
    CATEGORY_TAX_TOLERANCE = Decimal("1.00")

    def validate(self, xml_bytes: bytes) -> ValidationResult:
        """
        Validate all arithmetic aspects of the document.

        Args:
            xml_bytes: Serialized Invoice or CreditNote

        Returns:
            ValidationResult with any errors found
        """
        try:
            root = parse_ubl(xml_bytes)
        except etree.XMLSyntaxError:
            # Well-formedness is reported by SchemaValidator
            return ValidationResult(is_valid=True)

        errors: list[str] = []
        warnings: list[str] = []

        legal_total = root.find("cac:LegalMonetaryTotal", namespaces=UBL_NAMESPACES)
        tax_total = root.find("cac:TaxTotal", namespaces=UBL_NAMESPACES)
        if legal_total is None or tax_total is None:
            return ValidationResult(
                is_valid=False,
                errors=["LegalMonetaryTotal and TaxTotal are mandatory"],
            )

        line_extension = read_amount(legal_total, "cbc:LineExtensionAmount")
        tax_exclusive = read_amount(legal_total, "cbc:TaxExclusiveAmount")
        tax_inclusive = read_amount(legal_total, "cbc:TaxInclusiveAmount")
        payable = read_amount(legal_total, "cbc:PayableAmount")
        tax_amount = read_amount(tax_total, "cbc:TaxAmount")

        if None in (line_extension, tax_exclusive, tax_inclusive, payable, tax_amount):
            return ValidationResult(
                is_valid=False,
                errors=["Monetary totals are missing or not numeric"],
            )

        # BR-CO-10: sum of line net amounts
        lines = root.findall("cac:InvoiceLine", namespaces=UBL_NAMESPACES) + root.findall(
            "cac:CreditNoteLine", namespaces=UBL_NAMESPACES
        )
        line_sum = round_amount(
            sum((read_amount(line, "cbc:LineExtensionAmount") or ZERO for line in lines), ZERO)
        )
        if line_sum != line_extension:
            errors.append(
                f"[BR-CO-10] Sum of line amounts {line_sum} != LineExtensionAmount {line_extension}"
            )

        # BR-CO-13: no allowances or charges are modeled
        if tax_exclusive != line_extension:
            errors.append(
                f"[BR-CO-13] TaxExclusiveAmount {tax_exclusive} != LineExtensionAmount {line_extension}"
            )

        # BR-CO-15
        expected_inclusive = round_amount(tax_exclusive + tax_amount)
        if tax_inclusive != expected_inclusive:
            errors.append(
                f"[BR-CO-15] TaxInclusiveAmount {tax_inclusive} != "
                f"TaxExclusiveAmount + TaxAmount {expected_inclusive}"
            )

        # BR-CO-16: no prepaid amount or rounding
        if payable != tax_inclusive:
            errors.append(f"[BR-CO-16] PayableAmount {payable} != TaxInclusiveAmount {tax_inclusive}")

        # BR-CO-14: document tax equals sum of subtotals
        subtotals = tax_total.findall("cac:TaxSubtotal", namespaces=UBL_NAMESPACES)
        subtotal_tax = round_amount(
            sum((read_amount(s, "cbc:TaxAmount") or ZERO for s in subtotals), ZERO)
        )
        if subtotal_tax != tax_amount:
            errors.append(f"[BR-CO-14] Sum of subtotal tax {subtotal_tax} != TaxAmount {tax_amount}")

        for subtotal in subtotals:
            warnings.extend(self._check_subtotal_rate(subtotal))

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def _check_subtotal_rate(self, subtotal: etree._Element) -> list[str]:
        taxable = read_amount(subtotal, "cbc:TaxableAmount")
        tax = read_amount(subtotal, "cbc:TaxAmount")
        percent = read_amount(subtotal, "cac:TaxCategory/cbc:Percent")
        if None in (taxable, tax, percent):
            return ["TaxSubtotal is missing TaxableAmount, TaxAmount or Percent"]

        expected = round_amount(taxable * percent / Decimal("100"))
        if abs(expected - tax) > self.CATEGORY_TAX_TOLERANCE:
            code = subtotal.findtext("cac:TaxCategory/cbc:ID", namespaces=UBL_NAMESPACES)
            return [
                f"Subtotal {code} {percent}%: tax {tax} differs from "
                f"taxable x rate {expected}"
            ]
        return []
