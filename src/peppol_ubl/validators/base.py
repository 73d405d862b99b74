"""Shared validation result and UBL parsing helpers."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from lxml import etree

UBL_NAMESPACES: dict[str, str] = {
    "cac": "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2",
    "cbc": "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2",
}


@dataclass
class ValidationResult:
    """Result of validation check."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge two validation results."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )


def parse_ubl(xml_bytes: bytes) -> etree._Element:
    """
    Parse document bytes without resolving entities or touching the network.

    Raises:
        etree.XMLSyntaxError: If the bytes are not well-formed XML
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.fromstring(xml_bytes, parser=parser)


def read_amount(element: etree._Element, path: str) -> Decimal | None:
    """Read a decimal child value, ``None`` if missing or unparsable."""
    text = element.findtext(path, namespaces=UBL_NAMESPACES)
    if text is None:
        return None
    try:
        return Decimal(text.strip())
    except InvalidOperation:
        return None
