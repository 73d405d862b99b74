"""Run every self-check over a generated document."""

import logging

from lxml import etree

from ..config import Settings, get_settings
from .base import ValidationResult, parse_ubl
from .math_validator import MathValidator
from .schema_validator import SchemaValidator
from .tax_validator import TaxValidator

logger = logging.getLogger(__name__)


def validate_document(xml_bytes: bytes, settings: Settings | None = None) -> ValidationResult:
    """
    Validate generated UBL bytes for structure, arithmetic and tax rules.

    A malformed document only reports the parse error.
    """
    settings = settings or get_settings()
    schema_validator = SchemaValidator(
        invoice_xsd=settings.invoice_xsd_path,
        credit_note_xsd=settings.credit_note_xsd_path,
    )

    result = schema_validator.validate(xml_bytes)
    try:
        parse_ubl(xml_bytes)
    except etree.XMLSyntaxError:
        logger.warning("Validation skipped: document is not well-formed")
        return result

    result = result.merge(MathValidator().validate(xml_bytes))
    result = result.merge(TaxValidator().validate(xml_bytes))

    if result.is_valid:
        logger.debug(f"Document valid with {len(result.warnings)} warnings")
    else:
        logger.info(f"Document failed validation with {len(result.errors)} errors")
    return result
