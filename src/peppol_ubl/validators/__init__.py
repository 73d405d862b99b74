"""Self-checks for generated UBL documents."""

from .base import ValidationResult
from .document_validator import validate_document
from .math_validator import MathValidator
from .schema_validator import SchemaValidator
from .tax_validator import TaxValidator

__all__ = [
    "MathValidator",
    "SchemaValidator",
    "TaxValidator",
    "ValidationResult",
    "validate_document",
]
