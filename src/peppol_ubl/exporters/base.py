"""Base exporter interface and UBL element helpers."""

from abc import ABC, abstractmethod
from datetime import date
from xml.etree.ElementTree import Element, SubElement

from ..core.models import BusinessDocument

UBL_CAC_NAMESPACE = "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2"
UBL_CBC_NAMESPACE = "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2"


def add_cbc(
    parent: Element,
    tag: str,
    text: str,
    currency: str | None = None,
    unit: str | None = None,
    scheme_id: str | None = None,
) -> Element:
    """Helper to add CommonBasicComponents."""
    elem = SubElement(parent, f"cbc:{tag}")
    elem.text = text
    if currency:
        elem.set("currencyID", currency)
    if unit:
        elem.set("unitCode", unit)
    if scheme_id:
        elem.set("schemeID", scheme_id)
    return elem


def add_cac(parent: Element, tag: str) -> Element:
    """Helper to add CommonAggregateComponents."""
    return SubElement(parent, f"cac:{tag}")


class BaseExporter(ABC):
    """Abstract base class for document exporters."""

    @abstractmethod
    def export(self, document: BusinessDocument, issue_date: date | None = None) -> bytes:
        """
        Export business document to target format.

        Args:
            document: Invoice or credit note to export
            issue_date: Issue date, defaults to the exporter's clock

        Returns:
            Serialized document
        """
        pass

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the name of the export format."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for the export format."""
        pass

    @property
    @abstractmethod
    def mime_type(self) -> str:
        """Return the MIME type for the export format."""
        pass
