"""Document generation pipeline."""

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable

from ..config import Settings, get_settings
from ..exporters.ubl_exporter import UBLDocumentExporter, get_exporter
from ..validators import ValidationResult, validate_document
from .models import BusinessDocument, DocumentType

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Generated document bytes and, when requested, their self-check result."""

    content: bytes
    filename: str
    media_type: str
    validation: ValidationResult | None = None


class DocumentPipeline:
    """
    Main document generation pipeline.

    Orchestrates: Exporter selection -> Generation -> Validation -> Result
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], date] = date.today,
    ):
        self.settings = settings or get_settings()
        self.clock = clock
        self._exporters: dict[DocumentType, UBLDocumentExporter] = {}

    def exporter_for(self, document: BusinessDocument) -> UBLDocumentExporter:
        """Return the (cached) exporter for the document's kind."""
        document_type = DocumentType(document.kind)
        if document_type not in self._exporters:
            self._exporters[document_type] = get_exporter(
                document_type,
                settings=self.settings,
                clock=self.clock,
            )
        return self._exporters[document_type]

    def generate(
        self,
        document: BusinessDocument,
        issue_date: date | None = None,
        validate: bool | None = None,
    ) -> GenerationResult:
        """
        Generate a UBL document.

        Args:
            document: Invoice or CreditNote input
            issue_date: Issue date; defaults to the pipeline clock
            validate: Run the self-checks; defaults to ``settings.validate_output``

        Returns:
            GenerationResult with the XML bytes
        """
        start_time = time.time()
        exporter = self.exporter_for(document)

        content = exporter.export(document, issue_date=issue_date)

        if validate is None:
            validate = self.settings.validate_output

        validation = None
        if validate:
            validation = validate_document(content, settings=self.settings)
            if not validation.is_valid:
                logger.warning(
                    f"{document.id} failed self-check: {'; '.join(validation.errors)}"
                )

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Generated {document.id} ({len(content)} bytes) in {elapsed_ms}ms")

        return GenerationResult(
            content=content,
            filename=f"{document.id}.{exporter.file_extension}",
            media_type=exporter.mime_type,
            validation=validation,
        )
