"""Errors raised while generating UBL documents."""


class DocumentGenerationError(Exception):
    """Base class for all generation failures."""


class MalformedPeppolIdentifierError(DocumentGenerationError, ValueError):
    """Compound Peppol identifier cannot be split into scheme and value."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"malformed Peppol identifier {identifier!r}: "
            "expected '<4-char scheme>:<value>'"
        )


class AttachmentError(DocumentGenerationError):
    """Attachment could not be read or embedded."""

    def __init__(self, detail: str):
        super().__init__(f"add attachment failed: {detail}")


class SerializationError(DocumentGenerationError):
    """The XML encoder rejected the assembled tree."""

    def __init__(self, detail: str):
        super().__init__(f"xml marshal failed: {detail}")
