"""Embedding of binary attachments as document references."""

import base64
import logging
from pathlib import Path
from xml.etree.ElementTree import Element

from ..config import Settings, get_settings
from ..core.errors import AttachmentError
from ..utils.file_handlers import FileHandler
from .base import add_cac, add_cbc

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


def embed_attachment(
    payload: bytes,
    mime_code: str,
    filename: str,
    description: str,
    document_id: str,
    settings: Settings | None = None,
) -> list[Element]:
    """
    Build the two AdditionalDocumentReference elements for an attachment.

    The first one classifies the document set, the second carries the
    base64 encoded payload.

    Raises:
        AttachmentError: If the payload exceeds the configured size limit
    """
    settings = settings or get_settings()
    if len(payload) > settings.max_attachment_size_bytes:
        raise AttachmentError(
            f"{filename or 'payload'} is {len(payload)} bytes, "
            f"limit is {settings.max_attachment_size_bytes}"
        )

    classification = Element("cac:AdditionalDocumentReference")
    add_cbc(classification, "ID", settings.attachment_classification_id)
    add_cbc(classification, "DocumentDescription", settings.attachment_classification_description)

    reference = Element("cac:AdditionalDocumentReference")
    add_cbc(reference, "ID", document_id)
    if description:
        add_cbc(reference, "DocumentDescription", description)

    attachment = add_cac(reference, "Attachment")
    binary = add_cbc(
        attachment,
        "EmbeddedDocumentBinaryObject",
        base64.b64encode(payload).decode("ascii"),
    )
    binary.set("mimeCode", mime_code)
    binary.set("filename", filename or f"{document_id}.pdf")

    return [classification, reference]


def embed_attachment_file(
    path: str | Path,
    description: str,
    document_id: str,
    settings: Settings | None = None,
) -> list[Element]:
    """
    Read a file, sniff its MIME type from content and embed it.

    Raises:
        AttachmentError: If the file cannot be read or is too large
    """
    settings = settings or get_settings()
    handler = FileHandler(settings.max_attachment_size_bytes)

    try:
        content, mime_type = handler.read_path(path)
    except OSError as e:
        logger.warning(f"Could not read attachment {path}: {e}")
        raise AttachmentError(str(e)) from e
    except ValueError as e:
        raise AttachmentError(str(e)) from e

    return embed_attachment(
        content,
        mime_type,
        Path(path).name,
        description,
        document_id,
        settings=settings,
    )
