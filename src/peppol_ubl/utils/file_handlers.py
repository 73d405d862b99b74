"""Attachment file reading and content-based MIME detection."""

import logging
from pathlib import Path

import magic

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

# MIME codes accepted by Peppol for EmbeddedDocumentBinaryObject
ALLOWED_ATTACHMENT_MIME_TYPES: frozenset[str] = frozenset({
    "application/pdf",
    "image/png",
    "image/jpeg",
    "text/csv",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.oasis.opendocument.spreadsheet",
})


def detect_mime_type(file_content: bytes) -> str:
    """
    Detect MIME type from file content, never from the filename.

    Uses libmagic. Empty content yields ``application/octet-stream``.
    """
    if not file_content:
        return DEFAULT_MIME_TYPE

    return magic.from_buffer(file_content, mime=True) or DEFAULT_MIME_TYPE


def is_allowed_attachment_type(mime_type: str) -> bool:
    """Check if a MIME type may be embedded in a Peppol document."""
    return mime_type in ALLOWED_ATTACHMENT_MIME_TYPES


class FileHandler:
    """Read attachment files from disk."""

    def __init__(self, max_size_bytes: int = 10 * 1024 * 1024):
        self.max_size_bytes = max_size_bytes

    def check_size(self, content: bytes) -> None:
        """
        Raises:
            ValueError: If content exceeds max size
        """
        if len(content) > self.max_size_bytes:
            raise ValueError(
                f"File size {len(content)} bytes exceeds maximum "
                f"{self.max_size_bytes} bytes"
            )

    def read_path(self, path: str | Path) -> tuple[bytes, str]:
        """
        Read a file and detect its MIME type.

        Args:
            path: File to read

        Returns:
            Tuple of (file_content, mime_type)

        Raises:
            OSError: If the file cannot be read
            ValueError: If file exceeds max size
        """
        content = Path(path).read_bytes()
        self.check_size(content)

        mime_type = detect_mime_type(content)
        if not is_allowed_attachment_type(mime_type):
            logger.warning(f"Attachment {path} has MIME type {mime_type} not accepted by Peppol")
        return content, mime_type
