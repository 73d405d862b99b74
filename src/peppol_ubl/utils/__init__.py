"""Utility modules."""

from .file_handlers import FileHandler, detect_mime_type, is_allowed_attachment_type

__all__ = ["FileHandler", "detect_mime_type", "is_allowed_attachment_type"]
