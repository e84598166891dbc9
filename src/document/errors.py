"""Exceptions raised by the document layer."""

from __future__ import annotations


class DocumentError(Exception):
    """Base exception for document-related errors."""


class DocumentFormatError(DocumentError):
    """Raised when a document archive or one of its records cannot be parsed."""


class DocumentClosedError(DocumentError):
    """Raised when a closed document is asked for its contents."""


__all__ = ["DocumentClosedError", "DocumentError", "DocumentFormatError"]
