"""Design document model and Sketch file access."""

from document.errors import DocumentClosedError, DocumentError, DocumentFormatError
from document.metadata import MetadataStore
from document.models import (
    DEFAULT_SYMBOLS_PAGE_NAME,
    Document,
    Group,
    Layer,
    Page,
    Rect,
    SymbolInstance,
    SymbolMaster,
)
from document.sketch_file import (
    close_document,
    open_document,
    read_document,
    save_document,
)

__all__ = [
    "DEFAULT_SYMBOLS_PAGE_NAME",
    "Document",
    "DocumentClosedError",
    "DocumentError",
    "DocumentFormatError",
    "Group",
    "Layer",
    "MetadataStore",
    "Page",
    "Rect",
    "SymbolInstance",
    "SymbolMaster",
    "close_document",
    "open_document",
    "read_document",
    "save_document",
]
