"""Exceptions raised by the symbol import pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class SymbolImportError(Exception):
    """Base exception for symbol import errors."""


class ImportFileError(SymbolImportError):
    """Raised when a document taking part in an import cannot be opened."""


class SymbolCycleError(SymbolImportError):
    """Raised when symbols contain each other through their nesting."""

    def __init__(self, members: Sequence[str]) -> None:
        self.members = tuple(members)
        super().__init__(f"Symbols nest each other: {', '.join(self.members)}")


__all__ = ["ImportFileError", "SymbolCycleError", "SymbolImportError"]
