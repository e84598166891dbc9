"""Symbol identity under the two matching modes."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from document.models import SymbolMaster

IMPORT_ID_KEY = "import_id"
IMPORT_NAME_KEY = "import_name"


class MatchMode(str, Enum):
    """How symbols from two documents are recognized as the same symbol."""

    ID = "id"
    NAME = "name"


def resolve_key(symbol: SymbolMaster, mode: MatchMode) -> str:
    """Return the symbol's identifier or display name, unnormalized."""
    if mode is MatchMode.NAME:
        return symbol.name
    return symbol.symbol_id


def import_metadata_key(mode: MatchMode) -> str:
    """Metadata key that holds a previously imported symbol's key for ``mode``."""
    return f"import_{MatchMode(mode).value}"


__all__ = [
    "IMPORT_ID_KEY",
    "IMPORT_NAME_KEY",
    "MatchMode",
    "import_metadata_key",
    "resolve_key",
]
