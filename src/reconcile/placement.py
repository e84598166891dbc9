"""Page and position placement of merged symbols."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from document.models import DEFAULT_SYMBOLS_PAGE_NAME

if TYPE_CHECKING:
    from document.models import Document, Page, SymbolMaster

logger = logging.getLogger(__name__)


def symbol_position(symbol: SymbolMaster) -> tuple[float, float]:
    return symbol.frame.origin


def get_symbol_page(document: Document, symbol: SymbolMaster) -> Page:
    """Return the page of ``document`` named like the page ``symbol`` is on now.

    The first page with that exact name wins; a blank page is created when
    there is none.
    """
    source_page = symbol.parent_page()
    name = source_page.name if source_page is not None else DEFAULT_SYMBOLS_PAGE_NAME
    page = document.find_page(name)
    if page is None:
        logger.debug("Creating page %r", name)
        page = document.add_blank_page(name)
    return page


def place_symbol(
    document: Document, symbol: SymbolMaster, position: tuple[float, float]
) -> Page:
    """Move ``symbol`` onto its target page with its origin set to ``position``.

    Width and height are kept. Returns the page the symbol now lives on.
    """
    page = get_symbol_page(document, symbol)
    symbol.frame.x, symbol.frame.y = position
    page.add_layers([symbol])
    return page


__all__ = ["get_symbol_page", "place_symbol", "symbol_position"]
