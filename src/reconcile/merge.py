"""Merging ordered source symbols into a target document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from reconcile.keys import (
    IMPORT_ID_KEY,
    IMPORT_NAME_KEY,
    MatchMode,
    import_metadata_key,
)
from reconcile.placement import place_symbol, symbol_position
from reconcile.relink import relink_instances

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from document.metadata import MetadataStore
    from document.models import Document, SymbolMaster
    from reconcile.tree import SymbolNode

logger = logging.getLogger(__name__)

MergeAction = Literal["added", "updated"]


@dataclass(frozen=True)
class MergeEntry:
    """Outcome of merging one symbol."""

    key: str
    name: str
    action: MergeAction
    page: str
    relinked: int = 0


@dataclass
class MergeResult:
    """Counts and per-symbol outcomes of one merge run."""

    added: int = 0
    updated: int = 0
    entries: list[MergeEntry] = field(default_factory=list)

    def record(self, entry: MergeEntry) -> None:
        if entry.action == "added":
            self.added += 1
        else:
            self.updated += 1
        self.entries.append(entry)


def stamp_import_identity(symbol: SymbolMaster, store: MetadataStore) -> None:
    """Store the symbol's id and name so later imports in either mode find it."""
    store.set_value(symbol, IMPORT_ID_KEY, symbol.symbol_id)
    store.set_value(symbol, IMPORT_NAME_KEY, symbol.name)


def find_existing_symbol(
    symbols: Iterable[SymbolMaster],
    key: str,
    *,
    mode: MatchMode,
    store: MetadataStore,
) -> SymbolMaster | None:
    """Return the first symbol whose stored import key for ``mode`` equals ``key``."""
    metadata_key = import_metadata_key(mode)
    for symbol in symbols:
        if store.get_value(symbol, metadata_key) == key:
            return symbol
    return None


def add_symbol(
    document: Document, node: SymbolNode, *, store: MetadataStore
) -> MergeEntry:
    """Insert a new symbol at its own position."""
    stamp_import_identity(node.symbol, store)
    page = place_symbol(document, node.symbol, symbol_position(node.symbol))
    logger.debug("Added symbol %r (%s) on page %r", node.name, node.key, page.name)
    return MergeEntry(key=node.key, name=node.name, action="added", page=page.name)


def update_symbol(
    document: Document,
    existing: SymbolMaster,
    node: SymbolNode,
    *,
    store: MetadataStore,
) -> MergeEntry:
    """Replace ``existing`` with the incoming symbol and relink its instances."""
    stamp_import_identity(node.symbol, store)
    page = place_symbol(document, node.symbol, symbol_position(existing))
    relinked = relink_instances(document, existing, node.symbol)
    existing.remove_from_parent()
    logger.debug(
        "Replaced symbol %r (%s) on page %r, relinked %d instance(s)",
        node.name,
        node.key,
        page.name,
        relinked,
    )
    return MergeEntry(
        key=node.key,
        name=node.name,
        action="updated",
        page=page.name,
        relinked=relinked,
    )


def add_symbols(
    document: Document,
    nodes: Sequence[SymbolNode],
    *,
    mode: MatchMode,
    store: MetadataStore,
) -> MergeResult:
    """Merge ``nodes`` into ``document`` strictly in the given order.

    Nodes are expected in the order produced by
    :func:`reconcile.ordering.sort_symbols`; nested symbols are merged on
    their own turn, never through their container.
    """
    result = MergeResult()
    for node in nodes:
        existing = find_existing_symbol(
            document.all_symbols(), node.key, mode=mode, store=store
        )
        if existing is not None:
            result.record(update_symbol(document, existing, node, store=store))
        else:
            result.record(add_symbol(document, node, store=store))
    return result


__all__ = [
    "MergeAction",
    "MergeEntry",
    "MergeResult",
    "add_symbol",
    "add_symbols",
    "find_existing_symbol",
    "stamp_import_identity",
    "update_symbol",
]
