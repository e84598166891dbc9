"""Symbol trees: each source symbol annotated with its key and nested symbols."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from reconcile.discover import find_nested_symbols
from reconcile.errors import SymbolCycleError
from reconcile.keys import MatchMode, resolve_key

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from document.models import SymbolMaster


@dataclass(eq=False)
class SymbolNode:
    """One symbol taking part in an import, plus the symbols nested in it."""

    key: str
    symbol: SymbolMaster = field(repr=False)
    nested_symbols: list[SymbolNode] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.symbol.name

    def iter_nested(self) -> Iterator[SymbolNode]:
        """Yield every node below this one, depth-first pre-order."""
        for child in self.nested_symbols:
            yield child
            yield from child.iter_nested()


def map_symbols(
    symbols: Sequence[SymbolMaster],
    mode: MatchMode = MatchMode.ID,
    *,
    _chain: tuple[SymbolMaster, ...] = (),
) -> list[SymbolNode]:
    """Map symbols to :class:`SymbolNode` trees, keeping input order at every level.

    Raises:
        SymbolCycleError: If a symbol is nested (directly or through other
            symbols) inside itself.
    """
    nodes: list[SymbolNode] = []
    for symbol in symbols:
        if any(symbol is ancestor for ancestor in _chain):
            start = next(i for i, s in enumerate(_chain) if s is symbol)
            names = [s.name for s in _chain[start:]]
            raise SymbolCycleError(names)
        nested = map_symbols(
            find_nested_symbols(symbol), mode, _chain=(*_chain, symbol)
        )
        nodes.append(
            SymbolNode(key=resolve_key(symbol, mode), symbol=symbol, nested_symbols=nested)
        )
    return nodes


def contains_symbol(node: SymbolNode, key: str) -> bool:
    """Return True if a symbol with ``key`` is nested anywhere below ``node``."""
    return any(
        child.key == key or contains_symbol(child, key)
        for child in node.nested_symbols
    )


__all__ = ["SymbolNode", "contains_symbol", "map_symbols"]
