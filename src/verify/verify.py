"""Symbol relationship checks for a single document."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from document.models import SymbolInstance
from graph.algos import build_dependency_graph, find_cycles
from reconcile.discover import find_nested_symbols
from reconcile.keys import MatchMode, resolve_key

if TYPE_CHECKING:
    from document.models import Document


@dataclass(frozen=True)
class MissingSymbol:
    instance: str
    symbol_id: str


@dataclass(frozen=True)
class GraphCheckResult:
    ok: bool
    cycles: tuple[tuple[str, ...], ...] = field(default_factory=tuple)
    missing: tuple[MissingSymbol, ...] = field(default_factory=tuple)
    duplicate_keys: tuple[str, ...] = field(default_factory=tuple)


def check_symbol_graph(
    document: Document, mode: MatchMode = MatchMode.ID
) -> GraphCheckResult:
    """Check the symbol relationships an import depends on.

    Reports symbols that nest each other (an import of such a document
    cannot order them), instances whose master is neither in the document
    nor among its library symbols, and keys shared by several symbols under
    ``mode`` (an import would let the later one replace the earlier).

    Args:
        document: Document to inspect.
        mode: Matching mode whose keys are checked for duplicates.

    Returns:
        GraphCheckResult with ok status and sorted findings.
    """
    symbols = document.all_symbols()

    graph = build_dependency_graph(
        (symbol.symbol_id, nested.symbol_id)
        for symbol in symbols
        for nested in find_nested_symbols(symbol)
    )
    names = {symbol.symbol_id: symbol.name for symbol in symbols}
    cycles = tuple(
        tuple(names.get(symbol_id, symbol_id) for symbol_id in cycle)
        for cycle in find_cycles(graph)
    )

    library_ids = document.foreign_symbol_ids()
    missing = sorted(
        {
            MissingSymbol(instance=layer.name, symbol_id=layer.symbol_id)
            for layer in document.iter_layers()
            if isinstance(layer, SymbolInstance)
            and layer.master is None
            and layer.symbol_id not in library_ids
        },
        key=lambda item: (item.symbol_id, item.instance),
    )

    counts = Counter(resolve_key(symbol, mode) for symbol in symbols)
    duplicate_keys = sorted(key for key, count in counts.items() if count > 1)

    ok = not cycles and not missing and not duplicate_keys
    return GraphCheckResult(
        ok=ok,
        cycles=cycles,
        missing=tuple(missing),
        duplicate_keys=tuple(duplicate_keys),
    )


__all__ = ["GraphCheckResult", "MissingSymbol", "check_symbol_graph"]
