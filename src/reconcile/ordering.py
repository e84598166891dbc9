"""Dependency-safe ordering of symbols before merging.

A symbol that contains another symbol (directly or transitively) must be
merged after the symbol it contains.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from graph.algos import build_dependency_graph, find_cycles, stable_topological_order
from reconcile.errors import SymbolCycleError
from reconcile.tree import contains_symbol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reconcile.tree import SymbolNode


def compare_nodes(a: SymbolNode, b: SymbolNode) -> int:
    """Three-way containment comparison.

    Returns 1 when ``a`` contains ``b`` (``a`` sorts after ``b``), -1 when
    ``b`` contains ``a`` and 0 when neither contains the other.
    """
    if contains_symbol(a, b.key):
        return 1
    if contains_symbol(b, a.key):
        return -1
    return 0


def _dependency_edges(depends_on: dict[int, set[int]]) -> list[tuple[str, str]]:
    return [(str(node), str(dep)) for node, deps in depends_on.items() for dep in deps]


def sort_symbols(nodes: Sequence[SymbolNode]) -> list[SymbolNode]:
    """Order nodes so each comes after every node whose symbol it contains.

    Containment is tracked by symbol object, so symbols that share a key
    under name matching do not depend on each other.
    Unrelated nodes keep their input order.

    Raises:
        SymbolCycleError: If the nodes contain each other.
    """
    indices_by_symbol: dict[int, list[int]] = defaultdict(list)
    for index, node in enumerate(nodes):
        indices_by_symbol[id(node.symbol)].append(index)

    depends_on: dict[int, set[int]] = {}
    for index, node in enumerate(nodes):
        deps: set[int] = set()
        for nested in node.iter_nested():
            deps.update(
                i for i in indices_by_symbol.get(id(nested.symbol), ()) if i != index
            )
        depends_on[index] = deps

    order = stable_topological_order(depends_on)
    if len(order) < len(nodes):
        cycles = find_cycles(build_dependency_graph(_dependency_edges(depends_on)))
        if cycles:
            raise SymbolCycleError(sorted({nodes[int(i)].key for i in cycles[0]}))
        placed = set(order)
        raise SymbolCycleError(
            sorted({nodes[i].key for i in range(len(nodes)) if i not in placed})
        )

    return [nodes[index] for index in order]


__all__ = ["compare_nodes", "sort_symbols"]
