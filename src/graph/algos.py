"""Graph algorithms for symbol containment graphs."""

from __future__ import annotations

import heapq
from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def build_dependency_graph(edges: Iterable[tuple[str, str]]) -> dict[str, set[str]]:
    """Build a dependency graph from ``(container, contained)`` pairs.

    Args:
        edges: Pairs of node names; the first depends on the second

    Returns:
        Dictionary mapping every node (including pure dependencies) to the
        set of nodes it depends on
    """
    graph: dict[str, set[str]] = defaultdict(set)

    for source, target in edges:
        graph[source].add(target)
        graph.setdefault(target, set())

    return dict(graph)


def stable_topological_order(depends_on: dict[int, set[int]]) -> list[int]:
    """Order nodes so that every node follows the nodes it depends on.

    Kahn's algorithm over integer node ids. Whenever several nodes are ready
    the lowest id is emitted first, so an input that already satisfies every
    dependency comes back unchanged. Nodes that sit on (or behind) a cycle
    are left out of the result.

    Args:
        depends_on: Mapping of node -> nodes that must precede it

    Returns:
        Node ids in dependency-safe order
    """
    pending = {node: len(deps) for node, deps in depends_on.items()}
    dependents: dict[int, set[int]] = defaultdict(set)
    for node, deps in depends_on.items():
        for dep in deps:
            dependents[dep].add(node)

    ready = [node for node, count in pending.items() if count == 0]
    heapq.heapify(ready)

    order: list[int] = []
    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for dependent in dependents.get(node, ()):
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, dependent)

    return order


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _strongconnect(node: str, graph: dict[str, set[str]], state: _TarjanState) -> None:
    """Process a node in Tarjan's algorithm."""
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)

    for neighbor in sorted(graph.get(node, set())):
        if neighbor not in state.indices:
            _strongconnect(neighbor, graph, state)
            state.low_link[node] = min(state.low_link[node], state.low_link[neighbor])
        elif neighbor in state.on_stack:
            state.low_link[node] = min(state.low_link[node], state.indices[neighbor])

    if state.low_link[node] == state.indices[node]:
        scc = _extract_scc(state, node)
        if len(scc) > 1 or node in graph.get(node, set()):
            state.sccs.append(scc)


def find_cycles(graph: dict[str, set[str]]) -> list[list[str]]:
    """Find cycles in a directed graph using Tarjan's algorithm.

    Args:
        graph: Dictionary representing the graph

    Returns:
        List of cycles, each a sorted list of nodes, in sorted order
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return sorted(sorted(scc) for scc in state.sccs)


__all__ = [
    "build_dependency_graph",
    "find_cycles",
    "stable_topological_order",
]
