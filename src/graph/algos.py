"""Graph algorithms for archguard-core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from model.symbols import SymbolModel

_WHITE = 0
_GREY = 1
_BLACK = 2


@dataclass(frozen=True)
class EdgeOrigin:
    """The first symbol reference that produced a module edge."""

    symbol: str
    reference: str


@dataclass(frozen=True)
class ModuleGraph:
    nodes: tuple[str, ...]
    edges: dict[tuple[str, str], EdgeOrigin] = field(default_factory=dict)

    def adjacency(self) -> dict[str, set[str]]:
        graph: dict[str, set[str]] = {node: set() for node in self.nodes}
        for source, target in self.edges:
            graph[source].add(target)
        return graph


def build_dependency_graph(model: SymbolModel) -> ModuleGraph:
    """Build the module graph from every cross-module symbol reference.

    Symbols are visited sorted by identifier and references in declared
    order, so the recorded origin of each edge is its first reference.
    Self-edges are dropped.
    """
    edges: dict[tuple[str, str], EdgeOrigin] = {}

    for symbol in model.sorted_symbols():
        for reference in symbol.references:
            target_module = model.module_of(reference)
            if target_module is None or target_module == symbol.module:
                continue
            edge = (symbol.module, target_module)
            if edge not in edges:
                edges[edge] = EdgeOrigin(symbol=symbol.id, reference=reference)

    nodes = tuple(module.id for module in model.sorted_modules())
    return ModuleGraph(nodes=nodes, edges=dict(sorted(edges.items())))


def compute_fan_stats(
    edges: list[tuple[str, str]],
) -> tuple[dict[str, int], dict[str, int]]:
    """Compute fan-in and fan-out statistics from edges."""
    fan_in: dict[str, int] = {}
    fan_out: dict[str, int] = {}

    for source, target in edges:
        fan_out[source] = fan_out.get(source, 0) + 1
        fan_in[target] = fan_in.get(target, 0) + 1

    return fan_in, fan_out


class _DfsState:
    """Mutable state container for the coloured depth-first search."""

    def __init__(self) -> None:
        self.color: dict[str, int] = {}
        self.path: list[str] = []
        self.seen: set[tuple[str, ...]] = set()
        self.cycles: list[list[str]] = []


def _canonical_cycle(cycle: list[str]) -> tuple[str, ...]:
    """Rotate a cycle so it starts at its smallest node."""
    start = cycle.index(min(cycle))
    return tuple(cycle[start:] + cycle[:start])


def _visit(node: str, graph: dict[str, set[str]], state: _DfsState) -> None:
    state.color[node] = _GREY
    state.path.append(node)

    for neighbor in sorted(graph.get(node, set())):
        if neighbor == node:
            continue
        color = state.color.get(neighbor, _WHITE)
        if color == _WHITE:
            _visit(neighbor, graph, state)
        elif color == _GREY:
            # Back edge: the grey path from neighbor to node closes a cycle.
            start = state.path.index(neighbor)
            cycle = _canonical_cycle(state.path[start:])
            if cycle not in state.seen:
                state.seen.add(cycle)
                state.cycles.append(list(cycle))

    state.path.pop()
    state.color[node] = _BLACK


def find_cycles(graph: dict[str, set[str]]) -> list[list[str]]:
    """Find cycles in a directed graph with a three-colour depth-first search.

    Args:
        graph: Dictionary representing the graph

    Only cycles closed by a back edge to a node on the current path are
    recorded. This is not a full enumeration of elementary cycles: with
    ``a -> b, a -> c, b -> c, c -> a`` only ``[a, b, c]`` is found, since
    ``c -> a`` closes ``[a, c]`` only after ``c`` is already black.

    Args:
        graph: Dictionary representing the graph

    Returns:
        Sorted list of distinct back-edge cycles. Each cycle is a list of
        nodes starting at its smallest node; self-loops are ignored.
    """
    state = _DfsState()

    for node in sorted(graph):
        if state.color.get(node, _WHITE) == _WHITE:
            _visit(node, graph, state)

    return sorted(state.cycles)


__all__ = [
    "EdgeOrigin",
    "ModuleGraph",
    "build_dependency_graph",
    "compute_fan_stats",
    "find_cycles",
]
