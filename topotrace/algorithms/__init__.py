"""Graph algorithm engine.

Each algorithm takes a ``Graph`` snapshot (plus start/end ids where needed),
runs synchronously, and returns an ``AlgorithmResult`` with the final state
and the ordered step trace. ``run_algorithm`` dispatches by ``AlgorithmType``.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from topotrace.algorithms.adjacency import Neighbor, build_adjacency
from topotrace.algorithms.bipartite import check_bipartite
from topotrace.algorithms.euler import (
    EulerFeasibility,
    EulerKind,
    check_eulerian,
    fleury,
    hierholzer,
)
from topotrace.algorithms.max_flow import edmonds_karp
from topotrace.algorithms.mst import UnionFind, kruskal, prim
from topotrace.algorithms.spf import bellman_ford, dijkstra
from topotrace.algorithms.traversal import bfs, dfs
from topotrace.algorithms.types import (
    AlgorithmResult,
    AlgorithmStep,
    AlgorithmType,
    BipartiteSets,
    LinkRef,
    flow_key,
)
from topotrace.model.graph import Graph, NodeID

Runner = Callable[[Graph, Optional[NodeID], Optional[NodeID]], AlgorithmResult]

# Algorithms that cannot run without a start node
NEEDS_START = frozenset(
    {
        AlgorithmType.BFS,
        AlgorithmType.DFS,
        AlgorithmType.DIJKSTRA,
        AlgorithmType.BELLMAN_FORD,
    }
)

_RUNNERS: Dict[AlgorithmType, Runner] = {
    AlgorithmType.BFS: lambda g, start, end: bfs(g, start),
    AlgorithmType.DFS: lambda g, start, end: dfs(g, start),
    AlgorithmType.DIJKSTRA: dijkstra,
    AlgorithmType.BELLMAN_FORD: bellman_ford,
    AlgorithmType.PRIM: lambda g, start, end: prim(g),
    AlgorithmType.KRUSKAL: lambda g, start, end: kruskal(g),
    AlgorithmType.MAX_FLOW: edmonds_karp,
    AlgorithmType.FLEURY: lambda g, start, end: fleury(g),
    AlgorithmType.HIERHOLZER: lambda g, start, end: hierholzer(g),
    AlgorithmType.BIPARTITE: lambda g, start, end: check_bipartite(g),
}


def run_algorithm(
    algorithm: AlgorithmType | str,
    graph: Graph,
    start: Optional[NodeID] = None,
    end: Optional[NodeID] = None,
) -> AlgorithmResult:
    """Run one algorithm on ``graph``.

    Args:
        algorithm: Algorithm to run, as an ``AlgorithmType`` or its value.
        graph: Graph snapshot.
        start: Start node (traversal, shortest path) or source (max flow).
        end: Optional destination (shortest path) or sink (max flow).

    Returns:
        The algorithm's result.

    Raises:
        ValueError: If ``algorithm`` is unknown or a required start is missing.
        KeyError: If a start/end node is not in the graph.
    """
    kind = AlgorithmType(algorithm)
    if kind in NEEDS_START and start is None:
        raise ValueError(f"Algorithm '{kind.value}' requires a start node.")
    return _RUNNERS[kind](graph, start, end)


__all__ = [
    "AlgorithmResult",
    "AlgorithmStep",
    "AlgorithmType",
    "BipartiteSets",
    "EulerFeasibility",
    "EulerKind",
    "LinkRef",
    "Neighbor",
    "NEEDS_START",
    "UnionFind",
    "bellman_ford",
    "bfs",
    "build_adjacency",
    "check_bipartite",
    "check_eulerian",
    "dfs",
    "dijkstra",
    "edmonds_karp",
    "flow_key",
    "fleury",
    "hierholzer",
    "kruskal",
    "prim",
    "run_algorithm",
]
