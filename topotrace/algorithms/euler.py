"""Eulerian path and circuit construction (link coverage audit).

Feasibility is decided from degrees before any walk is attempted:

- Undirected: no odd-degree node gives a circuit, exactly two give an open
  path that starts at the first odd node, anything else is infeasible.
- Directed: all nodes balanced gives a circuit; exactly one node with
  ``out = in + 1`` (start) and one with ``in = out + 1`` (end), all others
  balanced, gives a path; anything else is infeasible.

In addition all links must belong to one (weakly) connected component.
Nodes without links are ignored, and a circuit starts at the first node that
has a link.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from topotrace.algorithms.adjacency import build_neighbor_ids
from topotrace.algorithms.paths import format_path
from topotrace.algorithms.trace import StepRecorder, precondition_failure
from topotrace.algorithms.types import AlgorithmResult, AlgorithmType, LinkRef
from topotrace.config import ENGINE_CONFIG
from topotrace.logging import get_logger
from topotrace.model.graph import Graph, NodeID

logger = get_logger(__name__)


class EulerKind(str, Enum):
    CIRCUIT = "circuit"
    PATH = "path"
    NONE = "none"


@dataclass(frozen=True)
class EulerFeasibility:
    """Outcome of the degree and connectivity check.

    Attributes:
        kind: Circuit, open path, or infeasible.
        start: Node the walk must start from; ``None`` when infeasible.
        message: Explanation suitable for a log line.
    """

    kind: EulerKind
    start: Optional[NodeID]
    message: str

    @property
    def feasible(self) -> bool:
        return self.kind is not EulerKind.NONE


def _links_connected(graph: Graph) -> bool:
    """True if every link lies in a single weakly connected component."""
    undirected = build_neighbor_ids(graph.as_undirected())
    active = [n for n in graph.node_ids() if undirected[n]]
    if not active:
        return True
    seen = {active[0]}
    stack = [active[0]]
    while stack:
        u = stack.pop()
        for v in undirected[u]:
            if v not in seen:
                seen.add(v)
                stack.append(v)
    return all(n in seen for n in active)


def check_eulerian(graph: Graph) -> EulerFeasibility:
    """Decide whether ``graph`` has an Eulerian circuit or path, and where to start."""
    if not graph.nodes:
        return EulerFeasibility(EulerKind.NONE, None, "the network has no nodes")

    node_ids = graph.node_ids()
    out_deg: Dict[NodeID, int] = {n: 0 for n in node_ids}
    in_deg: Dict[NodeID, int] = {n: 0 for n in node_ids}
    for link in graph.links:
        out_deg[link.source] += 1
        in_deg[link.target] += 1

    first_active = next(
        (n for n in node_ids if out_deg[n] or in_deg[n]), node_ids[0]
    )

    if graph.is_directed:
        starts = [n for n in node_ids if out_deg[n] == in_deg[n] + 1]
        ends = [n for n in node_ids if in_deg[n] == out_deg[n] + 1]
        unbalanced = [
            n
            for n in node_ids
            if out_deg[n] != in_deg[n] and n not in starts and n not in ends
        ]
        if unbalanced:
            return EulerFeasibility(
                EulerKind.NONE,
                None,
                "directed structure is unbalanced at "
                + ", ".join(graph.labels_of(unbalanced)),
            )
        if not starts and not ends:
            result = EulerFeasibility(
                EulerKind.CIRCUIT,
                first_active,
                "directed graph guarantees an Euler circuit (closed circuit)",
            )
        elif len(starts) == 1 and len(ends) == 1:
            result = EulerFeasibility(
                EulerKind.PATH,
                starts[0],
                "directed graph guarantees an Euler path (open path)",
            )
        else:
            return EulerFeasibility(
                EulerKind.NONE,
                None,
                "invalid number of start/end nodes for an Euler path",
            )
    else:
        # A self-loop adds 2 to its node's degree
        degree = {n: out_deg[n] + in_deg[n] for n in node_ids}
        odd = [n for n in node_ids if degree[n] % 2]
        if not odd:
            result = EulerFeasibility(
                EulerKind.CIRCUIT,
                first_active,
                "undirected graph guarantees an Euler circuit",
            )
        elif len(odd) == 2:
            result = EulerFeasibility(
                EulerKind.PATH, odd[0], "undirected graph guarantees an Euler path"
            )
        else:
            return EulerFeasibility(
                EulerKind.NONE,
                None,
                f"{len(odd)} nodes have odd degree, no covering walk exists",
            )

    if not _links_connected(graph):
        return EulerFeasibility(
            EulerKind.NONE, None, "links are split across disconnected segments"
        )
    return result


def _count_reachable(adj: Dict[NodeID, List[NodeID]], start: NodeID) -> int:
    seen = {start}
    stack = [start]
    while stack:
        u = stack.pop()
        for v in adj[u]:
            if v not in seen:
                seen.add(v)
                stack.append(v)
    return len(seen)


def _drop_link(links_left: Dict[NodeID, List[NodeID]], u: NodeID, v: NodeID) -> None:
    links_left[u].remove(v)
    links_left[v].remove(u)


def _is_safe_move(
    adj: Dict[NodeID, List[NodeID]],
    links_left: Dict[NodeID, List[NodeID]],
    u: NodeID,
    index: int,
) -> bool:
    """True if taking ``adj[u][index]`` does not shrink what ``u`` can reach.

    Reachability is counted on ``links_left``, the undirected view of the links
    not walked yet, so on directed graphs a link that is the only tie to a
    segment still counts as a bridge. The last remaining link of ``u`` is
    always safe.
    """
    if len(adj[u]) == 1:
        return True
    v = adj[u][index]
    before = _count_reachable(links_left, u)
    _drop_link(links_left, u, v)
    after = _count_reachable(links_left, u)
    links_left[u].append(v)
    links_left[v].append(u)
    return before <= after


def _reject(algorithm: AlgorithmType, name: str, check: EulerFeasibility) -> AlgorithmResult:
    return precondition_failure(algorithm, f"{name} error: {check.message}.")


def fleury(graph: Graph) -> AlgorithmResult:
    """Fleury's algorithm: walk from the feasible start, avoiding bridges.

    At each node the first remaining link that is not a bridge is taken; when
    every option is a bridge, the first one is taken. Moves are capped at
    ``ENGINE_CONFIG.fleury_max_moves(len(graph.links))``. Every step carries
    the walk so far as both ``path`` and ``visited``.
    """
    check = check_eulerian(graph)
    if not check.feasible:
        return _reject(AlgorithmType.FLEURY, "Fleury", check)
    assert check.start is not None

    rec = StepRecorder(AlgorithmType.FLEURY)
    directed = graph.is_directed
    adj = build_neighbor_ids(graph)
    links_left = build_neighbor_ids(graph.as_undirected())
    start = check.start
    walk: List[NodeID] = [start]

    rec.record(
        f"Network audit: {check.message}.",
        current_node=start,
        path=walk,
        visited=walk,
    )
    rec.record(
        f"Audit init: starting link coverage check (Fleury) at {graph.label_of(start)}.",
        current_node=start,
        visited=walk,
        path=walk,
    )

    max_moves = ENGINE_CONFIG.fleury_max_moves(len(graph.links))
    moves = 0
    u = start
    while adj[u] and moves < max_moves:
        moves += 1
        index = next(
            (i for i in range(len(adj[u])) if _is_safe_move(adj, links_left, u, i)),
            0,
        )
        v = adj[u].pop(index)
        if not directed:
            adj[v].remove(u)
        _drop_link(links_left, u, v)
        walk.append(v)
        rec.record(
            f"Audit step: crossing {graph.label_of(u)} -> {graph.label_of(v)}",
            current_node=v,
            current_link=LinkRef(u, v),
            path=walk,
            visited=walk,
        )
        u = v

    if len(walk) != len(graph.links) + 1:
        logger.debug(f"Fleury stopped after {moves} moves with links left over")
        return rec.fail(
            f"Fleury error: walk stopped after {len(walk) - 1} of "
            f"{len(graph.links)} links.",
            path=walk,
            visited=walk,
        )

    rec.record(f"Fleury result: {format_path(graph, walk)}", path=walk, visited=walk)
    logger.debug(f"Fleury covered {len(graph.links)} links from {start}")
    return rec.build(path=walk, visited=walk, euler_path=walk)


def hierholzer(graph: Graph) -> AlgorithmResult:
    """Hierholzer's algorithm: iterative stack-based circuit extraction.

    While the stack top has an unused adjacency entry, the last entry is
    consumed (with its mirror on undirected graphs) and the neighbor pushed;
    otherwise the top is popped into the circuit. The reversed pop order is
    the walk. Steps carry the circuit recorded so far as ``visited``.
    """
    check = check_eulerian(graph)
    if not check.feasible:
        return _reject(AlgorithmType.HIERHOLZER, "Hierholzer", check)
    assert check.start is not None

    rec = StepRecorder(AlgorithmType.HIERHOLZER)
    directed = graph.is_directed
    adj = build_neighbor_ids(graph)
    start = check.start
    stack: List[NodeID] = [start]
    circuit: List[NodeID] = []

    rec.record(
        f"Network audit: {check.message}.", current_node=start, visited=circuit
    )
    rec.record(
        f"Circuit audit: tracing the circuit from {graph.label_of(start)}",
        current_node=start,
        visited=circuit,
    )

    while stack:
        u = stack[-1]
        if adj[u]:
            v = adj[u].pop()
            if not directed:
                adj[v].remove(u)
            stack.append(v)
            rec.record(
                f"  -> Forward: {graph.label_of(u)} -> {graph.label_of(v)}",
                current_node=v,
                current_link=LinkRef(u, v),
                path=stack,
                visited=circuit,
            )
        else:
            circuit.append(stack.pop())
            rec.record(
                f"  <- Backtrack: recording {graph.label_of(u)} in the circuit",
                current_node=u,
                visited=circuit,
            )

    walk = circuit[::-1]
    rec.record(f"Hierholzer result: {format_path(graph, walk)}", path=walk, visited=walk)
    logger.debug(f"Hierholzer covered {len(graph.links)} links from {start}")
    return rec.build(path=walk, visited=walk, euler_path=walk)
