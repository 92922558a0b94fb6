"""Shortest-path-first algorithms with step recording.

Dijkstra models link-state routing (OSPF) and rejects negative metrics.
Bellman-Ford models distance-vector routing (RIP): it accepts negative metrics
on directed graphs and reports negative cycles as a fatal condition.

Notes:
    Dijkstra reselects the next node to settle by a linear scan over unsettled
    nodes in graph order, so ties resolve toward the node listed first. The
    graphs handled here are small enough that a heap buys nothing and the scan
    keeps the trace order obvious.
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

from topotrace.algorithms.adjacency import build_adjacency
from topotrace.algorithms.paths import (
    Predecessors,
    format_number,
    format_path,
    reconstruct_path,
    tree_links,
)
from topotrace.algorithms.trace import StepRecorder, precondition_failure
from topotrace.algorithms.types import AlgorithmResult, AlgorithmType, LinkRef
from topotrace.logging import get_logger
from topotrace.model.graph import Graph, NodeID

logger = get_logger(__name__)

Cost = float


def _check_endpoints(graph: Graph, start: NodeID, end: Optional[NodeID]) -> None:
    if not graph.has_node(start):
        raise KeyError(f"Source node '{start}' is not in the graph.")
    if end is not None and not graph.has_node(end):
        raise KeyError(f"Destination node '{end}' is not in the graph.")


def _finish(
    rec: StepRecorder,
    graph: Graph,
    distances: Dict[NodeID, Cost],
    previous: Predecessors,
    visited: List[NodeID],
    end: Optional[NodeID],
    protocol: str,
) -> AlgorithmResult:
    """Build the terminal steps and result shared by Dijkstra and Bellman-Ford."""
    unreachable = [n for n in graph.node_ids() if distances[n] == math.inf]

    if end is not None:
        if distances[end] == math.inf:
            rec.record(
                f"Destination unreachable: {graph.label_of(end)} does not answer, "
                "the network is partitioned.",
                visited=visited,
            )
            return rec.build(
                visited=visited, distances=distances, unreachable=unreachable
            )
        path = reconstruct_path(previous, end)
        rec.record(
            f"{protocol} route found: {format_path(graph, path)} "
            f"(total metric {format_number(distances[end])})",
            visited=visited,
            path=path,
        )
        return rec.build(
            path=path, visited=visited, distances=distances, unreachable=unreachable
        )

    links = tree_links(graph, previous)
    rec.record(f"=== {protocol} routing table ===", visited=visited, mst_links=links)
    for node_id in graph.node_ids():
        if distances[node_id] != math.inf:
            rec.record(
                f"Net {graph.label_of(node_id)}: metric {format_number(distances[node_id])}",
                visited=visited,
                mst_links=links,
            )
    if unreachable:
        rec.record(
            "WARNING: unreachable subnets: " + ", ".join(graph.labels_of(unreachable)),
            visited=visited,
            mst_links=links,
        )
    rec.record(
        f"{protocol} complete: showing the shortest path tree.",
        visited=visited,
        mst_links=links,
    )
    return rec.build(
        mst_links=links, visited=visited, distances=distances, unreachable=unreachable
    )


def dijkstra(
    graph: Graph, start: NodeID, end: Optional[NodeID] = None
) -> AlgorithmResult:
    """Dijkstra's shortest paths from ``start``.

    Args:
        graph: Graph snapshot.
        start: Source node.
        end: Optional destination. When given, the run stops once it is settled
            and the result carries ``path``; otherwise the result carries the
            shortest-path tree in ``mst_links``.

    Returns:
        Result with ``distances`` for every node. A graph with any negative
        weight is rejected with a single explanatory step.

    Raises:
        KeyError: If ``start`` or ``end`` is not in the graph.
    """
    _check_endpoints(graph, start, end)
    if any(link.weight < 0 for link in graph.links):
        return precondition_failure(
            AlgorithmType.DIJKSTRA,
            "OSPF error: negative metric detected. Dijkstra requires non-negative "
            "weights; use Bellman-Ford (RIP) instead.",
        )

    rec = StepRecorder(AlgorithmType.DIJKSTRA)
    adj = build_adjacency(graph)
    distances: Dict[NodeID, Cost] = {n: math.inf for n in graph.node_ids()}
    previous: Predecessors = {n: None for n in graph.node_ids()}
    distances[start] = 0.0
    unsettled = graph.node_ids()
    visited: List[NodeID] = []

    if end is not None:
        init_log = (
            f"OSPF init: computing route from {graph.label_of(start)} "
            f"to {graph.label_of(end)}."
        )
    else:
        init_log = (
            f"OSPF init: flooding LSAs, shortest paths from {graph.label_of(start)} "
            "to the whole network."
        )
    rec.record(init_log, current_node=start, visited=visited)

    while unsettled:
        u = min(unsettled, key=lambda n: distances[n])
        if distances[u] == math.inf:
            break
        unsettled.remove(u)
        visited.append(u)
        rec.record(
            f"Processing router {graph.label_of(u)} "
            f"(accumulated metric {format_number(distances[u])})",
            current_node=u,
            visited=visited,
            traversed_edges=tree_links(graph, previous),
        )

        if u == end:
            rec.record(
                f"Reached destination {graph.label_of(u)}. Routing finished.",
                current_node=u,
                visited=visited,
                traversed_edges=tree_links(graph, previous),
            )
            break

        for nbr in adj[u]:
            alt = distances[u] + nbr.weight
            if alt < distances[nbr.node]:
                distances[nbr.node] = alt
                previous[nbr.node] = (u, nbr.weight)
                rec.record(
                    f"  -> Route update: {graph.label_of(nbr.node)} via "
                    f"{graph.label_of(u)} (metric {format_number(alt)})",
                    current_node=u,
                    current_link=LinkRef(u, nbr.node),
                    visited=visited,
                    traversed_edges=tree_links(graph, previous),
                )

    logger.debug(
        f"Dijkstra from {start} settled {len(visited)} of {len(graph.nodes)} nodes"
    )
    return _finish(rec, graph, distances, previous, visited, end, "OSPF")


def _directed_edges(graph: Graph) -> List[Tuple[NodeID, NodeID, float]]:
    edges = []
    for link in graph.links:
        edges.append((link.source, link.target, link.weight))
        if not graph.is_directed:
            edges.append((link.target, link.source, link.weight))
    return edges


def bellman_ford(
    graph: Graph, start: NodeID, end: Optional[NodeID] = None
) -> AlgorithmResult:
    """Bellman-Ford shortest paths from ``start``.

    Relaxes every oriented edge for up to ``|V| - 1`` rounds, stopping early
    once a round changes nothing, then runs one detection pass. Any edge that
    still improves a distance means a negative cycle is reachable, which is
    fatal: the result carries no path or tree.

    An undirected graph with a negative weight is rejected up front, since
    such a link forms a negative cycle with itself.

    Raises:
        KeyError: If ``start`` or ``end`` is not in the graph.
    """
    _check_endpoints(graph, start, end)
    if not graph.is_directed and any(link.weight < 0 for link in graph.links):
        return precondition_failure(
            AlgorithmType.BELLMAN_FORD,
            "RIP error: an undirected link with negative metric forms a negative "
            "cycle (routing loop). The protocol cannot converge.",
        )

    rec = StepRecorder(AlgorithmType.BELLMAN_FORD)
    node_ids = graph.node_ids()
    distances: Dict[NodeID, Cost] = {n: math.inf for n in node_ids}
    previous: Predecessors = {n: None for n in node_ids}
    distances[start] = 0.0
    edges = _directed_edges(graph)
    rounds = len(node_ids) - 1

    def reached() -> List[NodeID]:
        return [n for n in node_ids if distances[n] != math.inf]

    rec.record(
        f"RIP start: initializing distance vectors. Source: {graph.label_of(start)}",
        current_node=start,
        visited=reached(),
    )

    for round_no in range(1, rounds + 1):
        rec.record(
            f"Update round {round_no}/{rounds}: advertising routing tables...",
            visited=reached(),
            traversed_edges=tree_links(graph, previous),
        )
        changed = False
        for u, v, w in edges:
            if distances[u] != math.inf and distances[u] + w < distances[v]:
                distances[v] = distances[u] + w
                previous[v] = (u, w)
                changed = True
                rec.record(
                    f"  -> Update: {graph.label_of(v)} via {graph.label_of(u)} "
                    f"(metric {format_number(distances[v])})",
                    current_node=v,
                    current_link=LinkRef(u, v),
                    visited=reached(),
                    traversed_edges=tree_links(graph, previous),
                )
        if not changed:
            rec.record(
                "Network converged.",
                visited=reached(),
                traversed_edges=tree_links(graph, previous),
            )
            break

    rec.record(
        "Checking for routing loops (negative cycles)...",
        visited=reached(),
        traversed_edges=tree_links(graph, previous),
    )
    for u, v, w in edges:
        if distances[u] != math.inf and distances[u] + w < distances[v]:
            logger.debug(f"Bellman-Ford from {start}: negative cycle via {u}->{v}")
            return rec.fail(
                "CRITICAL: negative cycle detected. The protocol cannot route!",
                current_link=LinkRef(u, v),
            )

    visited = reached()
    logger.debug(
        f"Bellman-Ford from {start} reached {len(visited)} of {len(node_ids)} nodes"
    )
    return _finish(rec, graph, distances, previous, visited, end, "RIP")
