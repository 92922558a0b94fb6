"""Breadth-first and depth-first traversal with step recording.

BFS simulates a broadcast spreading hop by hop; DFS simulates a deep trace that
follows one branch to its end before backing up.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Tuple

from topotrace.algorithms.adjacency import build_adjacency
from topotrace.algorithms.paths import format_number
from topotrace.algorithms.trace import StepRecorder
from topotrace.algorithms.types import AlgorithmResult, AlgorithmType, LinkRef
from topotrace.logging import get_logger
from topotrace.model.graph import Graph, Link, NodeID

logger = get_logger(__name__)


def _require_node(graph: Graph, node_id: NodeID) -> None:
    if not graph.has_node(node_id):
        raise KeyError(f"Source node '{node_id}' is not in the graph.")


def bfs(graph: Graph, start: NodeID) -> AlgorithmResult:
    """Breadth-first search from ``start``.

    Emits one step per dequeued node and one per newly discovered neighbor.

    Raises:
        KeyError: If ``start`` is not in the graph.
    """
    _require_node(graph, start)
    rec = StepRecorder(AlgorithmType.BFS)
    adj = build_adjacency(graph)

    visited: List[NodeID] = []
    traversed: List[Link] = []
    discovered = {start}
    queue = deque([start])

    rec.record(
        f"Broadcast init: flooding packets from source {graph.label_of(start)}",
        current_node=start,
        visited=visited,
    )

    while queue:
        u = queue.popleft()
        visited.append(u)
        rec.record(
            f"Packet reached {graph.label_of(u)}",
            current_node=u,
            visited=visited,
            traversed_edges=traversed,
        )
        for nbr in adj[u]:
            if nbr.node in discovered:
                continue
            discovered.add(nbr.node)
            queue.append(nbr.node)
            traversed.append(Link(u, nbr.node, nbr.weight))
            rec.record(
                f"  -> Forwarding to {graph.label_of(nbr.node)}",
                current_node=u,
                current_link=LinkRef(u, nbr.node),
                visited=visited,
                traversed_edges=traversed,
            )

    logger.debug(f"BFS from {start} reached {len(visited)} of {len(graph.nodes)} nodes")
    return rec.build(visited=visited, traversed_edges=traversed)


def dfs(graph: Graph, start: NodeID) -> AlgorithmResult:
    """Depth-first search from ``start``.

    The stack carries ``(node, discovered_from, weight)`` so the discovery link
    of each node is known when it is visited. Neighbors are pushed in reverse
    so they are explored in adjacency order.

    Raises:
        KeyError: If ``start`` is not in the graph.
    """
    _require_node(graph, start)
    rec = StepRecorder(AlgorithmType.DFS)
    adj = build_adjacency(graph)

    visited: List[NodeID] = []
    seen = set()
    traversed: List[Link] = []
    stack: List[Tuple[NodeID, Optional[NodeID], float]] = [(start, None, 0.0)]

    rec.record(
        f"Deep trace: depth-first scan from {graph.label_of(start)}",
        current_node=start,
        visited=visited,
    )

    while stack:
        u, parent, weight = stack.pop()
        if u in seen:
            continue
        seen.add(u)
        visited.append(u)

        link_ref = None
        if parent is not None:
            traversed.append(Link(parent, u, weight))
            link_ref = LinkRef(parent, u)
            log = (
                f"Scanning {graph.label_of(u)} via {graph.label_of(parent)} "
                f"(cost {format_number(weight)})"
            )
        else:
            log = f"Scanning {graph.label_of(u)}"
        rec.record(
            log,
            current_node=u,
            current_link=link_ref,
            visited=visited,
            traversed_edges=traversed,
        )

        for nbr in reversed(adj[u]):
            if nbr.node not in seen:
                stack.append((nbr.node, u, nbr.weight))

    logger.debug(f"DFS from {start} reached {len(visited)} of {len(graph.nodes)} nodes")
    return rec.build(visited=visited, traversed_edges=traversed)
