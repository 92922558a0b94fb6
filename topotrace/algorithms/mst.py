"""Minimum spanning tree algorithms (backbone design).

Both algorithms only accept undirected graphs. On a disconnected graph Prim
returns the tree of the start node's component and Kruskal returns a spanning
forest; neither case is an error.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

from topotrace.algorithms.adjacency import build_adjacency
from topotrace.algorithms.paths import format_number
from topotrace.algorithms.trace import StepRecorder, precondition_failure
from topotrace.algorithms.types import AlgorithmResult, AlgorithmType, LinkRef
from topotrace.logging import get_logger
from topotrace.model.graph import Graph, Link, NodeID

logger = get_logger(__name__)


class UnionFind:
    """Disjoint sets over node ids with recursive ``find``."""

    def __init__(self, items: Iterable[NodeID]) -> None:
        self.parent: Dict[NodeID, NodeID] = {item: item for item in items}

    def find(self, item: NodeID) -> NodeID:
        parent = self.parent[item]
        if parent == item:
            return item
        return self.find(parent)

    def union(self, a: NodeID, b: NodeID) -> bool:
        """Merge the sets of ``a`` and ``b``.

        Returns:
            False if they were already in the same set.
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        self.parent[root_a] = root_b
        return True


def prim(graph: Graph) -> AlgorithmResult:
    """Prim's minimum spanning tree, grown from the first node.

    Each round settles the unreached node with the smallest connecting cost
    (ties go to the node listed first) and records the accepted tree link.
    """
    if graph.is_directed:
        return precondition_failure(
            AlgorithmType.PRIM,
            "Prim error: backbone design only applies to undirected networks.",
        )
    if not graph.nodes:
        return precondition_failure(
            AlgorithmType.PRIM, "Prim error: the network has no nodes."
        )

    rec = StepRecorder(AlgorithmType.PRIM)
    adj = build_adjacency(graph)
    node_ids = graph.node_ids()
    key: Dict[NodeID, float] = {n: math.inf for n in node_ids}
    parent: Dict[NodeID, Optional[NodeID]] = {n: None for n in node_ids}
    in_tree = set()
    visited: List[NodeID] = []
    tree: List[Link] = []
    total_cost = 0.0

    start = node_ids[0]
    key[start] = 0.0
    rec.record(
        f"Design init: building the backbone from core {graph.label_of(start)}",
        current_node=start,
        mst_links=tree,
        visited=visited,
    )

    while len(in_tree) < len(node_ids):
        candidates = [n for n in node_ids if n not in in_tree and key[n] != math.inf]
        if not candidates:
            break
        u = min(candidates, key=lambda n: key[n])
        in_tree.add(u)
        visited.append(u)

        pred = parent[u]
        if pred is not None:
            tree.append(Link(pred, u, key[u]))
            total_cost += key[u]
            rec.record(
                f"Laying cable: {graph.label_of(pred)} <==> {graph.label_of(u)} "
                f"(cost {format_number(key[u])})",
                current_node=u,
                current_link=LinkRef(pred, u),
                mst_links=tree,
                visited=visited,
            )
        else:
            rec.record(
                f"Active node: {graph.label_of(u)}",
                current_node=u,
                mst_links=tree,
                visited=visited,
            )

        for nbr in adj[u]:
            if nbr.node not in in_tree and nbr.weight < key[nbr.node]:
                key[nbr.node] = nbr.weight
                parent[nbr.node] = u

    if len(in_tree) < len(node_ids):
        rec.record(
            "WARNING: the network is disconnected. Result covers only the component "
            f"of {graph.label_of(start)} (minimum spanning forest so far).",
            mst_links=tree,
            visited=visited,
        )
    else:
        rec.record("Backbone design complete (MST).", mst_links=tree, visited=visited)
    rec.record(
        f"TOTAL DEPLOYMENT COST: {format_number(total_cost)}",
        mst_links=tree,
        visited=visited,
    )

    logger.debug(f"Prim selected {len(tree)} links, total cost {total_cost}")
    return rec.build(
        mst_links=tree, visited=visited, total_cost=total_cost
    )


def kruskal(graph: Graph) -> AlgorithmResult:
    """Kruskal's minimum spanning tree (or forest).

    Links are evaluated in ascending weight order, ties in link order. Each
    evaluation emits an "under evaluation" step followed by an accepted or
    rejected step.
    """
    if graph.is_directed:
        return precondition_failure(
            AlgorithmType.KRUSKAL,
            "Kruskal error: only applies to undirected network models.",
        )

    rec = StepRecorder(AlgorithmType.KRUSKAL)
    sets = UnionFind(graph.node_ids())
    ordered = sorted(graph.links, key=lambda link: link.weight)
    tree: List[Link] = []
    connected: List[NodeID] = []
    total_cost = 0.0

    def mark(node_id: NodeID) -> None:
        if node_id not in connected:
            connected.append(node_id)

    rec.record(
        "Link cost audit: links sorted by ascending cost.",
        mst_links=tree,
        visited=connected,
    )

    for link in ordered:
        rec.record(
            f"Evaluating link {graph.label_of(link.source)} - "
            f"{graph.label_of(link.target)} (cost {format_number(link.weight)})",
            current_link=LinkRef(link.source, link.target),
            mst_links=tree,
            visited=connected,
        )
        if sets.union(link.source, link.target):
            tree.append(link)
            total_cost += link.weight
            mark(link.source)
            mark(link.target)
            rec.record(
                "  -> ACCEPTED: added to the backbone.", mst_links=tree, visited=connected
            )
        else:
            rec.record(
                "  -> REJECTED: would form a cycle (redundant loop).",
                mst_links=tree,
                visited=connected,
            )

    if len(tree) < len(graph.nodes) - 1:
        rec.record(
            "NOTE: the graph is disconnected. Result is a minimum spanning forest.",
            mst_links=tree,
            visited=connected,
        )
    else:
        rec.record(
            "Cable cost optimization complete (MST).", mst_links=tree, visited=connected
        )
    rec.record(
        f"TOTAL INFRASTRUCTURE COST: {format_number(total_cost)}",
        mst_links=tree,
        visited=connected,
    )

    logger.debug(f"Kruskal accepted {len(tree)} of {len(graph.links)} links")
    return rec.build(mst_links=tree, visited=connected, total_cost=total_cost)
