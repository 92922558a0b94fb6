"""Neighbor-list view derived from a ``Graph``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from topotrace.model.graph import Graph, NodeID


@dataclass(frozen=True)
class Neighbor:
    """One outgoing adjacency entry."""

    node: NodeID
    weight: float
    capacity: float


Adjacency = Dict[NodeID, List[Neighbor]]


def build_adjacency(graph: Graph) -> Adjacency:
    """Build the outgoing neighbor lists of ``graph``.

    Every node gets an entry, possibly empty. Each link adds ``source -> target``;
    undirected graphs also get the mirrored ``target -> source`` entry with the
    same weight and capacity. The view is built fresh per call and may be
    mutated by the caller.

    Args:
        graph: Well-formed graph snapshot.

    Returns:
        Mapping of node id to its neighbors, in link order.
    """
    adj: Adjacency = {node.id: [] for node in graph.nodes}
    for link in graph.links:
        capacity = link.effective_capacity
        adj[link.source].append(Neighbor(link.target, link.weight, capacity))
        if not graph.is_directed:
            adj[link.target].append(Neighbor(link.source, link.weight, capacity))
    return adj


def build_neighbor_ids(graph: Graph) -> Dict[NodeID, List[NodeID]]:
    """Like ``build_adjacency`` but keeping only neighbor ids.

    Used by algorithms that consume entries one by one (Eulerian walks).
    """
    return {
        node_id: [nbr.node for nbr in neighbors]
        for node_id, neighbors in build_adjacency(graph).items()
    }
