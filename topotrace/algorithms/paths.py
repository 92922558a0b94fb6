"""Predecessor-map helpers shared by the shortest-path algorithms.

A predecessor map stores, for each reached node, the node it was relaxed from
and the weight of the link used: ``{node: (pred, weight)}``. Unreached nodes
and the source map to ``None``.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from topotrace.config import ENGINE_CONFIG
from topotrace.model.graph import Graph, Link, NodeID

Predecessors = Dict[NodeID, Optional[Tuple[NodeID, float]]]


def reconstruct_path(previous: Predecessors, end: NodeID) -> List[NodeID]:
    """Walk predecessors back from ``end`` and return the forward path.

    The walk stops if a node repeats, so a corrupted map cannot loop forever.
    """
    path: List[NodeID] = []
    seen = set()
    current: Optional[NodeID] = end
    while current is not None:
        if current in seen:
            break
        seen.add(current)
        path.append(current)
        entry = previous.get(current)
        current = entry[0] if entry is not None else None
    path.reverse()
    return path


def tree_links(graph: Graph, previous: Predecessors) -> List[Link]:
    """Return the current predecessor tree as links, in graph node order."""
    links = []
    for node_id in graph.node_ids():
        entry = previous.get(node_id)
        if entry is not None:
            pred, weight = entry
            links.append(Link(source=pred, target=node_id, weight=weight))
    return links


def format_path(graph: Graph, path: Sequence[NodeID]) -> str:
    """Render a node path with labels, e.g. ``Router A -> Switch 1``."""
    return ENGINE_CONFIG.path_separator.join(graph.labels_of(path))


def format_number(value: float) -> str:
    """Render integral floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
