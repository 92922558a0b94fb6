"""Textbook representations of a graph: adjacency matrix, adjacency list, edge list."""

from __future__ import annotations

from typing import Dict, List, Optional

from topotrace.algorithms.paths import format_number
from topotrace.model.graph import Graph, Link, NodeID

VIEWS = ("matrix", "adj_list", "edge_list")


def _find_link(graph: Graph, source: NodeID, target: NodeID) -> Optional[Link]:
    for link in graph.links:
        if link.source == source and link.target == target:
            return link
        if not graph.is_directed and link.source == target and link.target == source:
            return link
    return None


def adjacency_matrix(graph: Graph) -> List[List[float]]:
    """Square matrix in node order holding the weight of the first matching link.

    Pairs without a link hold 0. Undirected graphs give a symmetric matrix.
    """
    node_ids = graph.node_ids()
    matrix = []
    for source in node_ids:
        row = []
        for target in node_ids:
            link = _find_link(graph, source, target)
            row.append(link.weight if link is not None else 0)
        matrix.append(row)
    return matrix


def adjacency_list(graph: Graph) -> Dict[str, List[str]]:
    """Map each node label to ``"<neighbor label>(<weight>)"`` entries."""
    adj: Dict[str, List[str]] = {node.display_name: [] for node in graph.nodes}
    for link in graph.links:
        source = graph.label_of(link.source)
        target = graph.label_of(link.target)
        weight = format_number(link.weight)
        adj.setdefault(source, []).append(f"{target}({weight})")
        if not graph.is_directed:
            adj.setdefault(target, []).append(f"{source}({weight})")
    return adj


def edge_list(graph: Graph) -> List[str]:
    """One line per link, e.g. ``Router A -- Switch 1 [weight=10]``."""
    arrow = "->" if graph.is_directed else "--"
    return [
        f"{graph.label_of(link.source)} {arrow} {graph.label_of(link.target)} "
        f"[weight={format_number(link.weight)}]"
        for link in graph.links
    ]


def render(graph: Graph, view: str) -> str:
    """Render one of ``VIEWS`` as plain text.

    Raises:
        ValueError: If ``view`` is unknown.
    """
    if view == "matrix":
        labels = [node.display_name for node in graph.nodes]
        width = max([len(label) for label in labels] + [5])
        lines = [" " * width + " " + " ".join(f"{label:>{width}}" for label in labels)]
        for label, row in zip(labels, adjacency_matrix(graph)):
            cells = " ".join(f"{format_number(value):>{width}}" for value in row)
            lines.append(f"{label:<{width}} {cells}")
        return "\n".join(lines)
    if view == "adj_list":
        return "\n".join(
            f"{label}: {', '.join(entries)}" for label, entries in adjacency_list(graph).items()
        )
    if view == "edge_list":
        return "\n".join(edge_list(graph))
    raise ValueError(f"Unknown view '{view}'. Expected one of {list(VIEWS)}")
