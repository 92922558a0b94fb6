"""NetworkX graph conversion utilities.

Example:
    >>> from topotrace.model.graph import SAMPLE_GRAPH
    >>> from topotrace.model.nx import to_networkx, from_networkx
    >>> G = to_networkx(SAMPLE_GRAPH)
    >>> G["n1"]["n2"]["weight"]
    10
    >>> graph = from_networkx(G)
"""

from __future__ import annotations

from typing import Union

import networkx as nx

from topotrace.model.graph import Graph, Link, Node, NodeKind

NxGraph = Union[nx.Graph, nx.DiGraph]


def to_networkx(graph: Graph) -> NxGraph:
    """Convert a ``Graph`` into a simple NetworkX graph.

    Parallel links between the same pair collapse into one NetworkX edge that
    keeps the minimum weight and the summed capacity, which is what
    shortest-path and max-flow comparisons need.

    Args:
        graph: Source topology.

    Returns:
        ``nx.DiGraph`` for directed graphs, ``nx.Graph`` otherwise.
    """
    nx_graph: NxGraph = nx.DiGraph() if graph.is_directed else nx.Graph()
    for node in graph.nodes:
        nx_graph.add_node(node.id, label=node.label, kind=node.kind.value)

    for link in graph.links:
        if nx_graph.has_edge(link.source, link.target):
            data = nx_graph.edges[link.source, link.target]
            data["weight"] = min(data["weight"], link.weight)
            data["capacity"] += link.effective_capacity
        else:
            nx_graph.add_edge(
                link.source,
                link.target,
                weight=link.weight,
                capacity=link.effective_capacity,
            )
    return nx_graph


def from_networkx(nx_graph: NxGraph) -> Graph:
    """Convert a NetworkX graph into a ``Graph``.

    Node attributes ``label`` and ``kind`` and edge attributes ``weight`` and
    ``capacity`` are honored when present.

    Raises:
        ValueError: If a node carries an unknown ``kind``.
    """
    nodes = []
    for node_id, data in nx_graph.nodes(data=True):
        nodes.append(
            Node(
                id=str(node_id),
                label=data.get("label", ""),
                kind=NodeKind(data.get("kind", NodeKind.ROUTER.value)),
            )
        )
    links = [
        Link(
            source=str(u),
            target=str(v),
            weight=data.get("weight", 1.0),
            capacity=data.get("capacity"),
        )
        for u, v, data in nx_graph.edges(data=True)
    ]
    return Graph(nodes=tuple(nodes), links=tuple(links), is_directed=nx_graph.is_directed())
