"""Topology model: nodes, links, graph snapshots, and their on-disk form."""

from topotrace.model.graph import SAMPLE_GRAPH, Graph, Link, Node, NodeID, NodeKind
from topotrace.model.loader import load_graph, load_graph_file, save_graph_file
from topotrace.model.nx import from_networkx, to_networkx

__all__ = [
    "Graph",
    "Link",
    "Node",
    "NodeID",
    "NodeKind",
    "SAMPLE_GRAPH",
    "load_graph",
    "load_graph_file",
    "save_graph_file",
    "from_networkx",
    "to_networkx",
]
