"""topotrace: traced graph algorithms for network topologies.

topotrace runs classic graph algorithms over a small network topology and
returns, for every run, both the final result and an ordered, replayable
trace of intermediate steps.

Primary API:
    Graph, Node, Link - Topology snapshot
    run_algorithm() - Dispatch one algorithm by AlgorithmType
    AlgorithmResult, AlgorithmStep - Result and trace types
    load_graph_file() - Read a YAML/JSON graph document

Example:
    from topotrace import Graph, Link, Node, run_algorithm

    graph = Graph(
        nodes=[Node("A"), Node("B"), Node("C")],
        links=[Link("A", "B", 1), Link("B", "C", 2), Link("A", "C", 4)],
    )
    result = run_algorithm("dijkstra", graph, start="A", end="C")
    result.path  # ('A', 'B', 'C')
    for line in result.logs:
        print(line)
"""

from __future__ import annotations

from topotrace import cli, logging
from topotrace._version import __version__
from topotrace.algorithms import (
    AlgorithmResult,
    AlgorithmStep,
    AlgorithmType,
    BipartiteSets,
    LinkRef,
    run_algorithm,
)
from topotrace.model import (
    SAMPLE_GRAPH,
    Graph,
    Link,
    Node,
    NodeKind,
    load_graph,
    load_graph_file,
    save_graph_file,
)

__all__ = [
    # Version
    "__version__",
    # Model
    "Graph",
    "Link",
    "Node",
    "NodeKind",
    "SAMPLE_GRAPH",
    "load_graph",
    "load_graph_file",
    "save_graph_file",
    # Engine
    "run_algorithm",
    "AlgorithmType",
    "AlgorithmResult",
    "AlgorithmStep",
    "BipartiteSets",
    "LinkRef",
    # Utilities
    "cli",
    "logging",
]
