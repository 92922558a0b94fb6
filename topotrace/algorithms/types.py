"""Types and data structures for algorithm traces and results.

Every algorithm returns an ``AlgorithmResult``: the terminal state plus an
ordered tuple of ``AlgorithmStep`` snapshots. Each step owns immutable copies
of its fields, so step ``i`` can be rendered without replaying steps
``0..i-1`` and never reflects state recorded after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from topotrace.model.graph import Link, NodeID

FlowDetails = Mapping[str, float]


def flow_key(source: NodeID, target: NodeID) -> str:
    """Key of an oriented node pair in ``flow_details``."""
    return f"{source}->{target}"


class AlgorithmType(str, Enum):
    """Algorithms exposed by the engine."""

    BFS = "bfs"
    DFS = "dfs"
    DIJKSTRA = "dijkstra"
    BELLMAN_FORD = "bellman_ford"
    PRIM = "prim"
    KRUSKAL = "kruskal"
    MAX_FLOW = "max_flow"
    FLEURY = "fleury"
    HIERHOLZER = "hierholzer"
    BIPARTITE = "bipartite"


@dataclass(frozen=True)
class LinkRef:
    """Oriented reference to the link an algorithm is looking at."""

    source: NodeID
    target: NodeID

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target}


@dataclass(frozen=True)
class BipartiteSets:
    """The two zones of a two-coloring, in assignment order."""

    set_a: Tuple[NodeID, ...] = ()
    set_b: Tuple[NodeID, ...] = ()

    def to_dict(self) -> Dict[str, List[NodeID]]:
        return {"setA": list(self.set_a), "setB": list(self.set_b)}


def _links_to_list(links: Optional[Tuple[Link, ...]]) -> Optional[List[Dict[str, Any]]]:
    return None if links is None else [link.to_dict() for link in links]


@dataclass(frozen=True)
class AlgorithmStep:
    """One replayable moment of an algorithm run.

    Attributes:
        log: Human-readable description of the step.
        current_node: Node being processed, if any.
        current_link: Link being examined, if any.
        visited: Cumulative visited/settled nodes.
        path: Path under consideration.
        mst_links: Cumulative tree links (spanning tree or shortest-path tree).
        traversed_edges: Cumulative discovery/tree edges.
        flow_details: Flow per oriented pair at this moment.
        bipartite_sets: Zone assignment so far.
    """

    log: str
    current_node: Optional[NodeID] = None
    current_link: Optional[LinkRef] = None
    visited: Optional[Tuple[NodeID, ...]] = None
    path: Optional[Tuple[NodeID, ...]] = None
    mst_links: Optional[Tuple[Link, ...]] = None
    traversed_edges: Optional[Tuple[Link, ...]] = None
    flow_details: Optional[FlowDetails] = None
    bipartite_sets: Optional[BipartiteSets] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize present fields using the external camelCase contract."""
        data: Dict[str, Any] = {"log": self.log}
        if self.current_node is not None:
            data["currentNodeId"] = self.current_node
        if self.current_link is not None:
            data["currentLinkId"] = self.current_link.to_dict()
        if self.visited is not None:
            data["visited"] = list(self.visited)
        if self.path is not None:
            data["path"] = list(self.path)
        if self.mst_links is not None:
            data["mstLinks"] = _links_to_list(self.mst_links)
        if self.traversed_edges is not None:
            data["traversedEdges"] = _links_to_list(self.traversed_edges)
        if self.flow_details is not None:
            data["flowDetails"] = dict(self.flow_details)
        if self.bipartite_sets is not None:
            data["bipartiteSets"] = self.bipartite_sets.to_dict()
        return data


@dataclass(frozen=True)
class AlgorithmResult:
    """Terminal state of one algorithm run plus its full step trace.

    ``error`` is set when the run hit a fatal condition (failed precondition or
    a detected negative cycle); in that case no computed fields are populated.
    Partial outcomes such as unreachable destinations or spanning forests are
    not errors.

    Attributes:
        algorithm: Which algorithm produced this result.
        steps: Ordered trace, one log line per step.
        error: Fatal message, if the run was rejected.
        visited: Nodes visited/settled, in order.
        path: Node path (shortest path, augmenting walk, Euler walk).
        distances: Shortest-path distance per node, ``math.inf`` if unreachable.
        unreachable: Nodes with infinite distance.
        mst_links: Spanning-tree links or shortest-path-tree links.
        traversed_edges: Discovery edges of a traversal.
        total_cost: Spanning tree/forest cost.
        max_flow: Maximum flow value.
        flow_details: Final flow per oriented pair.
        is_bipartite: Outcome of the two-coloring.
        bipartite_sets: Zones found by the two-coloring.
        euler_path: Walk covering every link exactly once.
    """

    algorithm: AlgorithmType
    steps: Tuple[AlgorithmStep, ...] = ()
    error: Optional[str] = None
    visited: Optional[Tuple[NodeID, ...]] = None
    path: Optional[Tuple[NodeID, ...]] = None
    distances: Optional[Mapping[NodeID, float]] = None
    unreachable: Optional[Tuple[NodeID, ...]] = None
    mst_links: Optional[Tuple[Link, ...]] = None
    traversed_edges: Optional[Tuple[Link, ...]] = None
    total_cost: Optional[float] = None
    max_flow: Optional[float] = None
    flow_details: Optional[FlowDetails] = None
    is_bipartite: Optional[bool] = None
    bipartite_sets: Optional[BipartiteSets] = None
    euler_path: Optional[Tuple[NodeID, ...]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def logs(self) -> List[str]:
        return [step.log for step in self.steps]

    def to_dict(self, include_steps: bool = True) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary.

        Infinite distances are rendered as ``None``.
        """
        data: Dict[str, Any] = {"algorithm": self.algorithm.value, "logs": self.logs}
        if self.error is not None:
            data["error"] = self.error
        if self.visited is not None:
            data["visited"] = list(self.visited)
        if self.path is not None:
            data["path"] = list(self.path)
        if self.distances is not None:
            data["distances"] = {
                k: (None if v == float("inf") else v) for k, v in self.distances.items()
            }
        if self.unreachable is not None:
            data["unreachable"] = list(self.unreachable)
        if self.mst_links is not None:
            data["mstLinks"] = _links_to_list(self.mst_links)
        if self.traversed_edges is not None:
            data["traversedEdges"] = _links_to_list(self.traversed_edges)
        if self.total_cost is not None:
            data["totalCost"] = self.total_cost
        if self.max_flow is not None:
            data["maxFlow"] = self.max_flow
        if self.flow_details is not None:
            data["flowDetails"] = dict(self.flow_details)
        if self.is_bipartite is not None:
            data["isBipartite"] = self.is_bipartite
        if self.bipartite_sets is not None:
            data["bipartiteSets"] = self.bipartite_sets.to_dict()
        if self.euler_path is not None:
            data["eulerPath"] = list(self.euler_path)
        if include_steps:
            data["steps"] = [step.to_dict() for step in self.steps]
        return data
