"""Maximum flow (Edmonds-Karp) with step recording.

Residual capacities are kept per ordered node pair. Parallel links between the
same pair add up. For a directed link ``u -> v`` the reverse residual starts at
0 unless a real ``v -> u`` link exists; for an undirected link both
orientations start at the link capacity, so flow may run either way.

Flow shown per pair is inferred from residuals. With ``c`` the total pair
capacity and ``r`` the residual:
  - directed: ``max(0, c(u,v) - r(u,v))``;
  - undirected: whichever orientation has ``r < c`` carries ``c - r`` and the
    other carries 0. At most one orientation carries flow at a time.
"""

from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Tuple

from topotrace.algorithms.paths import format_number, format_path
from topotrace.algorithms.trace import StepRecorder, precondition_failure
from topotrace.algorithms.types import (
    AlgorithmResult,
    AlgorithmType,
    LinkRef,
    flow_key,
)
from topotrace.config import ENGINE_CONFIG
from topotrace.logging import get_logger
from topotrace.model.graph import Graph, NodeID

logger = get_logger(__name__)

Pair = Tuple[NodeID, NodeID]


class ResidualGraph:
    """Residual capacities of one max-flow run."""

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.capacity: Dict[Pair, float] = {}
        self.residual: Dict[Pair, float] = {}
        for link in graph.links:
            fwd = (link.source, link.target)
            rev = (link.target, link.source)
            cap = link.effective_capacity
            self.capacity[fwd] = self.capacity.get(fwd, 0.0) + cap
            self.residual[fwd] = self.residual.get(fwd, 0.0) + cap
            if graph.is_directed:
                self.residual.setdefault(rev, 0.0)
            else:
                self.capacity[rev] = self.capacity.get(rev, 0.0) + cap
                self.residual[rev] = self.residual.get(rev, 0.0) + cap
        # Scan order for BFS: candidate neighbors follow graph node order
        self._neighbors: Dict[NodeID, List[NodeID]] = {n: [] for n in graph.node_ids()}
        for v in graph.node_ids():
            for u in graph.node_ids():
                if (u, v) in self.residual:
                    self._neighbors[u].append(v)

    def neighbors(self, u: NodeID) -> List[NodeID]:
        return self._neighbors[u]

    def augment(self, path: List[NodeID], amount: float) -> None:
        for u, v in zip(path, path[1:]):
            self.residual[(u, v)] -= amount
            self.residual[(v, u)] += amount

    def flow_details(self) -> Dict[str, float]:
        """Flow per oriented pair, one entry per link orientation in the model."""
        details: Dict[str, float] = {}
        for link in self.graph.links:
            fwd = (link.source, link.target)
            rev = (link.target, link.source)
            fwd_key = flow_key(*fwd)
            if self.graph.is_directed:
                details[fwd_key] = max(0.0, self.capacity[fwd] - self.residual[fwd])
                continue
            rev_key = flow_key(*rev)
            cap = self.capacity[fwd]
            if self.residual[fwd] < cap:
                details[fwd_key] = cap - self.residual[fwd]
                details[rev_key] = 0.0
            elif self.residual[rev] < cap:
                details[rev_key] = cap - self.residual[rev]
                details[fwd_key] = 0.0
            else:
                details[fwd_key] = 0.0
                details[rev_key] = 0.0
        return details


def edmonds_karp(
    graph: Graph, source: Optional[NodeID], sink: Optional[NodeID]
) -> AlgorithmResult:
    """Maximum flow from ``source`` to ``sink`` using BFS augmenting paths.

    Each BFS emits a scan step and one step per frontier expansion. Each
    augmentation emits three steps: the path found, its bottleneck, and the
    refreshed per-pair flows.

    Args:
        graph: Graph snapshot; capacities default to weights.
        source: Source node id.
        sink: Sink node id.

    Returns:
        Result with ``max_flow``, ``flow_details`` and ``visited`` (every
        node reached by any augmenting-path search). Missing or unknown
        endpoints, or ``source == sink``, are rejected with a single step.
    """
    if source is None or sink is None:
        return precondition_failure(
            AlgorithmType.MAX_FLOW,
            "Max flow error: both a source and a sink must be selected.",
        )
    for role, node_id in (("Source", source), ("Sink", sink)):
        if not graph.has_node(node_id):
            return precondition_failure(
                AlgorithmType.MAX_FLOW,
                f"Max flow error: {role.lower()} node '{node_id}' is not in the network.",
            )
    if source == sink:
        return precondition_failure(
            AlgorithmType.MAX_FLOW,
            "Max flow error: source and sink must be different nodes.",
        )

    rec = StepRecorder(AlgorithmType.MAX_FLOW)
    residual = ResidualGraph(graph)
    min_cap = ENGINE_CONFIG.min_capacity
    total_flow = 0.0
    augmentations = 0
    # Nodes reached by any search so far; only ever grows
    explored: List[NodeID] = [source]

    rec.record(
        f"Traffic engineering: analysing flow from {graph.label_of(source)} "
        f"to {graph.label_of(sink)}",
        visited=explored,
        flow_details=residual.flow_details(),
    )

    def find_augmenting_path() -> Optional[List[NodeID]]:
        parent: Dict[NodeID, NodeID] = {}
        seen = {source}
        queue = deque([source])
        rec.record(
            "Scanning: searching for an available path (BFS)...",
            current_node=source,
            visited=explored,
            flow_details=residual.flow_details(),
        )
        while queue:
            u = queue.popleft()
            for v in residual.neighbors(u):
                cap = residual.residual[(u, v)]
                if v in seen or cap < min_cap:
                    continue
                parent[v] = u
                seen.add(v)
                queue.append(v)
                if v not in explored:
                    explored.append(v)
                rec.record(
                    f"  -> Visiting {graph.label_of(v)} (residual {format_number(cap)})",
                    current_node=v,
                    current_link=LinkRef(u, v),
                    visited=explored,
                    flow_details=residual.flow_details(),
                )
                if v == sink:
                    path = [sink]
                    while path[-1] != source:
                        path.append(parent[path[-1]])
                    path.reverse()
                    return path
        return None

    while True:
        path = find_augmenting_path()
        if path is None:
            break
        bottleneck = min(residual.residual[(u, v)] for u, v in zip(path, path[1:]))
        rec.record(
            f"Path found: {format_path(graph, path)}. Computing bottleneck...",
            path=path,
            visited=explored,
            flow_details=residual.flow_details(),
        )
        rec.record(
            f"  -> Bottleneck capacity = {format_number(bottleneck)} Mbps. "
            "Preparing to augment.",
            path=path,
            visited=explored,
            flow_details=residual.flow_details(),
        )
        residual.augment(path, bottleneck)
        total_flow += bottleneck
        augmentations += 1
        rec.record(
            f"Bandwidth update: +{format_number(bottleneck)} Mbps into the system.",
            path=path,
            visited=explored,
            flow_details=residual.flow_details(),
        )

    final_details = residual.flow_details()
    rec.record(
        "No augmenting path left (saturation point).",
        visited=explored,
        flow_details=final_details,
    )
    rec.record(
        f"ANALYSIS COMPLETE. MAXIMUM BANDWIDTH: {format_number(total_flow)} Mbps",
        visited=explored,
        flow_details=final_details,
    )

    logger.debug(
        f"Max flow {source}->{sink}: {total_flow} after {augmentations} augmentations"
    )
    return rec.build(max_flow=total_flow, visited=explored, flow_details=final_details)
