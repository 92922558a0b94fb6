"""Two-zone segmentation check (bipartiteness via BFS two-coloring)."""

from __future__ import annotations

from collections import deque
from typing import Dict, List

from topotrace.algorithms.adjacency import build_adjacency
from topotrace.algorithms.trace import StepRecorder, zones
from topotrace.algorithms.types import AlgorithmResult, AlgorithmType, LinkRef
from topotrace.logging import get_logger
from topotrace.model.graph import Graph, NodeID

logger = get_logger(__name__)

ZONE_NAMES = ("Zone A", "Zone B")


def check_bipartite(graph: Graph) -> AlgorithmResult:
    """Try to split the network into two zones with no link inside a zone.

    Coloring ignores link direction. Every uncolored node seeds a new
    component in Zone A. The first same-zone link found stops the whole scan,
    so zones are not guaranteed complete on failure.
    """
    rec = StepRecorder(AlgorithmType.BIPARTITE)
    adj = build_adjacency(graph.as_undirected())
    color: Dict[NodeID, int] = {}
    members: List[List[NodeID]] = [[], []]
    conflict = False

    rec.record(
        "Segmentation init: analysing network zones (bipartite check)...",
        bipartite_sets=zones(*members),
    )

    for seed in graph.node_ids():
        if seed in color:
            continue
        color[seed] = 0
        members[0].append(seed)
        rec.record(
            f"New segment from {graph.label_of(seed)} (assigned to Zone A).",
            current_node=seed,
            bipartite_sets=zones(*members),
        )

        queue = deque([seed])
        while queue and not conflict:
            u = queue.popleft()
            for nbr in adj[u]:
                v = nbr.node
                if v not in color:
                    color[v] = 1 - color[u]
                    members[color[v]].append(v)
                    queue.append(v)
                    rec.record(
                        f"  -> {graph.label_of(v)} assigned to {ZONE_NAMES[color[v]]}",
                        current_node=v,
                        current_link=LinkRef(u, v),
                        bipartite_sets=zones(*members),
                    )
                elif color[v] == color[u]:
                    conflict = True
                    rec.record(
                        f"CONFLICT: {graph.label_of(u)} and {graph.label_of(v)} are "
                        "in the same zone! The network cannot be split.",
                        current_link=LinkRef(u, v),
                        bipartite_sets=zones(*members),
                    )
                    break
        if conflict:
            break

    final_sets = zones(*members)
    if conflict:
        rec.record(
            "FAILED: the topology is interleaved and cannot be split into two "
            "independent zones.",
            bipartite_sets=final_sets,
        )
    else:
        rec.record(
            "SUCCESS: the network splits into two independent zones.\n"
            f"Zone A: {', '.join(graph.labels_of(members[0]))}\n"
            f"Zone B: {', '.join(graph.labels_of(members[1]))}",
            bipartite_sets=final_sets,
        )

    logger.debug(f"Bipartite check on {len(graph.nodes)} nodes: {not conflict}")
    return rec.build(is_bipartite=not conflict, bipartite_sets=final_sets)
