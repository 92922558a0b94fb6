"""Network topology snapshot with NodeKind, Node, Link, and Graph classes.

A ``Graph`` is the read-only input to every algorithm in
``topotrace.algorithms``. Links are stored once; for undirected graphs the
algorithms treat each link as traversable both ways through their own derived
adjacency views, never by duplicating links here.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

NodeID = str


class NodeKind(str, Enum):
    """Device role of a node. Descriptive only."""

    ROUTER = "router"
    SWITCH = "switch"
    PC = "pc"
    SERVER = "server"


@dataclass(frozen=True)
class Node:
    """A network device.

    Attributes:
        id: Unique identifier; the only field algorithms rely on.
        label: Human-readable name used in trace log lines.
        kind: Device role.
    """

    id: NodeID
    label: str = ""
    kind: NodeKind = NodeKind.ROUTER

    @property
    def display_name(self) -> str:
        return self.label or self.id


@dataclass(frozen=True)
class Link:
    """A connection between two nodes.

    Attributes:
        source: Source node id.
        target: Target node id.
        weight: Cost used by shortest-path and spanning-tree algorithms.
        capacity: Throughput used by max flow. Falls back to ``weight`` when unset.
    """

    source: NodeID
    target: NodeID
    weight: float = 1.0
    capacity: Optional[float] = None

    @property
    def effective_capacity(self) -> float:
        return self.weight if self.capacity is None else self.capacity

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }
        if self.capacity is not None:
            data["capacity"] = self.capacity
        return data


@dataclass(frozen=True)
class Graph:
    """An immutable topology snapshot.

    Attributes:
        nodes: Nodes in insertion order. Order drives tie-breaking everywhere.
        links: Links in insertion order.
        is_directed: Whether links are one-way.
    """

    nodes: Tuple[Node, ...] = ()
    links: Tuple[Link, ...] = ()
    is_directed: bool = False
    _labels: Dict[NodeID, str] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "links", tuple(self.links))
        object.__setattr__(
            self, "_labels", {node.id: node.display_name for node in self.nodes}
        )

    def node_ids(self) -> List[NodeID]:
        """Return node ids in graph order."""
        return [node.id for node in self.nodes]

    def has_node(self, node_id: NodeID) -> bool:
        return node_id in self._labels

    def label_of(self, node_id: NodeID) -> str:
        """Return the display label of ``node_id``, or the id itself if unknown."""
        return self._labels.get(node_id, node_id)

    def labels_of(self, node_ids: Iterable[NodeID]) -> List[str]:
        return [self.label_of(node_id) for node_id in node_ids]

    def as_undirected(self) -> Graph:
        """Return the same snapshot with ``is_directed`` cleared."""
        if not self.is_directed:
            return self
        return replace(self, is_directed=False)

    def validate(self) -> None:
        """Check structural integrity.

        Raises:
            ValueError: On duplicate node ids or links referring to unknown nodes.
        """
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"Node '{node.id}' already exists in this graph.")
            seen.add(node.id)
        for link in self.links:
            if link.source not in seen:
                raise ValueError(f"Source node '{link.source}' does not exist.")
            if link.target not in seen:
                raise ValueError(f"Target node '{link.target}' does not exist.")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the node-link document shape used on disk."""
        return {
            "nodes": [
                {"id": n.id, "label": n.label, "type": n.kind.value}
                for n in self.nodes
            ],
            "links": [link.to_dict() for link in self.links],
            "isDirected": self.is_directed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Graph:
        """Build and validate a graph from a node-link document.

        Unknown keys (for example canvas coordinates) are ignored.

        Raises:
            ValueError: If the document is structurally invalid.
        """
        nodes = []
        for entry in data.get("nodes", []):
            kind = entry.get("type", entry.get("kind", NodeKind.ROUTER.value))
            try:
                node_kind = NodeKind(kind)
            except ValueError as exc:
                raise ValueError(
                    f"Unknown node type '{kind}' for node '{entry.get('id')}'"
                ) from exc
            nodes.append(
                Node(id=str(entry["id"]), label=entry.get("label", ""), kind=node_kind)
            )
        links = [
            Link(
                source=str(entry["source"]),
                target=str(entry["target"]),
                weight=entry.get("weight", 1.0),
                capacity=entry.get("capacity"),
            )
            for entry in data.get("links", [])
        ]
        is_directed = bool(data.get("isDirected", data.get("is_directed", False)))
        graph = cls(nodes=tuple(nodes), links=tuple(links), is_directed=is_directed)
        graph.validate()
        return graph


SAMPLE_GRAPH = Graph(
    nodes=(
        Node("n1", "Router A", NodeKind.ROUTER),
        Node("n2", "Switch 1", NodeKind.SWITCH),
        Node("n3", "PC 1", NodeKind.PC),
        Node("n4", "Server", NodeKind.SERVER),
        Node("n5", "Router B", NodeKind.ROUTER),
    ),
    links=(
        Link("n1", "n2", 10),
        Link("n1", "n3", 5),
        Link("n2", "n4", 8),
        Link("n2", "n5", 15),
        Link("n4", "n5", 20),
    ),
    is_directed=False,
)
