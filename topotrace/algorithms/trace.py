"""Step recording shared by every algorithm.

``StepRecorder`` snapshots whatever working collections an algorithm passes
in: sequences become tuples and mappings become read-only copies, so later
mutation of the algorithm's scratch state cannot leak into recorded steps.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional

from topotrace.algorithms.types import (
    AlgorithmResult,
    AlgorithmStep,
    AlgorithmType,
    BipartiteSets,
    LinkRef,
)
from topotrace.model.graph import NodeID

_SEQUENCE_FIELDS = ("visited", "path", "mst_links", "traversed_edges")


def freeze_mapping(mapping: Mapping[Any, Any]) -> Mapping[Any, Any]:
    """Return a read-only copy of ``mapping``."""
    return MappingProxyType(dict(mapping))


def zones(set_a: Iterable[NodeID], set_b: Iterable[NodeID]) -> BipartiteSets:
    return BipartiteSets(set_a=tuple(set_a), set_b=tuple(set_b))


class StepRecorder:
    """Accumulates the step trace of one algorithm run."""

    def __init__(self, algorithm: AlgorithmType) -> None:
        self.algorithm = algorithm
        self._steps: List[AlgorithmStep] = []

    def __len__(self) -> int:
        return len(self._steps)

    def record(
        self,
        log: str,
        current_node: Optional[NodeID] = None,
        current_link: Optional[LinkRef] = None,
        **fields: Any,
    ) -> AlgorithmStep:
        """Append a step holding copies of ``fields``.

        Args:
            log: Log line for this step.
            current_node: Node in focus.
            current_link: Link in focus.
            **fields: Any other ``AlgorithmStep`` field. Sequences are copied
                into tuples and ``flow_details`` into a read-only mapping.

        Returns:
            The recorded step.
        """
        for name in _SEQUENCE_FIELDS:
            if fields.get(name) is not None:
                fields[name] = tuple(fields[name])
        if fields.get("flow_details") is not None:
            fields["flow_details"] = freeze_mapping(fields["flow_details"])
        step = AlgorithmStep(
            log=log, current_node=current_node, current_link=current_link, **fields
        )
        self._steps.append(step)
        return step

    def build(self, **fields: Any) -> AlgorithmResult:
        """Freeze the trace and terminal fields into an ``AlgorithmResult``."""
        for name in _SEQUENCE_FIELDS + ("unreachable", "euler_path"):
            if fields.get(name) is not None:
                fields[name] = tuple(fields[name])
        for name in ("distances", "flow_details"):
            if fields.get(name) is not None:
                fields[name] = freeze_mapping(fields[name])
        return AlgorithmResult(
            algorithm=self.algorithm, steps=tuple(self._steps), **fields
        )

    def fail(self, message: str, **step_fields: Any) -> AlgorithmResult:
        """Record a fatal step and return a result carrying only the trace."""
        self.record(message, **step_fields)
        return self.build(error=message)


def precondition_failure(algorithm: AlgorithmType, message: str) -> AlgorithmResult:
    """Result for a run rejected before any work: a single explanatory step."""
    return StepRecorder(algorithm).fail(message)
