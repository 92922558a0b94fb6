"""YAML/JSON loader + schema validation for graph documents.

Provides a single entrypoint to parse a document string, validate it against
the packaged JSON schema, and return a validated ``Graph``. JSON is a subset
of YAML, so one parser handles both formats.
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema
import yaml

from topotrace.logging import get_logger
from topotrace.model.graph import Graph

logger = get_logger(__name__)


def _load_schema() -> Dict[str, Any]:
    with (
        resources.files("topotrace.schemas")
        .joinpath("graph.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def load_graph(text: str) -> Graph:
    """Load, validate, and build a graph from a YAML or JSON string.

    Raises:
        ValueError: If the document is not a mapping or is structurally invalid
            (duplicate node ids, dangling link endpoints).
        jsonschema.ValidationError: If the document does not match the schema.
    """
    data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided graph document must map to a dictionary at top-level.")

    jsonschema.validate(data, _load_schema())

    graph = Graph.from_dict(data)
    logger.debug(
        f"Loaded graph with {len(graph.nodes)} nodes and {len(graph.links)} links "
        f"({'directed' if graph.is_directed else 'undirected'})"
    )
    return graph


def load_graph_file(path: Union[str, Path]) -> Graph:
    """Load a graph document from ``path``."""
    path = Path(path)
    logger.info(f"Loading graph from: {path}")
    return load_graph(path.read_text(encoding="utf-8"))


def save_graph_file(graph: Graph, path: Union[str, Path]) -> None:
    """Write ``graph`` to ``path`` as a JSON document."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(graph.to_dict(), indent=2), encoding="utf-8")
    logger.info(f"Graph saved to: {path}")
