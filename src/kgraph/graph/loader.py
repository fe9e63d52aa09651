"""JSON graph file loading.

Reads documents of the form::

    {"nodes": [{"id": "a", ...}], "edges": [{"source": "a", "target": "b", ...}]}

into GraphNode/GraphEdge models. Structural problems in the document raise
GraphLoadError; edges pointing at unknown nodes are left in place for the
graph builders to drop.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from kgraph.exceptions import GraphLoadError
from kgraph.graph.types import GraphEdge, GraphNode, endpoint_id

logger = logging.getLogger(__name__)

PAYLOAD_SOURCE = "<payload>"


@dataclass
class GraphData:
    """Nodes and edges loaded from a graph document."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]


def load_graph_file(path: Union[str, Path]) -> GraphData:
    """Load a graph document from disk."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GraphLoadError(path, "file cannot be read", cause=exc) from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GraphLoadError(path, f"invalid JSON at line {exc.lineno}", cause=exc) from exc

    graph = parse_graph_payload(payload, source=str(path))
    logger.info(f"Loaded graph from {path}: {len(graph.nodes)} nodes, {len(graph.edges)} edges")
    return graph


def parse_graph_payload(payload: Any, source: str = PAYLOAD_SOURCE) -> GraphData:
    """Validate an already-decoded graph document."""
    if not isinstance(payload, dict):
        raise GraphLoadError(source, "document must be a JSON object")

    raw_nodes = payload.get("nodes", [])
    raw_edges = payload.get("edges", [])
    if not isinstance(raw_nodes, list):
        raise GraphLoadError(source, "'nodes' must be a list")
    if not isinstance(raw_edges, list):
        raise GraphLoadError(source, "'edges' must be a list")

    nodes: List[GraphNode] = []
    for position, raw in enumerate(raw_nodes):
        if isinstance(raw, str):
            raw = {"id": raw}
        try:
            nodes.append(GraphNode.model_validate(raw))
        except ValidationError as exc:
            raise GraphLoadError(source, f"node #{position} is invalid", cause=exc) from exc

    edges: List[GraphEdge] = []
    for position, raw in enumerate(raw_edges):
        if not isinstance(raw, dict):
            raise GraphLoadError(source, f"edge #{position} must be an object")
        edges.append(_parse_edge(raw, position, source))

    return GraphData(nodes=nodes, edges=edges)


def _parse_edge(raw: Dict[str, Any], position: int, source: str) -> GraphEdge:
    data = dict(raw)
    src = endpoint_id(data.get("source"))
    dst = endpoint_id(data.get("target"))
    if src is None or dst is None:
        raise GraphLoadError(source, f"edge #{position} is missing source or target")
    if data.get("id") is None:
        data["id"] = f"{src}->{dst}#{position}"
    try:
        return GraphEdge.model_validate(data)
    except ValidationError as exc:
        raise GraphLoadError(source, f"edge #{position} is invalid", cause=exc) from exc
