"""Graph Record Types.

Plain node/edge records consumed by the analytics core:
- GraphNode: Opaque string id plus arbitrary caller metadata
- GraphEdge: Edge between two nodes, endpoints given as ids or node records

The algorithms accept these models, plain mappings, or any object exposing
the same attribute names. The helpers below normalize all three shapes.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GraphNode(BaseModel):
    """Graph node.

    Only ``id`` is used by the algorithms. Extra attributes (label, path, ...)
    are preserved untouched.

    Example:
        >>> node = GraphNode(id="note:alpha", label="Alpha")
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Unique node identifier")
    label: Optional[str] = Field(default=None, description="Display label")


class GraphEdge(BaseModel):
    """Graph edge.

    ``source`` and ``target`` may be raw ids or embedded node records.
    ``predicate`` is read from the ``property`` key when validating mappings.

    Example:
        >>> edge = GraphEdge(id="e1", source="a", target="b", property="ex:cites")
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., description="Unique edge identifier")
    source: Union[str, GraphNode] = Field(..., description="Source node id or record")
    target: Union[str, GraphNode] = Field(..., description="Target node id or record")
    weight: Optional[float] = Field(default=None, description="Optional edge weight")
    predicate: Optional[str] = Field(
        default=None,
        alias="property",
        description="Edge predicate (relationship type)",
    )

    @property
    def source_id(self) -> str:
        return endpoint_id(self.source)

    @property
    def target_id(self) -> str:
        return endpoint_id(self.target)


def _attribute(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def endpoint_id(ref: Any) -> Optional[str]:
    """Return the node id referenced by an edge endpoint.

    Accepts a raw string id, a GraphNode, a mapping with an ``id`` key, or any
    object with an ``id`` attribute. Returns None when no id can be found.
    """
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref
    value = _attribute(ref, "id")
    return None if value is None else str(value)


def node_id(node: Any) -> Optional[str]:
    """Return the id of a node record of any accepted shape."""
    return endpoint_id(node)


def edge_id(edge: Any) -> Optional[str]:
    value = _attribute(edge, "id")
    return None if value is None else str(value)


def edge_endpoints(edge: Any) -> tuple[Optional[str], Optional[str]]:
    """Return ``(source_id, target_id)`` for an edge of any accepted shape."""
    return endpoint_id(_attribute(edge, "source")), endpoint_id(_attribute(edge, "target"))


def edge_weight(edge: Any) -> Optional[float]:
    """Return the edge's own weight, or None when it carries none."""
    value = _attribute(edge, "weight")
    if value is None:
        return None
    return float(value)


def edge_predicate(edge: Any) -> Optional[str]:
    """Return the edge predicate from ``predicate`` or ``property``."""
    value = _attribute(edge, "predicate")
    if value is None:
        value = _attribute(edge, "property")
    return value


def coerce_node(record: Any) -> GraphNode:
    """Convert any accepted node shape into a GraphNode."""
    if isinstance(record, GraphNode):
        return record
    if isinstance(record, Mapping):
        return GraphNode.model_validate(dict(record))
    return GraphNode(id=node_id(record))


def coerce_edge(record: Any) -> GraphEdge:
    """Convert any accepted edge shape into a GraphEdge."""
    if isinstance(record, GraphEdge):
        return record
    if isinstance(record, Mapping):
        return GraphEdge.model_validate(dict(record))
    source, target = edge_endpoints(record)
    return GraphEdge(
        id=edge_id(record),
        source=source,
        target=target,
        weight=edge_weight(record),
        predicate=edge_predicate(record),
    )
