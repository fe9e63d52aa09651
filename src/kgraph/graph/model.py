"""
Dense Graph Structures.

Builds the integer-indexed structures both analytics engines work on:
1. WeightedGraph: Undirected weighted adjacency for community detection
2. PathGraph: Forward and reverse adjacency lists for path finding

Node ids are mapped once to dense indices; algorithms never touch string
keys in their inner loops. Edges whose endpoints are not in the node set are
dropped silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from kgraph.graph.types import edge_endpoints, edge_weight, node_id
from kgraph.graph.weights import DEFAULT_EDGE_WEIGHT, WeightFunction

logger = logging.getLogger(__name__)


def _index_nodes(nodes: Iterable[Any]) -> Tuple[List[str], Dict[str, int], List[Any]]:
    """Assign dense indices in input order. Duplicate ids keep the first record."""
    node_ids: List[str] = []
    index: Dict[str, int] = {}
    records: List[Any] = []
    for node in nodes:
        nid = node_id(node)
        if nid is None or nid in index:
            continue
        index[nid] = len(node_ids)
        node_ids.append(nid)
        records.append(node)
    return node_ids, index, records


@dataclass
class WeightedGraph:
    """Undirected weighted graph over dense node indices.

    ``total_weight`` is 2m: every edge weight counted from both endpoints.
    ``edges`` keeps the accepted ``(i, j, w)`` triples in input order.
    """

    node_ids: List[str] = field(default_factory=list)
    index: Dict[str, int] = field(default_factory=dict)
    adjacency: List[Dict[int, float]] = field(default_factory=list)
    degrees: List[float] = field(default_factory=list)
    total_weight: float = 0.0
    edges: List[Tuple[int, int, float]] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.node_ids)

    def add_edge(self, i: int, j: int, weight: float) -> None:
        """Add weight to both directions (a self-loop receives it twice)."""
        self.adjacency[i][j] = self.adjacency[i].get(j, 0.0) + weight
        self.adjacency[j][i] = self.adjacency[j].get(i, 0.0) + weight
        self.degrees[i] += weight
        self.degrees[j] += weight
        self.total_weight += 2 * weight
        self.edges.append((i, j, weight))


def build_weighted_graph(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    *,
    use_weights: bool = True,
    default_weight: float = DEFAULT_EDGE_WEIGHT,
) -> WeightedGraph:
    """Build the undirected weighted graph used for community detection.

    Args:
        nodes: Node records (models, mappings or objects with ``id``)
        edges: Edge records with ``source``/``target`` and optional ``weight``
        use_weights: Use each edge's own weight when present
        default_weight: Weight for edges without one, or for all edges when
            ``use_weights`` is False

    Returns:
        WeightedGraph with degrees and 2m precomputed
    """
    node_ids, index, _ = _index_nodes(nodes)
    graph = WeightedGraph(
        node_ids=node_ids,
        index=index,
        adjacency=[{} for _ in node_ids],
        degrees=[0.0] * len(node_ids),
    )

    dropped = 0
    for edge in edges:
        source, target = edge_endpoints(edge)
        i = index.get(source) if source is not None else None
        j = index.get(target) if target is not None else None
        if i is None or j is None:
            dropped += 1
            continue
        weight = edge_weight(edge) if use_weights else None
        graph.add_edge(i, j, default_weight if weight is None else weight)

    if dropped:
        logger.warning(f"Dropped {dropped} edges referencing unknown nodes")
    return graph


class AdjacencyEntry(NamedTuple):
    """One traversable edge from a node.

    ``is_reverse`` is True when following the entry walks against the edge's
    stored direction.
    """

    target: int
    edge: Any
    weight: float
    is_reverse: bool


@dataclass
class PathGraph:
    """Directed graph over dense indices with forward and reverse adjacency."""

    node_ids: List[str] = field(default_factory=list)
    nodes: List[Any] = field(default_factory=list)
    index: Dict[str, int] = field(default_factory=dict)
    forward: List[List[AdjacencyEntry]] = field(default_factory=list)
    reverse: List[List[AdjacencyEntry]] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.node_ids)

    def index_of(self, nid: str) -> Optional[int]:
        return self.index.get(nid)

    def neighbors(self, idx: int, direction: str) -> List[AdjacencyEntry]:
        """Entries reachable from ``idx``.

        ``outgoing`` follows forward adjacency, ``incoming`` reverse
        adjacency, anything else (``both``) their concatenation.
        """
        if direction == "outgoing":
            return self.forward[idx]
        if direction == "incoming":
            return self.reverse[idx]
        return self.forward[idx] + self.reverse[idx]


def build_path_graph(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    weight_fn: WeightFunction,
) -> PathGraph:
    """Build forward/reverse adjacency with weights from ``weight_fn``."""
    node_ids, index, records = _index_nodes(nodes)
    graph = PathGraph(
        node_ids=node_ids,
        nodes=records,
        index=index,
        forward=[[] for _ in node_ids],
        reverse=[[] for _ in node_ids],
    )

    dropped = 0
    for edge in edges:
        source, target = edge_endpoints(edge)
        i = index.get(source) if source is not None else None
        j = index.get(target) if target is not None else None
        if i is None or j is None:
            dropped += 1
            continue
        weight = float(weight_fn(edge))
        graph.forward[i].append(AdjacencyEntry(j, edge, weight, False))
        graph.reverse[j].append(AdjacencyEntry(i, edge, weight, True))

    if dropped:
        logger.warning(f"Dropped {dropped} edges referencing unknown nodes")
    return graph
