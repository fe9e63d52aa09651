"""Path Finding Types and Models.

Defines the option and result types for path queries:
- PathFindingAlgorithm: Search strategy enum
- PathDirection: Which edge directions may be traversed
- PathFindingOptions: Query options (dataclass, all defaulted)
- PathStep / Path / PathFindingResult: Pydantic result models
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from pydantic import BaseModel, Field, computed_field

from kgraph.graph.weights import EdgeWeightStrategy

SOURCE_NOT_FOUND = "Source node not found"
TARGET_NOT_FOUND = "Target node not found"
SEARCH_TIMED_OUT = "Search timed out"


class PathFindingAlgorithm(str, Enum):
    """Search strategies supported by the path finder."""

    BFS = "bfs"
    """Breadth-first search. Shortest path by edge count."""

    DIJKSTRA = "dijkstra"
    """Weighted shortest path using the configured edge weights."""

    BIDIRECTIONAL = "bidirectional"
    """Breadth-first search from both ends meeting in the middle."""

    @classmethod
    def parse(cls, value: Any) -> "PathFindingAlgorithm":
        """Coerce a name to an algorithm. Unknown names fall back to BFS."""
        try:
            return cls(value)
        except ValueError:
            return cls.BFS


class PathDirection(str, Enum):
    """Edge directions a search may follow."""

    OUTGOING = "outgoing"
    """Follow edges from source to target only."""

    INCOMING = "incoming"
    """Follow edges from target to source only."""

    BOTH = "both"
    """Treat edges as undirected."""

    def flipped(self) -> "PathDirection":
        """Direction used when searching backward from the target."""
        if self is PathDirection.OUTGOING:
            return PathDirection.INCOMING
        if self is PathDirection.INCOMING:
            return PathDirection.OUTGOING
        return PathDirection.BOTH


@dataclass
class PathFindingOptions:
    """Options for a path query.

    Example:
        >>> options = PathFindingOptions(
        ...     algorithm=PathFindingAlgorithm.DIJKSTRA,
        ...     weight_strategy=EdgeWeightStrategy.PREDICATE,
        ...     preferred_predicates=("ex:cites",),
        ... )
    """

    algorithm: PathFindingAlgorithm = PathFindingAlgorithm.BFS
    """Search strategy. Default: bfs."""

    max_length: int = 10
    """Maximum path length in edges. Default: 10."""

    direction: PathDirection = PathDirection.BOTH
    """Edge directions to follow. Default: both."""

    find_all_paths: bool = False
    """Return every optimal path (up to max_paths) instead of one. Default: False."""

    max_paths: int = 5
    """Cap on paths returned when find_all_paths is set. Default: 5."""

    weight_strategy: EdgeWeightStrategy = EdgeWeightStrategy.UNIFORM
    """How edge weights are derived. Default: uniform."""

    preferred_predicates: Tuple[str, ...] = ()
    """Predicates that cost 0.5 under the predicate strategy."""

    avoided_predicates: Tuple[str, ...] = ()
    """Predicates that cost 10 under the predicate strategy."""

    custom_weight_fn: Optional[Callable[[Any], float]] = None
    """Edge weight function overriding the strategy."""

    timeout_ms: float = 5000.0
    """Search budget in milliseconds. Default: 5000ms."""

    @classmethod
    def default(cls) -> "PathFindingOptions":
        """Options with every documented default."""
        return cls()

    def weight_key(self) -> Tuple[Any, ...]:
        """Fields that determine edge weights."""
        return (
            EdgeWeightStrategy(self.weight_strategy),
            tuple(self.preferred_predicates),
            tuple(self.avoided_predicates),
            self.custom_weight_fn,
        )


class PathStep(BaseModel):
    """One node along a path and the edge used to reach it."""

    node_id: str = Field(..., description="Node reached at this step")
    node: Any = Field(default=None, description="Original node record")
    edge_id: Optional[str] = Field(default=None, description="Edge used to reach the node")
    edge: Any = Field(default=None, description="Original edge record, None for the first step")
    is_reverse: bool = Field(
        default=False,
        description="True when the edge was walked against its direction",
    )
    cumulative_weight: float = Field(default=0.0, description="Distance from the source")


class Path(BaseModel):
    """A path between two nodes."""

    id: str = Field(..., description="Deterministic path identifier")
    source_id: str = Field(..., description="Start node")
    target_id: str = Field(..., description="End node")
    source: Any = Field(default=None, description="Original start node record")
    target: Any = Field(default=None, description="Original end node record")
    steps: List[PathStep] = Field(default_factory=list, description="Steps from source to target")
    total_weight: float = Field(default=0.0, description="Edge count or weighted distance")

    @computed_field
    @property
    def length(self) -> int:
        """Number of edges in the path."""
        return max(len(self.steps) - 1, 0)

    @computed_field
    @property
    def node_ids(self) -> List[str]:
        return [step.node_id for step in self.steps]

    @computed_field
    @property
    def edge_ids(self) -> List[str]:
        return [step.edge_id for step in self.steps[1:] if step.edge_id is not None]


class PathFindingResult(BaseModel):
    """Result of a path query.

    Expected failures (missing endpoint, no path, timeout) are reported here
    rather than raised. When the budget runs out while optimal paths are being
    enumerated, the paths collected so far are kept: ``found`` and
    ``timed_out`` are both set and ``error`` stays empty. ``error`` is only
    set for timeouts that produced no path.
    """

    found: bool = Field(default=False, description="True when at least one path was found")
    paths: List[Path] = Field(default_factory=list, description="Paths found")
    source_id: str = Field(..., description="Requested source")
    target_id: str = Field(..., description="Requested target")
    algorithm: PathFindingAlgorithm = Field(..., description="Algorithm that ran")
    nodes_visited: int = Field(default=0, ge=0, description="Nodes expanded or reached")
    search_time_ms: float = Field(default=0.0, ge=0.0, description="Wall-clock time")
    timed_out: bool = Field(
        default=False,
        description="True when the time budget ran out, even if some paths were kept",
    )
    error: Optional[str] = Field(default=None, description="Error message for failed queries")

    @property
    def shortest(self) -> Optional[Path]:
        return self.paths[0] if self.paths else None
