"""Community Detection Types.

Defines options and result models for community detection:
- CommunityDetectionOptions: Louvain tuning knobs (dataclass, all defaulted)
- CommunityAssignment: Community membership of one node
- Community: One detected community with size and weight statistics
- CommunityDetectionResult: Full detection outcome with modularity
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


@dataclass
class CommunityDetectionOptions:
    """Configuration for Louvain community detection.

    Example:
        >>> options = CommunityDetectionOptions(
        ...     resolution=1.5,  # Favour smaller communities
        ...     random_seed=7,
        ... )
    """

    resolution: float = 1.0
    """Scales the expected-edges term. Higher values give smaller communities. Default: 1.0."""

    max_iterations: int = 10
    """Maximum local-moving passes per level. Default: 10."""

    min_modularity_gain: float = 0.0001
    """Reported for callers; the local-moving loop stops on the first pass without moves. Default: 0.0001."""

    use_weights: bool = True
    """Use each edge's own weight when present. Default: True."""

    default_weight: float = 1.0
    """Weight for edges without one (or all edges when weights are off). Default: 1.0."""

    random_seed: Optional[int] = 42
    """Seed for node-order shuffling. None draws a fresh seed per run. Default: 42."""

    randomize_order: bool = True
    """Shuffle node visit order in each pass. Default: True."""

    @classmethod
    def default(cls) -> "CommunityDetectionOptions":
        """Options with every documented default."""
        return cls()


class CommunityAssignment(BaseModel):
    """Community membership of a single node."""

    node_id: str = Field(..., description="Node identifier")
    community_id: int = Field(..., ge=0, description="Contiguous community id")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0, description="Assignment confidence")
    level: int = Field(default=0, ge=0, description="Aggregation level of the final assignment")


class Community(BaseModel):
    """A detected community."""

    id: int = Field(..., ge=0, description="Contiguous community id")
    members: List[str] = Field(..., min_length=1, description="Member node ids in input order")
    internal_weight: float = Field(
        default=0.0,
        description="Sum of weights of edges with both endpoints in the community",
    )
    total_degree: float = Field(
        default=0.0,
        description="Sum of weighted degrees of member nodes",
    )

    @computed_field
    @property
    def size(self) -> int:
        """Number of member nodes."""
        return len(self.members)


class CommunityDetectionResult(BaseModel):
    """Result of a community detection run.

    Example:
        >>> result = detect_communities(nodes, edges)
        >>> result.community_of("a") == result.community_of("b")
        True
    """

    assignments: Dict[str, CommunityAssignment] = Field(
        default_factory=dict,
        description="Assignment per node id",
    )
    communities: List[Community] = Field(
        default_factory=list,
        description="Communities sorted by size, largest first",
    )
    modularity: float = Field(default=0.0, description="Modularity of the final partition")
    iterations: int = Field(default=0, ge=0, description="Local-moving phases run")
    levels: int = Field(default=0, ge=0, description="Aggregation levels")
    compute_time_ms: float = Field(default=0.0, ge=0.0, description="Wall-clock time")

    @computed_field
    @property
    def community_count(self) -> int:
        """Number of detected communities."""
        return len(self.communities)

    def community_of(self, node_id: str) -> Optional[int]:
        """Community id of a node, None for unknown nodes."""
        assignment = self.assignments.get(node_id)
        return assignment.community_id if assignment else None

    def members_of(self, community_id: int) -> List[str]:
        for community in self.communities:
            if community.id == community_id:
                return list(community.members)
        return []
