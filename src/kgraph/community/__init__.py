"""Community Detection Module.

Partitions a node/edge graph into densely connected communities with the
Louvain method and scores partitions by modularity.

Example:
    >>> from kgraph.community import CommunityDetectionOptions, detect_communities

    >>> result = detect_communities(nodes, edges, CommunityDetectionOptions(random_seed=1))
    >>> for community in result.communities:
    ...     print(community.id, community.members)
"""

from kgraph.community.types import (
    Community,
    CommunityAssignment,
    CommunityDetectionOptions,
    CommunityDetectionResult,
)
from kgraph.community.louvain import LouvainDetector, detect_communities
from kgraph.community.modularity import calculate_modularity, partition_modularity

__all__ = [
    # Engine
    "LouvainDetector",
    "detect_communities",
    # Scoring
    "calculate_modularity",
    "partition_modularity",
    # Types
    "Community",
    "CommunityAssignment",
    "CommunityDetectionOptions",
    "CommunityDetectionResult",
]
